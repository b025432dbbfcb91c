from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

PRETTY = orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE


def read_json(path: Path) -> Any:
    try:
        return orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        msg = f"{path} is not valid JSON: {exc}"
        raise ValueError(msg) from exc


def read_json_object(path: Path) -> dict[str, Any]:
    data = read_json(path)
    if not isinstance(data, dict):
        msg = f"{path} must hold a JSON object, got {type(data).__name__}"
        raise ValueError(msg)
    return data


def encode_json(payload: Any, *, pretty: bool = True) -> bytes:
    return orjson.dumps(payload, option=PRETTY if pretty else None)


def replace_json_file(path: Path, payload: Any) -> None:
    """Stage ``payload`` beside ``path`` and rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    staged = path.with_name(f".{path.name}.partial")
    staged.write_bytes(encode_json(payload))
    staged.replace(path)
