from __future__ import annotations

from pathlib import Path

from filelock import FileLock

from adapters.filesystem.json_utils import read_json_object, replace_json_file
from domain.models import Document
from domain.ports.repositories import DocumentRepository


class FileSystemDocumentRepository(DocumentRepository):
    def load(self, path: Path) -> Document:
        return Document.model_validate(read_json_object(path))

    def save(self, document: Document, path: Path) -> None:
        lock_path = path.with_suffix(f"{path.suffix}.lock")
        with FileLock(str(lock_path)):
            replace_json_file(path, document.to_payload())
