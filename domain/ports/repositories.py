from __future__ import annotations

from pathlib import Path
from typing import Protocol

from domain.models import Document


class DocumentRepository(Protocol):
    def load(self, path: Path) -> Document: ...

    def save(self, document: Document, path: Path) -> None: ...
