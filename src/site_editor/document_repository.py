from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .models.document import Document


class DocumentRepository(Protocol):
    def get(self, site_id: str) -> Document:
        ...

    def save(self, site_id: str, document: Document) -> None:
        ...


class LocalDocumentRepository:
    """Stores each site document as ``<site_id>.json`` under a base directory."""

    def __init__(self, *, base_path: Path) -> None:
        self._base_path = base_path

    def get(self, site_id: str) -> Document:
        file_path = self._path_for(site_id)
        if not file_path.exists():
            raise FileNotFoundError(f"Site document not found: {file_path}")
        return Document.from_json(file_path.read_text(encoding="utf-8"))

    def save(self, site_id: str, document: Document) -> None:
        self._base_path.mkdir(parents=True, exist_ok=True)
        self._path_for(site_id).write_text(document.to_json(), encoding="utf-8")

    def _path_for(self, site_id: str) -> Path:
        safe = site_id.replace("/", "-").replace("\\", "-")
        return self._base_path / f"{safe}.json"


__all__ = ["DocumentRepository", "LocalDocumentRepository"]
