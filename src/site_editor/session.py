from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable

from pydantic import ValidationError

from . import sections as ops
from .errors import InvalidPath, SessionNotLoadedError
from .models.document import Document, Section, SectionKind
from .paths import get_at_path, is_index, set_at_path, split_path
from .theme import ThemePalette, derive_palette

logger = logging.getLogger(__name__)

ThemeListener = Callable[[ThemePalette], None]


class SessionState(str, Enum):
    empty = "EMPTY"
    editing = "EDITING"


class EditingSession:
    """Holds the document being edited plus the editor's selection state.

    Every command swaps ``document`` for a new value; the previous document is
    never modified. Commands other than :meth:`load` require a loaded
    document and raise :class:`SessionNotLoadedError` otherwise.
    """

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id
        self.generating = False
        self.panel_open = True
        self.revision = 0
        self.lock = threading.RLock()
        self._document: Document | None = None
        self._selected_id: str | None = None
        self._theme_listeners: list[ThemeListener] = []

    @property
    def state(self) -> SessionState:
        return SessionState.empty if self._document is None else SessionState.editing

    @property
    def document(self) -> Document:
        return self._require_document()

    @property
    def selected_section_id(self) -> str | None:
        return self._selected_id

    @property
    def selected_section(self) -> Section | None:
        if self._document is None or self._selected_id is None:
            return None
        return self._document.find_section(self._selected_id)

    def begin_generation(self) -> None:
        self.generating = True

    def load(self, document: Document) -> None:
        document = ops.normalize_frame(document)
        self.generating = False
        self._selected_id = None
        self._replace(document, theme_changed=True)
        logger.info(
            "Loaded document",
            extra={"session_id": self.session_id, "sections": len(document.sections)},
        )

    def edit_field(self, path: str, value: Any) -> Document:
        current = self._require_document()
        _guard_identity(path)
        tree = set_at_path(current.to_tree(), path, value)
        try:
            document = Document.from_tree(tree)
        except ValidationError as exc:
            raise InvalidPath(path, f"value rejected: {exc.errors()[0]['msg']}") from exc
        return self._replace(document, theme_changed=split_path(path)[0] == "theme")

    def read_field(self, path: str, default: Any = None) -> Any:
        """Value at ``path`` in the canonical tree, or ``default`` when absent."""
        return get_at_path(self._require_document().to_tree(), path, default)

    def update_theme(self, field: str, value: Any) -> Document:
        return self.edit_field(f"theme.{field}", value)

    def select_section(self, section_id: str | None) -> None:
        current = self._require_document()
        if section_id is not None and current.find_section(section_id) is None:
            section_id = None
        self._selected_id = section_id

    def section_path(self, section_id: str, *segments: str) -> str:
        return self._require_document().section_path(section_id, *segments)

    def add_section(self, kind: SectionKind | str) -> Document:
        return self._replace(ops.add_section(self._require_document(), kind))

    def remove_section(self, section_id: str) -> Document:
        document = self._replace(ops.remove_section(self._require_document(), section_id))
        if self._selected_id == section_id and document.find_section(section_id) is None:
            self._selected_id = None
        return document

    def move_section(self, index: int, direction: ops.MoveDirection | str) -> Document:
        return self._replace(ops.move_section(self._require_document(), index, direction))

    def add_list_item(self, section_id: str) -> Document:
        return self._replace(ops.add_list_item(self._require_document(), section_id))

    def remove_list_item(self, section_id: str, item_index: int) -> Document:
        return self._replace(ops.remove_list_item(self._require_document(), section_id, item_index))

    def toggle_panel(self) -> bool:
        self.panel_open = not self.panel_open
        return self.panel_open

    def set_panel_open(self, is_open: bool) -> None:
        self.panel_open = is_open

    def palette(self) -> ThemePalette:
        return derive_palette(self._require_document().theme)

    def add_theme_listener(self, listener: ThemeListener) -> None:
        self._theme_listeners.append(listener)

    def _require_document(self) -> Document:
        if self._document is None:
            raise SessionNotLoadedError("No document has been loaded into this session")
        return self._document

    def _replace(self, document: Document, *, theme_changed: bool = False) -> Document:
        if document is self._document:
            return document
        previous = self._document
        self._document = document
        self.revision += 1
        if theme_changed and (previous is None or previous.theme != document.theme):
            palette = derive_palette(document.theme)
            for listener in list(self._theme_listeners):
                listener(palette)
        return document


def _guard_identity(path: str) -> None:
    """Reject writes that would replace a section or its id/kind."""
    segments = split_path(path)
    if segments[0] != "sections":
        return
    if len(segments) == 1:
        raise InvalidPath(path, "the section list is changed through section commands")
    if is_index(segments[1]) and (len(segments) == 2 or segments[2] in {"id", "kind", "type"}):
        raise InvalidPath(path, "section identity cannot be edited")


__all__ = ["EditingSession", "SessionState", "ThemeListener"]
