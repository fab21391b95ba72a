"""Structural operations over the ordered section list of a document.

Every function takes a :class:`Document` and returns a new one. Operations
that would move or delete the header or footer, or carry a section across
them, leave the document untouched; pass ``strict=True`` to get a
:class:`StructuralViolation` instead.
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Any, Callable

from .errors import StructuralViolation
from .models.document import FRAME_KINDS, Document, ListItem, Section, SectionContent, SectionKind
from .registry import DEFAULT_LIST_ITEM, default_content

logger = logging.getLogger(__name__)


class MoveDirection(str, Enum):
    up = "up"
    down = "down"


class SectionIdFactory:
    """Issues ``<kind>-<nanoseconds>`` ids that strictly increase.

    Two calls within the same clock tick still get distinct ids, so an id
    that was handed out once is never produced again by this factory.
    """

    def __init__(self, clock: Callable[[], int] = time.time_ns) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self, kind: SectionKind) -> str:
        with self._lock:
            stamp = max(self._clock(), self._last + 1)
            self._last = stamp
        return f"{SectionKind(kind).value}-{stamp}"


new_section_id = SectionIdFactory()

IdFactory = Callable[[SectionKind], str]


def _reject(document: Document, message: str, *, strict: bool, **extra: object) -> Document:
    if strict:
        raise StructuralViolation(message)
    logger.debug(message, extra=extra)
    return document


def _fresh_id(kind: SectionKind, taken: set[str], id_factory: IdFactory) -> str:
    section_id = id_factory(kind)
    while section_id in taken:
        section_id = id_factory(kind)
    return section_id


def build_section(kind: SectionKind | str, *, section_id: str) -> Section:
    kind = SectionKind(kind)
    return Section.model_validate(
        {"id": section_id, "kind": kind, "content": default_content(kind)}
    )


def add_section(
    document: Document,
    kind: SectionKind | str,
    *,
    id_factory: IdFactory = new_section_id,
    strict: bool = False,
) -> Document:
    kind = SectionKind(kind)
    if kind in FRAME_KINDS:
        return _reject(
            document, f"A document holds exactly one {kind.value}", strict=strict, kind=kind.value
        )

    section = build_section(kind, section_id=_fresh_id(kind, set(document.section_ids), id_factory))
    sections = list(document.sections)
    footer_index = next(
        (i for i, s in enumerate(sections) if s.kind is SectionKind.footer), len(sections)
    )
    sections.insert(footer_index, section)
    logger.debug("Added section", extra={"section_id": section.id, "kind": kind.value})
    return document.with_sections(sections)


def remove_section(document: Document, section_id: str, *, strict: bool = False) -> Document:
    section = document.find_section(section_id)
    if section is None:
        logger.debug("Ignoring removal of unknown section", extra={"section_id": section_id})
        return document
    if not section.is_movable:
        return _reject(
            document,
            f"The {section.kind.value} section cannot be removed",
            strict=strict,
            section_id=section_id,
        )
    return document.with_sections(s for s in document.sections if s.id != section_id)


def move_section(
    document: Document,
    index: int,
    direction: MoveDirection | str,
    *,
    strict: bool = False,
) -> Document:
    direction = MoveDirection(direction)
    target = index - 1 if direction is MoveDirection.up else index + 1
    sections = list(document.sections)
    if not (0 <= index < len(sections) and 0 <= target < len(sections)):
        logger.debug("Ignoring out of range move", extra={"index": index, "direction": direction.value})
        return document
    if not (sections[index].is_movable and sections[target].is_movable):
        return _reject(
            document,
            "Sections cannot move across the header or footer",
            strict=strict,
            index=index,
            direction=direction.value,
        )
    sections[index], sections[target] = sections[target], sections[index]
    return document.with_sections(sections)


def add_list_item(document: Document, section_id: str) -> Document:
    section = document.find_section(section_id)
    if section is None:
        return document
    items = (*section.content.item_list, dict(DEFAULT_LIST_ITEM))
    return document.replace_section(_with_items(section, items))


def remove_list_item(document: Document, section_id: str, item_index: int) -> Document:
    section = document.find_section(section_id)
    if section is None:
        return document
    items = section.content.item_list
    if not 0 <= item_index < len(items):
        return document
    return document.replace_section(_with_items(section, items[:item_index] + items[item_index + 1 :]))


def _with_items(section: Section, items: tuple[Any, ...]) -> Section:
    # Revalidated so a list holding raw entries stays raw and a clean one stays typed.
    content = section.content.model_dump(mode="json", by_alias=True, exclude_none=True)
    content["items"] = [
        item.model_dump(mode="json", by_alias=True, exclude_none=True) if isinstance(item, ListItem) else item
        for item in items
    ]
    return section.model_copy(update={"content": SectionContent.model_validate(content)})


def normalize_frame(document: Document, *, id_factory: IdFactory = new_section_id) -> Document:
    """Put a document into the header-first, footer-last shape with unique ids.

    Missing frame sections are created from registry defaults, surplus ones
    are dropped and repeated ids are replaced. Used when a document enters
    the editor from outside.
    """
    headers = [s for s in document.sections if s.kind is SectionKind.header]
    footers = [s for s in document.sections if s.kind is SectionKind.footer]
    body = [s for s in document.sections if s.is_movable]

    if len(headers) > 1 or len(footers) > 1:
        logger.warning(
            "Dropping surplus frame sections",
            extra={"headers": len(headers), "footers": len(footers)},
        )

    taken = set(document.section_ids)
    header = headers[0] if headers else build_section(
        SectionKind.header, section_id=_fresh_id(SectionKind.header, taken, id_factory)
    )
    footer = footers[0] if footers else build_section(
        SectionKind.footer, section_id=_fresh_id(SectionKind.footer, taken, id_factory)
    )
    if not headers or not footers:
        logger.warning(
            "Inserted missing frame sections",
            extra={"header_added": not headers, "footer_added": not footers},
        )

    seen: set[str] = set()
    ordered: list[Section] = []
    for section in (header, *body, footer):
        if section.id in seen:
            replacement = _fresh_id(section.kind, taken | seen, id_factory)
            logger.warning(
                "Re-keyed duplicate section id",
                extra={"section_id": section.id, "replacement": replacement},
            )
            section = section.model_copy(update={"id": replacement})
        seen.add(section.id)
        ordered.append(section)

    if tuple(ordered) == document.sections:
        return document
    return document.with_sections(ordered)


__all__ = [
    "IdFactory",
    "MoveDirection",
    "SectionIdFactory",
    "add_list_item",
    "add_section",
    "build_section",
    "move_section",
    "new_section_id",
    "normalize_frame",
    "remove_list_item",
    "remove_section",
]
