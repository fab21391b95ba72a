from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

from .models.document import FRAME_KINDS, SectionKind, Theme


class FieldShape(str, Enum):
    scalar = "scalar"
    record_list = "record_list"
    string_list = "string_list"
    link_list = "link_list"
    link = "link"


FIELD_SHAPES: Mapping[str, FieldShape] = {
    "title": FieldShape.scalar,
    "subtitle": FieldShape.scalar,
    "text": FieldShape.scalar,
    "imageUrl": FieldShape.scalar,
    "logoUrl": FieldShape.scalar,
    "items": FieldShape.record_list,
    "images": FieldShape.string_list,
    "links": FieldShape.link_list,
    "navLinks": FieldShape.link_list,
    "ctaButton": FieldShape.link,
}


@dataclass(frozen=True)
class SectionDefinition:
    kind: SectionKind
    label: str
    fields: Sequence[str]
    default_content: Mapping[str, Any]

    @property
    def movable(self) -> bool:
        return self.kind not in FRAME_KINDS

    @property
    def uses_items(self) -> bool:
        return "items" in self.fields


PLACEHOLDER_IMAGE = "https://picsum.photos/800/600"

DEFAULT_LIST_ITEM: Mapping[str, str] = {
    "title": "New Item",
    "description": "New description",
    "price": "$0",
}

DEFAULT_THEME = Theme()

FONT_FAMILIES: Sequence[str] = ("Inter", "Poppins", "Lato", "Roboto", "Montserrat")


SECTION_REGISTRY: Mapping[SectionKind, SectionDefinition] = {
    SectionKind.header: SectionDefinition(
        kind=SectionKind.header,
        label="Header",
        fields=("logoUrl", "navLinks", "ctaButton"),
        default_content={
            "logoUrl": "https://picsum.photos/150/50",
            "navLinks": [{"name": "Home", "url": "#"}],
            "ctaButton": {"text": "Contact Us", "url": "#contact"},
        },
    ),
    SectionKind.hero: SectionDefinition(
        kind=SectionKind.hero,
        label="Hero Banner",
        fields=("title", "subtitle", "imageUrl", "ctaButton"),
        default_content={
            "title": "New Section Title",
            "subtitle": "This is some default text for your new section. Click to edit!",
            "imageUrl": "https://picsum.photos/1920/1080",
        },
    ),
    SectionKind.about: SectionDefinition(
        kind=SectionKind.about,
        label="About Us",
        fields=("title", "text", "imageUrl"),
        default_content={
            "title": "New Section Title",
            "text": "This is some default text for your new section. Click to edit!",
            "imageUrl": PLACEHOLDER_IMAGE,
        },
    ),
    SectionKind.services: SectionDefinition(
        kind=SectionKind.services,
        label="Services",
        fields=("title", "subtitle", "items"),
        default_content={
            "title": "New Section Title",
            "subtitle": "This is some default text for your new section. Click to edit!",
            "items": [{"title": "New Item", "description": "Description"}],
        },
    ),
    SectionKind.gallery: SectionDefinition(
        kind=SectionKind.gallery,
        label="Gallery",
        fields=("title", "images"),
        default_content={
            "title": "New Section Title",
            "images": [PLACEHOLDER_IMAGE],
        },
    ),
    SectionKind.testimonials: SectionDefinition(
        kind=SectionKind.testimonials,
        label="Testimonials",
        fields=("title", "items"),
        default_content={
            "title": "New Section Title",
            "items": [{"title": "New Item", "description": "Description"}],
        },
    ),
    SectionKind.contact: SectionDefinition(
        kind=SectionKind.contact,
        label="Contact Form",
        fields=("title", "text"),
        default_content={
            "title": "New Section Title",
            "text": "This is some default text for your new section. Click to edit!",
        },
    ),
    SectionKind.footer: SectionDefinition(
        kind=SectionKind.footer,
        label="Footer",
        fields=("text", "links"),
        default_content={
            "text": "All rights reserved.",
            "links": [],
        },
    ),
}

ADDABLE_KINDS: Sequence[SectionKind] = tuple(
    kind for kind, definition in SECTION_REGISTRY.items() if definition.movable
)


def get_definition(kind: SectionKind | str) -> SectionDefinition:
    return SECTION_REGISTRY[SectionKind(kind)]


def display_name(kind: SectionKind | str) -> str:
    return get_definition(kind).label


def expected_fields(kind: SectionKind | str) -> Sequence[str]:
    return get_definition(kind).fields


def editors_for(kind: SectionKind | str) -> dict[str, FieldShape]:
    """Map each content field a kind uses to the shape of editor it needs."""
    return {name: FIELD_SHAPES[name] for name in get_definition(kind).fields}


def default_content(kind: SectionKind | str) -> dict[str, Any]:
    return copy.deepcopy(dict(get_definition(kind).default_content))


__all__ = [
    "ADDABLE_KINDS",
    "DEFAULT_LIST_ITEM",
    "DEFAULT_THEME",
    "FIELD_SHAPES",
    "FONT_FAMILIES",
    "FieldShape",
    "PLACEHOLDER_IMAGE",
    "SECTION_REGISTRY",
    "SectionDefinition",
    "default_content",
    "display_name",
    "editors_for",
    "expected_fields",
    "get_definition",
]
