from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Iterable, Mapping, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, JsonValue, model_validator
from pydantic.alias_generators import to_camel


class SectionKind(str, Enum):
    header = "header"
    hero = "hero"
    about = "about"
    services = "services"
    gallery = "gallery"
    testimonials = "testimonials"
    contact = "contact"
    footer = "footer"


FRAME_KINDS = frozenset({SectionKind.header, SectionKind.footer})


class DocumentNode(BaseModel):
    """Common configuration for every node of a site document.

    Nodes are frozen, exchanged with camelCase keys, and keep unknown keys so
    content written for a field the registry does not list is never lost.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )


# Content values are typed where they match the usual shape and kept as raw
# JSON otherwise, so a number or an unexpected list survives a round trip.
Text = Annotated[Union[str, JsonValue], Field(union_mode="left_to_right")]


class Link(DocumentNode):
    name: Text = ""
    url: Text = ""


class CtaButton(DocumentNode):
    text: Text = ""
    url: Text = ""


class ListItem(DocumentNode):
    title: Text = ""
    description: Text = ""
    price: Text = None
    image_url: Text = None
    icon: Text = None


Items = Annotated[Union[Tuple[ListItem, ...], JsonValue], Field(union_mode="left_to_right")]
Images = Annotated[Union[Tuple[str, ...], JsonValue], Field(union_mode="left_to_right")]
Links = Annotated[Union[Tuple[Link, ...], JsonValue], Field(union_mode="left_to_right")]
Button = Annotated[Union[CtaButton, JsonValue], Field(union_mode="left_to_right")]


class SectionContent(DocumentNode):
    title: Text = None
    subtitle: Text = None
    text: Text = None
    image_url: Text = None
    logo_url: Text = None
    items: Items = None
    images: Images = None
    links: Links = None
    nav_links: Links = None
    cta_button: Button = None

    @property
    def item_list(self) -> tuple[Any, ...]:
        """``items`` as a tuple, empty when absent or not a list."""
        return tuple(self.items) if isinstance(self.items, (list, tuple)) else ()


class SectionStyle(DocumentNode):
    background_color: Text = None
    text_color: Text = None


Style = Annotated[Union[SectionStyle, JsonValue], Field(union_mode="left_to_right")]


class Section(DocumentNode):
    id: str
    kind: SectionKind = Field(validation_alias=AliasChoices("kind", "type"))
    content: SectionContent = Field(default_factory=SectionContent)
    style: Style = None

    @property
    def is_movable(self) -> bool:
        return self.kind not in FRAME_KINDS


class Theme(DocumentNode):
    primary_color: Text = "#7c3aed"
    secondary_color: Text = "#4c1d95"
    font_family: Text = "Inter"


class Document(DocumentNode):
    name: Text = Field(validation_alias=AliasChoices("name", "businessName"))
    language: Text = ""
    theme: Theme = Field(default_factory=Theme)
    sections: tuple[Section, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _lift_home_page(cls, data: Any) -> Any:
        # Generator payloads nest the section list under pages.home.
        if isinstance(data, Mapping) and "sections" not in data and "pages" in data:
            data = dict(data)
            pages = data.pop("pages") or {}
            data["sections"] = pages.get("home", []) if isinstance(pages, Mapping) else []
        return data

    @classmethod
    def from_tree(cls, tree: Mapping[str, Any]) -> "Document":
        return cls.model_validate(tree)

    @classmethod
    def from_json(cls, text: str | bytes) -> "Document":
        return cls.model_validate_json(text)

    def to_tree(self) -> dict[str, Any]:
        """Canonical map view used for path addressing and interchange."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, *, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    @property
    def section_ids(self) -> tuple[str, ...]:
        return tuple(section.id for section in self.sections)

    @property
    def header(self) -> Section | None:
        return next((s for s in self.sections if s.kind is SectionKind.header), None)

    @property
    def footer(self) -> Section | None:
        return next((s for s in self.sections if s.kind is SectionKind.footer), None)

    def find_section(self, section_id: str) -> Section | None:
        return next((s for s in self.sections if s.id == section_id), None)

    def index_of(self, section_id: str) -> int | None:
        for index, section in enumerate(self.sections):
            if section.id == section_id:
                return index
        return None

    def section_path(self, section_id: str, *segments: str) -> str:
        """Build a dotted path into the section currently holding ``section_id``."""
        index = self.index_of(section_id)
        if index is None:
            raise KeyError(section_id)
        return ".".join(("sections", str(index), *segments))

    def with_sections(self, sections: Iterable[Section]) -> "Document":
        return self.model_copy(update={"sections": tuple(sections)})

    def replace_section(self, section: Section) -> "Document":
        return self.with_sections(section if s.id == section.id else s for s in self.sections)


__all__ = [
    "CtaButton",
    "Document",
    "DocumentNode",
    "FRAME_KINDS",
    "Link",
    "ListItem",
    "Section",
    "SectionContent",
    "SectionKind",
    "SectionStyle",
    "Theme",
]
