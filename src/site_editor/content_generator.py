from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping, Protocol

from pydantic import ValidationError

from .errors import GenerationFailure
from .models.business import BusinessInfo
from .models.document import Document, SectionKind
from .models.marketing import MarketingCampaign
from .registry import DEFAULT_THEME
from .sections import IdFactory, new_section_id, normalize_frame

logger = logging.getLogger(__name__)


class JsonModel(Protocol):
    def generate_json(
        self,
        prompt: str,
        *,
        response_schema: Mapping[str, Any] | None = None,
        temperature: float = 0.7,
        max_output_tokens: int = 8192,
    ) -> Any:
        ...


_STRING = {"type": "STRING"}
_OPTIONAL_STRING = {"type": "STRING", "nullable": True}
_LINK_LIST = {
    "type": "ARRAY",
    "nullable": True,
    "items": {"type": "OBJECT", "properties": {"name": _STRING, "url": _STRING}},
}

SITE_SCHEMA: Mapping[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "businessName": _STRING,
        "language": _STRING,
        "pages": {
            "type": "OBJECT",
            "properties": {
                "home": {
                    "type": "ARRAY",
                    "items": {
                        "type": "OBJECT",
                        "properties": {
                            "id": _STRING,
                            "type": _STRING,
                            "content": {
                                "type": "OBJECT",
                                "properties": {
                                    "title": _OPTIONAL_STRING,
                                    "subtitle": _OPTIONAL_STRING,
                                    "text": _OPTIONAL_STRING,
                                    "imageUrl": _OPTIONAL_STRING,
                                    "logoUrl": _OPTIONAL_STRING,
                                    "items": {
                                        "type": "ARRAY",
                                        "nullable": True,
                                        "items": {
                                            "type": "OBJECT",
                                            "properties": {
                                                "title": _STRING,
                                                "description": _STRING,
                                                "price": _OPTIONAL_STRING,
                                                "imageUrl": _OPTIONAL_STRING,
                                            },
                                        },
                                    },
                                    "images": {"type": "ARRAY", "nullable": True, "items": _STRING},
                                    "links": _LINK_LIST,
                                    "navLinks": _LINK_LIST,
                                    "ctaButton": {
                                        "type": "OBJECT",
                                        "nullable": True,
                                        "properties": {"text": _STRING, "url": _STRING},
                                    },
                                },
                            },
                        },
                    },
                }
            },
        },
        "theme": {
            "type": "OBJECT",
            "properties": {
                "primaryColor": _STRING,
                "secondaryColor": _STRING,
                "fontFamily": _STRING,
            },
        },
    },
}

CAMPAIGN_SCHEMA: Mapping[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "googleAd": {
            "type": "OBJECT",
            "properties": {"headline": _STRING, "description": _STRING, "cta": _STRING},
        },
        "facebookPost": {
            "type": "OBJECT",
            "properties": {"text": _STRING, "imageDescription": _STRING},
        },
        "email": {
            "type": "OBJECT",
            "properties": {"subject": _STRING, "body": _STRING},
        },
    },
}


def build_site_prompt(info: BusinessInfo, *, year: int) -> str:
    return f"""You are an expert website designer and copywriter.
Generate a complete JSON structure for a professional, industry-specific website.
The business is a "{info.type}" called "{info.name}" in "{info.location}".
Generate all content in the following language: "{info.language}".
The JSON output MUST conform to the response schema. Do not add extra fields.
- Create the sections in this order: 'header', 'hero', 'about', 'services', 'testimonials', 'gallery', 'contact', 'footer'.
- Give every section a unique 'id'.
- For the 'header' section: provide navLinks (e.g. Home, About, Services, Contact) and a ctaButton with text.
- Write persuasive, high-converting copy for all text fields.
- For all 'imageUrl' or 'logoUrl' fields, provide a realistic, high-quality image URL from Unsplash or Pexels using keywords related to the business type and location.
- For 'services' items, include a title, a short description and a realistic price.
- For 'gallery', provide at least 4 image URLs.
- For 'testimonials', create 3 realistic testimonials. Use 'title' for the person's name and 'description' for the quote.
- For the 'footer', put a copyright notice for {year} and the business name in 'text', and social media links in 'links'.
- For the 'theme': provide a hex 'primaryColor', a complementary hex 'secondaryColor' and a Google Fonts 'fontFamily' (e.g. 'Inter', 'Poppins', 'Lato').
"""


def build_campaign_prompt(info: BusinessInfo, campaign_goal: str) -> str:
    return f"""You are a marketing expert. Generate a complete, ready-to-use marketing campaign for a {info.type} called "{info.name}".
The campaign goal is: "{campaign_goal}".
The campaign should be in this language: {info.language}.

Generate a JSON object with three keys: "googleAd", "facebookPost" and "email".
- "googleAd": a "headline" (max 30 chars), a "description" (max 90 chars) and a "cta".
- "facebookPost": "text" (engaging and friendly, with emojis) and an "imageDescription" for an image generator.
- "email": a "subject" and a plain text "body", concise and persuasive.
"""


def fallback_document(info: BusinessInfo, *, year: int) -> Document:
    """Deterministic site used whenever generation fails."""
    return Document.model_validate(
        {
            "name": info.name,
            "language": info.language,
            "theme": DEFAULT_THEME.model_dump(by_alias=True),
            "sections": [
                {
                    "id": "header",
                    "kind": "header",
                    "content": {
                        "logoUrl": "https://picsum.photos/150/50",
                        "navLinks": [{"name": "Home", "url": "#"}],
                        "ctaButton": {"text": "Contact Us", "url": "#"},
                    },
                },
                {
                    "id": "hero",
                    "kind": "hero",
                    "content": {
                        "title": f"Welcome to {info.name}",
                        "subtitle": "Error generating content. Please try again.",
                        "imageUrl": "https://picsum.photos/1920/1080",
                    },
                },
                {
                    "id": "contact",
                    "kind": "contact",
                    "content": {
                        "title": "Contact Us",
                        "text": "We hit a snag. Please provide your details below.",
                    },
                },
                {
                    "id": "footer",
                    "kind": "footer",
                    "content": {"text": f"© {year} {info.name}. All rights reserved.", "links": []},
                },
            ],
        }
    )


@dataclass
class SiteDraft:
    document: Document
    used_fallback: bool = False
    error: str | None = None


class ContentGenerator:
    def __init__(
        self,
        *,
        model: JsonModel | None = None,
        id_factory: IdFactory = new_section_id,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._model = model
        self._id_factory = id_factory
        self._today = today

    @property
    def configured(self) -> bool:
        return self._model is not None

    def generate_site(self, info: BusinessInfo) -> SiteDraft:
        year = self._today().year
        if self._model is None:
            logger.warning("No content model configured, using fallback site", extra={"business": info.name})
            return SiteDraft(
                document=fallback_document(info, year=year),
                used_fallback=True,
                error="No content model is configured",
            )

        try:
            raw = self._model.generate_json(build_site_prompt(info, year=year), response_schema=SITE_SCHEMA)
            document = self._parse_document(raw, info)
        except Exception as exc:
            logger.error(
                "Failed to generate website content",
                exc_info=True,
                extra={"business": info.name, "language": info.language},
            )
            return SiteDraft(document=fallback_document(info, year=year), used_fallback=True, error=str(exc))

        logger.info(
            "Generated website content",
            extra={"business": info.name, "sections": len(document.sections)},
        )
        return SiteDraft(document=document)

    def generate_campaign(self, info: BusinessInfo, campaign_goal: str) -> MarketingCampaign:
        if not campaign_goal.strip():
            raise ValueError("A campaign goal is required")
        if self._model is None:
            raise GenerationFailure("No content model is configured")

        try:
            raw = self._model.generate_json(
                build_campaign_prompt(info, campaign_goal), response_schema=CAMPAIGN_SCHEMA
            )
            return MarketingCampaign.model_validate(raw)
        except GenerationFailure:
            raise
        except ValidationError as exc:
            raise GenerationFailure(f"Campaign response did not match the expected shape: {exc}") from exc
        except Exception as exc:
            logger.error("Failed to generate marketing campaign", exc_info=True, extra={"business": info.name})
            raise GenerationFailure(str(exc)) from exc

    def _parse_document(self, raw: Any, info: BusinessInfo) -> Document:
        if not isinstance(raw, Mapping):
            raise GenerationFailure(f"Expected a JSON object, got {type(raw).__name__}")

        data = _prune_nulls(dict(raw))
        pages = data.pop("pages", None)
        if "sections" not in data:
            data["sections"] = pages.get("home", []) if isinstance(pages, Mapping) else []
        data["sections"] = self._coerce_sections(data["sections"])
        if not data.get("name") and not data.get("businessName"):
            data["name"] = info.name
        data.setdefault("language", info.language)

        document = Document.model_validate(data)
        return normalize_frame(document, id_factory=self._id_factory)

    def _coerce_sections(self, raw_sections: Any) -> list[dict[str, Any]]:
        known = {kind.value for kind in SectionKind}
        sections: list[dict[str, Any]] = []
        for entry in raw_sections if isinstance(raw_sections, list) else []:
            if not isinstance(entry, Mapping):
                continue
            section = dict(entry)
            kind = section.pop("type", None) or section.get("kind")
            if kind not in known:
                logger.warning("Skipping section of unknown kind", extra={"kind": kind})
                continue
            section["kind"] = kind
            if not section.get("id"):
                section["id"] = self._id_factory(SectionKind(kind))
            sections.append(section)
        return sections


def _prune_nulls(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _prune_nulls(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_prune_nulls(item) for item in value if item is not None]
    return value


__all__ = [
    "CAMPAIGN_SCHEMA",
    "ContentGenerator",
    "JsonModel",
    "SITE_SCHEMA",
    "SiteDraft",
    "build_campaign_prompt",
    "build_site_prompt",
    "fallback_document",
]
