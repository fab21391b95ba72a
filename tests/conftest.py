from pathlib import Path

import pytest

from site_editor.models.document import Document, SectionKind

FIXTURES = Path(__file__).resolve().parents[1] / "data" / "sites"


def load_fixture(name: str) -> Document:
    return Document.from_json((FIXTURES / f"{name}.json").read_text(encoding="utf-8"))


class CountingIds:
    """Predictable section ids for tests."""

    def __init__(self) -> None:
        self.issued: list[str] = []

    def __call__(self, kind: SectionKind) -> str:
        section_id = f"{SectionKind(kind).value}-t{len(self.issued) + 1}"
        self.issued.append(section_id)
        return section_id


@pytest.fixture
def sample_document() -> Document:
    return load_fixture("sample-site")


@pytest.fixture
def counting_ids() -> CountingIds:
    return CountingIds()


def make_document(*kinds: str) -> Document:
    return Document.model_validate(
        {
            "name": "Test Site",
            "language": "English",
            "sections": [
                {"id": f"{kind}-{index}", "kind": kind, "content": {"title": kind.title()}}
                for index, kind in enumerate(kinds)
            ],
        }
    )
