import json

import pytest

from conftest import FIXTURES, load_fixture
from site_editor.document_repository import LocalDocumentRepository
from site_editor.models.document import Document, SectionKind


def test_save_and_get(tmp_path, sample_document):
    repository = LocalDocumentRepository(base_path=tmp_path / "sites")

    repository.save("cafe-estelar", sample_document)

    assert (tmp_path / "sites" / "cafe-estelar.json").exists()
    assert repository.get("cafe-estelar") == sample_document


def test_get_missing_site(tmp_path):
    with pytest.raises(FileNotFoundError):
        LocalDocumentRepository(base_path=tmp_path).get("nothing-here")


def test_serialized_tree_keeps_absent_fields_absent(sample_document):
    original = json.loads((FIXTURES / "sample-site.json").read_text(encoding="utf-8"))

    tree = sample_document.to_tree()

    assert tree == original
    assert "style" not in tree["sections"][0]
    assert "price" not in tree["sections"][4]["content"]["items"][0]


def test_legacy_generator_shape_is_accepted():
    document = Document.from_tree(
        {
            "businessName": "Estudio Norte",
            "pages": {
                "home": [
                    {"id": "header", "type": "header"},
                    {"id": "hero", "type": "hero", "content": {"title": "Design that works"}},
                    {"id": "footer", "type": "footer"},
                ]
            },
        }
    )

    assert document.name == "Estudio Norte"
    assert [section.kind for section in document.sections] == [
        SectionKind.header,
        SectionKind.hero,
        SectionKind.footer,
    ]
    tree = document.to_tree()
    assert "pages" not in tree
    assert tree["sections"][1] == {"id": "hero", "kind": "hero", "content": {"title": "Design that works"}}
    assert Document.from_tree(tree) == document


def test_fixture_round_trip(tmp_path):
    document = load_fixture("sample-site")
    repository = LocalDocumentRepository(base_path=tmp_path)

    repository.save("copy", document)

    assert json.loads((tmp_path / "copy.json").read_text(encoding="utf-8")) == document.to_tree()


def test_numbers_and_foreign_structures_round_trip(tmp_path):
    tree = {
        "name": "Barbería Sol",
        "language": "Español",
        "theme": {"primaryColor": "#0f766e", "secondaryColor": "#134e4a", "fontFamily": "Lato"},
        "sections": [
            {"id": "header-1", "kind": "header", "content": {"navLinks": [{"name": "Inicio", "url": "#"}]}},
            {
                "id": "services-1",
                "kind": "services",
                "content": {
                    "title": "Cortes",
                    "items": [{"title": "Clásico", "description": "Tijera", "price": 18.5}],
                    "rating": 4,
                    "hours": {"mon": [9, 18], "sat": {"open": True, "slots": [10, 14]}},
                },
                "style": {"backgroundColor": "#ffffff", "padding": [8, 16]},
            },
            {"id": "footer-1", "kind": "footer", "content": {"text": "© 2026", "links": []}},
        ],
    }
    document = Document.from_tree(tree)

    assert document.to_tree() == tree
    assert json.loads(document.to_json()) == tree
    assert Document.from_json(document.to_json()) == document

    repository = LocalDocumentRepository(base_path=tmp_path)
    repository.save("barberia", document)
    loaded = repository.get("barberia")

    assert loaded == document
    assert loaded.to_tree()["sections"][1]["content"]["items"][0]["price"] == 18.5
    assert loaded.to_tree()["sections"][1]["content"]["hours"]["sat"]["slots"] == [10, 14]
