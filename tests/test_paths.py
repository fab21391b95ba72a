import copy

import pytest

from site_editor.errors import InvalidPath
from site_editor.paths import get_at_path, set_at_path, split_path


def test_set_at_path_leaves_original_untouched(sample_document):
    tree = sample_document.to_tree()
    snapshot = copy.deepcopy(tree)

    updated = set_at_path(tree, "sections.3.content.items.1.price", "14,00 €")

    assert tree == snapshot
    assert updated["sections"][3]["content"]["items"][1]["price"] == "14,00 €"


def test_set_at_path_copies_only_the_spine(sample_document):
    tree = sample_document.to_tree()
    updated = set_at_path(tree, "sections.1.content.title", "Nuevo título")

    assert updated is not tree
    assert updated["sections"] is not tree["sections"]
    assert updated["sections"][1] is not tree["sections"][1]
    assert updated["theme"] is tree["theme"]
    assert updated["sections"][0] is tree["sections"][0]
    assert updated["sections"][1]["content"]["imageUrl"] == tree["sections"][1]["content"]["imageUrl"]


def test_set_at_path_is_idempotent(sample_document):
    tree = sample_document.to_tree()
    once = set_at_path(tree, "sections.6.content.text", "Llámanos")
    twice = set_at_path(once, "sections.6.content.text", "Llámanos")

    assert once == twice
    assert set_at_path(tree, "sections.6.content.text", "Llámanos") == once


def test_theme_color_update_keeps_previous_value(sample_document):
    tree = sample_document.to_tree()

    updated = set_at_path(tree, "theme.primaryColor", "#112233")

    assert tree["theme"]["primaryColor"] == "#7c3aed"
    assert updated["theme"]["primaryColor"] == "#112233"


def test_missing_containers_are_created_by_next_segment_shape():
    root = {"sections": [{"id": "header-1", "content": {}}]}

    updated = set_at_path(root, "sections.0.content.navLinks.0.name", "Home")
    assert updated["sections"][0]["content"]["navLinks"] == [{"name": "Home"}]

    nested = set_at_path(root, "sections.0.content.ctaButton.text", "Book")
    assert nested["sections"][0]["content"]["ctaButton"] == {"text": "Book"}
    assert root == {"sections": [{"id": "header-1", "content": {}}]}


def test_none_is_treated_as_missing():
    updated = set_at_path({"content": {"items": None}}, "content.items.0.title", "First")

    assert updated == {"content": {"items": [{"title": "First"}]}}


@pytest.mark.parametrize(
    "path",
    [
        "items.5",
        "items.2.title",
        "items.first",
        "name.first",
        "",
        "items..title",
    ],
)
def test_invalid_paths_raise(path):
    root = {"name": "Site", "items": [{"title": "a"}, {"title": "b"}]}

    with pytest.raises(InvalidPath):
        set_at_path(root, path, "x")


def test_vivified_list_only_accepts_its_first_element():
    with pytest.raises(InvalidPath):
        set_at_path({}, "links.1.name", "Second")


def test_digit_key_on_mapping_is_a_plain_key():
    assert set_at_path({"rows": {}}, "rows.2", "x") == {"rows": {"2": "x"}}


def test_tuples_stay_tuples():
    updated = set_at_path({"images": ("a.jpg", "b.jpg")}, "images.1", "c.jpg")

    assert updated == {"images": ("a.jpg", "c.jpg")}


def test_get_at_path(sample_document):
    tree = sample_document.to_tree()

    assert get_at_path(tree, "sections.0.content.navLinks.1.url") == "#services"
    assert get_at_path(tree, "sections.0.content.missing", "fallback") == "fallback"
    assert get_at_path(tree, "sections.42.id") is None
    assert get_at_path(tree, "name.first") is None


def test_split_path():
    assert split_path("theme.primaryColor") == ["theme", "primaryColor"]
    with pytest.raises(InvalidPath):
        split_path("theme.")
