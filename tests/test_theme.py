import pytest

from site_editor.models.document import Theme
from site_editor.theme import (
    contrast_color,
    derive_palette,
    expand_hex,
    relative_luminance,
    safe_accent_text_color,
)


def test_contrast_color_extremes():
    assert contrast_color("#FFFFFF") == "#000000"
    assert contrast_color("#000000") == "#FFFFFF"


def test_shorthand_is_expanded():
    assert expand_hex("#fa0") == "ffaa00"
    assert relative_luminance("#fff") == pytest.approx(1.0)
    assert relative_luminance("ffffff") == pytest.approx(1.0)


def test_luminance_weights():
    assert relative_luminance("#ff0000") == pytest.approx(0.299)
    assert relative_luminance("#00ff00") == pytest.approx(0.587)
    assert relative_luminance("#0000ff") == pytest.approx(0.114)


@pytest.mark.parametrize("color", ["", "#12", "#12345", "#1234567", "#gggggg", "#+f+f+f"])
def test_malformed_colors_have_zero_luminance(color):
    assert relative_luminance(color) == 0.0
    assert contrast_color(color) == "#FFFFFF"


def test_safe_accent_text_color_swaps_pale_primary():
    pale = Theme(primary_color="#fde047", secondary_color="#854d0e")
    dark = Theme(primary_color="#7c3aed", secondary_color="#4c1d95")

    assert safe_accent_text_color(pale) == "#854d0e"
    assert safe_accent_text_color(dark) == "#7c3aed"


def test_derive_palette():
    palette = derive_palette(Theme(primary_color="#ffffff", secondary_color="#333333", font_family="Lato"))

    assert palette.model_dump() == {
        "primaryColor": "#ffffff",
        "secondaryColor": "#333333",
        "fontFamily": "Lato",
        "primaryContrastColor": "#000000",
        "safeAccentTextColor": "#333333",
    }


def test_non_string_colors_have_zero_luminance():
    assert relative_luminance(42) == 0.0
    assert contrast_color(None) == "#FFFFFF"

    palette = derive_palette(Theme(primary_color=42, secondary_color="#333333"))
    assert palette.primary == 42
    assert palette.safe_accent_text == 42
