"""Tests for theme palettes and the Pillow-drawn phase badge."""

import pytest

from lens_core.session_state import Phase
from lens_services import theme_service


def test_palettes_share_keys():
    dark = theme_service.theme_palette_for_variant("dark")
    light = theme_service.theme_palette_for_variant("LIGHT")
    assert set(dark) == set(light)
    assert dark != light
    assert theme_service.theme_palette_for_variant("unknown") == dark


@pytest.mark.parametrize("phase", list(Phase))
def test_phase_badge_image(phase):
    image = theme_service.phase_badge_image(phase, size=(28, 12))
    assert image.size == (28, 12)
    assert image.mode == "RGBA"
    # Center pixel carries the phase color; corners stay transparent.
    r, g, b, _a = image.getpixel((14, 6))
    expected = theme_service.phase_badge_color(phase)[:3]
    assert max(abs(r - expected[0]), abs(g - expected[1]), abs(b - expected[2])) <= 8
    assert image.getpixel((0, 0))[3] < 128


def test_phase_colors_are_distinct():
    colors = {theme_service.phase_badge_color(phase) for phase in Phase}
    assert len(colors) == len(Phase)
