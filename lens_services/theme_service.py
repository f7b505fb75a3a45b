import importlib
import logging
from typing import Any

from lens_core.exceptions import EXPECTED_ERRORS
from lens_core.session_state import Phase

_LOG = logging.getLogger(__name__)


def theme_palette_for_variant(variant):
    use_variant = str(variant).upper()
    if use_variant == "LIGHT":
        return {
            "bg": "#f4f6f9",
            "fg": "#1b2430",
            "panel": "#e6ebf1",
            "accent": "#cfd8e3",
            "button_active": "#bfcad8",
            "select_bg": "#9cc3e6",
            "select_fg": "#0b1520",
            "text_bg": "#ffffff",
            "text_fg": "#18202b",
            "insert_fg": "#18202b",
            "match_bg": "#ffd98a",
            "match_fg": "#1b1300",
            "error_bg": "#fbe3e6",
            "error_fg": "#7a0c1a",
            "border": "#9fb3c8",
        }
    return {
        "bg": "#0f131a",
        "fg": "#e6e6e6",
        "panel": "#161b24",
        "accent": "#2a3342",
        "button_active": "#3a465c",
        "select_bg": "#2f3a4d",
        "select_fg": "#ffffff",
        "text_bg": "#0b0f15",
        "text_fg": "#d7f2ff",
        "insert_fg": "#e8f6ff",
        "match_bg": "#214a6a",
        "match_fg": "#e8f6ff",
        "error_bg": "#3a0f16",
        "error_fg": "#ffdce1",
        "border": "#349fc7",
    }


# RGBA fill per phase for the status badge.
_PHASE_BADGE_COLORS = {
    Phase.IDLE: (78, 110, 134, 255),
    Phase.LOADING: (196, 146, 38, 255),
    Phase.SUCCESS: (46, 150, 96, 255),
    Phase.ERROR: (190, 52, 64, 255),
}


def phase_badge_color(phase: Any) -> tuple:
    return _PHASE_BADGE_COLORS.get(phase, _PHASE_BADGE_COLORS[Phase.IDLE])


def phase_badge_image(phase: Any, size: Any=(28, 12), scale: int=4) -> Any:
    """Anti-aliased rounded badge for the status line, or None without Pillow."""
    try:
        image_module = importlib.import_module("PIL.Image")
        draw_module = importlib.import_module("PIL.ImageDraw")
    except ImportError as exc:
        _LOG.debug('expected_error', exc_info=exc)
        return None
    width, height = (max(2, int(v)) for v in size)
    # Draw oversized then downsample for smooth edges.
    w = width * scale
    h = height * scale
    canvas = image_module.new("RGBA", (w, h), (0, 0, 0, 0))
    draw = draw_module.Draw(canvas)
    fill = phase_badge_color(phase)
    edge = tuple(max(0, c - 40) for c in fill[:3]) + (255,)
    draw.rounded_rectangle(
        (0, 0, w - 1, h - 1),
        radius=h // 2,
        fill=fill,
        outline=edge,
        width=max(1, scale - 2),
    )
    return canvas.resize((width, height), image_module.LANCZOS)


def phase_badge_photo(owner: Any, phase: Any) -> Any:
    """Tk photo for the phase badge, cached per phase on the owner."""
    cache = getattr(owner, "_phase_badge_cache", None)
    if not isinstance(cache, dict):
        cache = {}
        owner._phase_badge_cache = cache
    if phase in cache:
        return cache[phase]
    photo = None
    try:
        image = phase_badge_image(phase)
        if image is not None:
            image_tk_module = importlib.import_module("PIL.ImageTk")
            photo = image_tk_module.PhotoImage(image)
    except EXPECTED_ERRORS as exc:
        _LOG.debug('expected_error', exc_info=exc)
        photo = None
    cache[phase] = photo
    return photo
