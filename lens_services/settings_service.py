"""Runtime data paths and user settings."""

import json
import logging
import os
import sys
from typing import Any

from lens_core import constants as app_constants
from lens_core.exceptions import EXPECTED_ERRORS

_LOG = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def default_settings() -> dict[str, Any]:
    return {
        "font_size": app_constants.FONT_SIZE_DEFAULT,
        "app_theme": app_constants.APP_THEME_DEFAULT,
        "engine_timeout_s": None,
        "schema_placeholder": app_constants.DEFAULT_SCHEMA_PLACEHOLDER,
        "log_level": "INFO",
    }


def _normalized_home() -> str:
    try:
        return os.path.abspath(os.path.expanduser("~"))
    except EXPECTED_ERRORS:
        return os.path.abspath(os.getcwd())


def _safe_windows_base(base: Any) -> str:
    # Keep env-derived base rooted under user home.
    home = _normalized_home()
    candidate = os.path.abspath(str(base or "").strip() or home)
    try:
        if os.path.commonpath([home, candidate]) == home:
            return candidate
    except ValueError:
        return home
    return home


def runtime_data_dir(create: Any=False, platform_name: Any=None, env: Any=None) -> str:
    """Per-user directory for settings and logs."""
    use_platform = platform_name or sys.platform
    use_env = os.environ if env is None else env
    match use_platform:
        case "win32":
            env_base = str(use_env.get("LOCALAPPDATA", "")).strip() or str(use_env.get("APPDATA", "")).strip()
            base = _safe_windows_base(env_base)
        case _:
            base = os.path.join(_normalized_home(), ".local", "state")
    target = os.path.join(base, app_constants.RUNTIME_DIR_NAME)
    if create:
        try:
            os.makedirs(target, exist_ok=True)
        except OSError as exc:
            _LOG.debug('expected_error', exc_info=exc)
            return os.getcwd()
    return target


def settings_path(runtime_dir: Any) -> str:
    return os.path.join(str(runtime_dir), app_constants.SETTINGS_FILENAME)


def _coerce_timeout(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value > 0:
        return float(value)
    return None


def apply_settings_payload(data: Any) -> dict[str, Any]:
    """Merge a raw settings mapping over the defaults, key by key."""
    settings = default_settings()
    if not isinstance(data, dict):
        return settings
    fs = data.get("font_size")
    if isinstance(fs, int) and not isinstance(fs, bool) and app_constants.FONT_SIZE_MIN <= fs <= app_constants.FONT_SIZE_MAX:
        settings["font_size"] = fs
    theme_variant = str(data.get("app_theme", "")).upper()
    if theme_variant in app_constants.APP_THEMES:
        settings["app_theme"] = theme_variant
    settings["engine_timeout_s"] = _coerce_timeout(data.get("engine_timeout_s"))
    placeholder = data.get("schema_placeholder")
    if isinstance(placeholder, str) and placeholder.strip():
        settings["schema_placeholder"] = placeholder
    level = str(data.get("log_level", "")).upper()
    if level in _LOG_LEVELS:
        settings["log_level"] = level
    return settings


def load_user_settings(path: Any) -> dict[str, Any]:
    """Read settings from ``path``; a missing or malformed file yields defaults."""
    use_path = str(path or "")
    if not use_path or not os.path.isfile(use_path):
        return default_settings()
    try:
        with open(use_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        _LOG.warning("Ignoring unreadable settings file %s: %s", use_path, exc)
        return default_settings()
    return apply_settings_payload(data)
