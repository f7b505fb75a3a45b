"""Tests for runtime paths, settings and logging setup."""

import json
import logging
import os

from lens_core import constants as app_constants
from lens_services import settings_service
from lens_services.log_service import configure_logging, log_file_path


class TestRuntimeDataDir:
    def test_posix_state_dir(self):
        path = settings_service.runtime_data_dir(platform_name="linux", env={})
        assert path.endswith(os.path.join(".local", "state", app_constants.RUNTIME_DIR_NAME))

    def test_windows_base_outside_home_falls_back_to_home(self):
        home = os.path.abspath(os.path.expanduser("~"))
        outside = os.path.abspath(os.path.join(home, os.pardir, "elsewhere"))
        path = settings_service.runtime_data_dir(platform_name="win32", env={"LOCALAPPDATA": outside})
        assert path == os.path.join(home, app_constants.RUNTIME_DIR_NAME)

    def test_windows_base_under_home(self):
        home = os.path.abspath(os.path.expanduser("~"))
        local = os.path.join(home, "AppData", "Local")
        path = settings_service.runtime_data_dir(platform_name="win32", env={"LOCALAPPDATA": local})
        assert path == os.path.join(local, app_constants.RUNTIME_DIR_NAME)


class TestLoadUserSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert settings_service.load_user_settings(tmp_path / "none.json") == settings_service.default_settings()

    def test_valid_values_applied(self, tmp_path):
        path = tmp_path / app_constants.SETTINGS_FILENAME
        path.write_text(
            json.dumps(
                {
                    "font_size": 14,
                    "app_theme": "light",
                    "engine_timeout_s": 30,
                    "schema_placeholder": "CREATE TABLE t (n INT);",
                    "log_level": "debug",
                }
            ),
            encoding="utf-8",
        )
        settings = settings_service.load_user_settings(path)
        assert settings == {
            "font_size": 14,
            "app_theme": "LIGHT",
            "engine_timeout_s": 30.0,
            "schema_placeholder": "CREATE TABLE t (n INT);",
            "log_level": "DEBUG",
        }

    def test_invalid_values_fall_back_per_key(self, tmp_path):
        path = tmp_path / app_constants.SETTINGS_FILENAME
        path.write_text(
            json.dumps({"font_size": 99, "app_theme": "NEON", "engine_timeout_s": -1, "log_level": "LOUD"}),
            encoding="utf-8",
        )
        settings = settings_service.load_user_settings(path)
        assert settings == settings_service.default_settings()

    def test_boolean_values_are_not_numbers(self):
        settings = settings_service.apply_settings_payload({"font_size": True, "engine_timeout_s": True})
        assert settings["font_size"] == app_constants.FONT_SIZE_DEFAULT
        assert settings["engine_timeout_s"] is None

    def test_malformed_file_gives_defaults(self, tmp_path):
        path = tmp_path / app_constants.SETTINGS_FILENAME
        path.write_text("{not json", encoding="utf-8")
        assert settings_service.load_user_settings(path) == settings_service.default_settings()


class TestConfigureLogging:
    def test_handlers_installed_once(self, tmp_path):
        root = logging.getLogger()
        saved_handlers = list(root.handlers)
        saved_level = root.level
        try:
            for handler in list(root.handlers):
                root.removeHandler(handler)
            configure_logging(tmp_path, "DEBUG")
            configure_logging(tmp_path, "WARNING")
            ours = [h for h in root.handlers if getattr(h, "_json_lens_handler", False)]
            assert len(ours) == 2
            assert root.level == logging.WARNING
            logging.getLogger("lens.test").warning("hello log")
            for handler in ours:
                handler.flush()
            with open(log_file_path(tmp_path), encoding="utf-8") as fh:
                assert "WARNING lens.test: hello log" in fh.read()
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                if handler not in saved_handlers:
                    handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)
