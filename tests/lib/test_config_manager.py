"""Tests for the .env → environment → defaults configuration manager."""

from nihongopedia.lib.config_manager import ConfigManager, _coerce_type
from nihongopedia.lib.defaults import DEFAULTS, get_default


class TestCoerceType:
    """Tests for string coercion based on the default's type."""

    def test_bool(self):
        assert _coerce_type("true", False) is True
        assert _coerce_type("1", False) is True
        assert _coerce_type("off", True) is False

    def test_int(self):
        assert _coerce_type("14", 7) == 14
        assert _coerce_type("fourteen", 7) == 7

    def test_float(self):
        assert _coerce_type("2.5", 10.0) == 2.5
        assert _coerce_type("slow", 10.0) == 10.0

    def test_string_and_unknown(self):
        assert _coerce_type("v2", "v1") == "v2"
        assert _coerce_type("anything", None) == "anything"


class TestConfigManager:
    """Tests for ConfigManager lookups."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CACHE_TTL_DAYS", raising=False)
        manager = ConfigManager(env_path=tmp_path / ".env")

        assert manager.get("CACHE_TTL_DAYS") == 7
        assert manager.get("CACHE_NAMESPACE") == get_default("CACHE_NAMESPACE")

    def test_environment_overrides_default_with_coercion(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CACHE_TTL_DAYS", "3")
        monkeypatch.setenv("COALESCE_REQUESTS", "yes")
        manager = ConfigManager(env_path=tmp_path / ".env")

        assert manager.get("CACHE_TTL_DAYS") == 3
        assert manager.get("COALESCE_REQUESTS") is True

    def test_env_file_loaded(self, tmp_path, monkeypatch):
        # Record the original state so the value loaded below is undone on teardown
        monkeypatch.setenv("CONTENT_ORIGIN", "placeholder")
        monkeypatch.delenv("CONTENT_ORIGIN")
        env_file = tmp_path / ".env"
        env_file.write_text("CONTENT_ORIGIN=https://nihongopedia.example\n", encoding="utf-8")

        manager = ConfigManager(env_path=env_file)
        assert manager.get("CONTENT_ORIGIN") == "https://nihongopedia.example"

    def test_explicit_default_for_unknown_key(self, tmp_path):
        manager = ConfigManager(env_path=tmp_path / ".env")
        assert manager.get("NOT_A_REAL_KEY_FOR_TESTS", "fallback") == "fallback"
        assert manager.get("NOT_A_REAL_KEY_FOR_TESTS") is None

    def test_get_all_covers_defaults(self, tmp_path):
        manager = ConfigManager(env_path=tmp_path / ".env")
        assert set(manager.get_all()) == set(DEFAULTS)
