from pathlib import Path

from cheese_shop import config


def test_settings_defaults(monkeypatch):
    for name in ("DATA_FILE", "HOST", "PORT", "LOG_LEVEL", "JSON_LOGS"):
        monkeypatch.delenv(f"CHEESE_SHOP_{name}", raising=False)
    settings = config.Settings(_env_file=None)
    assert settings.data_file == Path("data/cheeses.json")
    assert settings.host == "127.0.0.1"
    assert settings.port == 3000
    assert settings.log_level == "INFO"
    assert settings.json_logs is False


def test_settings_read_prefixed_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("CHEESE_SHOP_DATA_FILE", str(tmp_path / "c.json"))
    monkeypatch.setenv("CHEESE_SHOP_PORT", "8080")
    monkeypatch.setenv("CHEESE_SHOP_JSON_LOGS", "true")
    settings = config.Settings(_env_file=None)
    assert settings.data_file == tmp_path / "c.json"
    assert settings.port == 8080
    assert settings.json_logs is True


def test_get_settings_is_cached():
    config.get_settings.cache_clear()
    try:
        assert config.get_settings() is config.get_settings()
    finally:
        config.get_settings.cache_clear()
