import importlib

from thinklink import config


def test_app_env_defaults_to_production(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    try:
        importlib.reload(config)
        assert config.APP_ENV == "production"
        assert config.is_development() is False
    finally:
        monkeypatch.setenv("APP_ENV", "development")
        importlib.reload(config)

    assert config.is_development() is True
