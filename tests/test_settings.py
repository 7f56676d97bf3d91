from catalogpress.config import get_settings


def test_defaults_without_environment(monkeypatch) -> None:
    for name in ("DEBUG", "LOG_VERBOSITY", "CORS_ALLOW_ORIGINS", "HOST", "PORT", "MAX_UPLOAD_BYTES"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.debug is False
    assert settings.log_verbosity == "medium"
    assert settings.cors_allow_origins == ("*",)
    assert (settings.host, settings.port) == ("0.0.0.0", 8000)
    assert settings.max_upload_bytes == 50 * 1024 * 1024


def test_environment_overrides_and_bad_values(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "yes")
    monkeypatch.setenv("LOG_VERBOSITY", "LOUD")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example.com, ,https://b.example.com")
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("FEED_FETCH_TIMEOUT", "-1")

    settings = get_settings()

    assert settings.debug is True
    assert settings.log_verbosity == "medium"
    assert settings.cors_allow_origins == ("https://a.example.com", "https://b.example.com")
    assert (settings.host, settings.port) == ("127.0.0.1", 9100)
    assert settings.feed_fetch_timeout == 180.0
