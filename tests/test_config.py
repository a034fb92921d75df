import pytest

from flopmap.core import config


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in (
        "GOOGLE_MAPS_API_KEY",
        "GOOGLE_API_KEY",
        "PORT",
        "WORKER_PORT",
        "SEARCH_MIN_REVIEW_COUNT",
        "SEARCH_DEFAULT_RADIUS",
        "SEARCH_CATEGORY_DELAY",
        "DEFAULT_PHONE_REGION",
    ):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "abc123")
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("SEARCH_MIN_REVIEW_COUNT", "3")
    monkeypatch.setenv("SEARCH_DEFAULT_RADIUS", "2000")
    monkeypatch.setenv("SEARCH_CATEGORY_DELAY", "0.5")
    monkeypatch.setenv("DEFAULT_PHONE_REGION", " be ")

    settings = config.get_settings()

    assert settings.google_api_key == "abc123"
    assert settings.worker_port == 9100
    assert settings.min_review_count == 3
    assert settings.default_radius == 2000
    assert settings.category_delay == 0.5
    assert settings.default_phone_region == "BE"


def test_get_settings_falls_back_to_google_api_key(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "legacy")

    assert config.get_settings().google_api_key == "legacy"


def test_get_settings_warns_when_missing(caplog):
    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert "GOOGLE_MAPS_API_KEY is not configured" in " ".join(caplog.messages)
    assert settings.google_api_key == ""
    assert settings.worker_port == 8080
    assert settings.min_review_count == 1
    assert settings.review_star_cutoff == 3
    assert settings.reviews_per_place == 5
    assert settings.max_categories == 6
    assert settings.detail_batch_size == 5


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "first")
    first = config.get_settings()
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "second")

    assert config.get_settings() is first
