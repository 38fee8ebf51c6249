"""Unit tests for environment-driven settings."""

from pydantic import ValidationError
import pytest

from content_discovery.config import Settings


@pytest.mark.unit
def test_settings_load_from_environment():
    settings = Settings()

    assert settings.operation_mode == "online"
    assert settings.repository_url == "http://repository.test:4502"
    assert settings.is_offline_mode() is False
    assert settings.default_limit == 5
    assert settings.default_fuzzy_threshold == 0.75
    assert settings.mcp_port == 15010


@pytest.mark.unit
def test_environment_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("max_concurrency", "3")
    monkeypatch.delenv("MAX_CONCURRENCY", raising=False)

    assert Settings().max_concurrency == 3


@pytest.mark.unit
def test_online_mode_requires_repository_url(monkeypatch):
    monkeypatch.setenv("REPOSITORY_URL", "")

    with pytest.raises(ValidationError, match="REPOSITORY_URL"):
        Settings()


@pytest.mark.unit
def test_offline_mode_requires_snapshot_path(monkeypatch):
    monkeypatch.setenv("OPERATION_MODE", "offline")

    with pytest.raises(ValidationError, match="SNAPSHOT_PATH"):
        Settings()


@pytest.mark.unit
def test_offline_mode_with_snapshot(monkeypatch, tmp_path):
    monkeypatch.setenv("OPERATION_MODE", "offline")
    monkeypatch.setenv("SNAPSHOT_PATH", str(tmp_path / "nodes.json"))

    assert Settings().is_offline_mode() is True


@pytest.mark.unit
@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("default_fuzzy_threshold", 1.5),
        ("default_limit", 0),
        ("max_concurrency", 0),
        ("mcp_port", 70000),
        ("operation_mode", "hybrid"),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})


@pytest.mark.unit
def test_locale_config_parses_csv_lists():
    settings = Settings(
        language_masters_segment="masters",
        locale_countries="us, ca ,,",
        locale_languages="en,fr",
        locale_direct_locales="",
        locale_default_locales="en",
    )

    config = settings.get_locale_config()

    assert config.language_masters_segment == "masters"
    assert config.countries == ["us", "ca"]
    assert config.languages == ["en", "fr"]
    assert config.direct_locales == []
    assert config.default_locales == ["en"]
