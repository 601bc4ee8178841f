from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from carrierbase.config import (
    ConfigurationError,
    FmcsaConfig,
    MissingConfigurationError,
    PhoneMatchMode,
    RegistryConfig,
    get_database_config,
    get_fmcsa_config,
    get_registry_config,
    get_storage_config,
    require_env_vars,
)
from carrierbase.config.fmcsa import QC_BASE_URL, SAFER_BASE_URL

if TYPE_CHECKING:
    from pathlib import Path


def test_require_env_vars_reports_all_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARRIERBASE_A", "value")
    monkeypatch.setenv("CARRIERBASE_B", "   ")
    monkeypatch.delenv("CARRIERBASE_C", raising=False)

    with pytest.raises(MissingConfigurationError) as excinfo:
        require_env_vars(["CARRIERBASE_A", "CARRIERBASE_B", "CARRIERBASE_C"])

    assert "CARRIERBASE_B, CARRIERBASE_C" in str(excinfo.value)


def test_fmcsa_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FMCSA_WEB_KEY", "FMCSA_BASE_URL", "SAFER_BASE_URL", "FMCSA_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    config = get_fmcsa_config()

    assert config.web_key is None
    assert config.primary.base_url == QC_BASE_URL
    assert config.fallback.base_url == SAFER_BASE_URL
    assert config.primary.timeout_seconds == 12.0
    assert config.primary.deadline_seconds == 12.0
    assert config.fallback.deadline_seconds == 12.0


def test_fmcsa_retry_policy_skips_timeouts() -> None:
    config = FmcsaConfig(web_key=None)

    for source in (config.primary, config.fallback):
        assert source.retry.total == 1
        assert httpx.TimeoutException not in source.retry.retry_on_exceptions
        assert httpx.NetworkError in source.retry.retry_on_exceptions


def test_fmcsa_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FMCSA_WEB_KEY", " secret ")
    monkeypatch.setenv("FMCSA_TIMEOUT_SECONDS", "5")

    config = get_fmcsa_config(require_web_key=True)

    assert config.web_key == "secret"
    assert config.primary.timeout_seconds == 5.0
    assert config.fallback.timeout_seconds == 5.0


def test_fmcsa_config_can_require_web_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FMCSA_WEB_KEY", raising=False)

    with pytest.raises(MissingConfigurationError):
        get_fmcsa_config(require_web_key=True)


def test_fmcsa_config_rejects_bad_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FMCSA_TIMEOUT_SECONDS", "soon")

    with pytest.raises(ConfigurationError):
        get_fmcsa_config()


def test_registry_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARRIERBASE_PHONE_MATCH", "EXACT")
    monkeypatch.setenv("CARRIERBASE_VERIFICATION_TTL_HOURS", "6")
    monkeypatch.setenv("CARRIERBASE_REPLAY_DELAY_SECONDS", "0")

    config = get_registry_config()

    assert config.phone_match is PhoneMatchMode.EXACT
    assert config.verification_ttl_hours == 6.0
    assert config.replay_delay_seconds == 0.0


def test_registry_config_rejects_unknown_phone_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARRIERBASE_PHONE_MATCH", "fuzzy")

    with pytest.raises(ConfigurationError, match="CARRIERBASE_PHONE_MATCH"):
        get_registry_config()


def test_registry_config_validates_values() -> None:
    with pytest.raises(ConfigurationError):
        RegistryConfig(verification_ttl_hours=0)
    with pytest.raises(ConfigurationError):
        RegistryConfig(replay_delay_seconds=-1)


def test_database_uri_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_database_uri_defaults_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("CARRIERBASE_DATA_DIR", str(tmp_path))

    uri = get_database_config().uri

    assert uri == f"sqlite+pysqlite:///{tmp_path.resolve() / 'carrierbase.db'}"
    storage = get_storage_config()
    assert storage.database_path(ensure=False) == tmp_path.resolve() / "carrierbase.db"
