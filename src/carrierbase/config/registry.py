"""Tunables for carrier resolution, verification caching and replay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from carrierbase.domain.model.enums import PhoneMatchMode

from .env import env_float, optional_env
from .errors import ConfigurationError

DEFAULT_VERIFICATION_TTL_HOURS: Final[float] = 24.0
DEFAULT_REPLAY_DELAY_SECONDS: Final[float] = 0.5


@dataclass(slots=True, frozen=True)
class RegistryConfig:
    verification_ttl_hours: float = DEFAULT_VERIFICATION_TTL_HOURS
    replay_delay_seconds: float = DEFAULT_REPLAY_DELAY_SECONDS
    phone_match: PhoneMatchMode = PhoneMatchMode.CONTAINS

    def __post_init__(self) -> None:
        if self.verification_ttl_hours <= 0:
            raise ConfigurationError("verification_ttl_hours must be positive")
        if self.replay_delay_seconds < 0:
            raise ConfigurationError("replay_delay_seconds must not be negative")


def get_registry_config() -> RegistryConfig:
    phone_match = optional_env("CARRIERBASE_PHONE_MATCH") or PhoneMatchMode.CONTAINS.value
    try:
        mode = PhoneMatchMode(phone_match.lower())
    except ValueError as exc:
        allowed = ", ".join(m.value for m in PhoneMatchMode)
        raise ConfigurationError(
            f"CARRIERBASE_PHONE_MATCH must be one of {allowed}, got {phone_match!r}"
        ) from exc
    return RegistryConfig(
        verification_ttl_hours=env_float(
            "CARRIERBASE_VERIFICATION_TTL_HOURS", DEFAULT_VERIFICATION_TTL_HOURS
        ),
        replay_delay_seconds=env_float(
            "CARRIERBASE_REPLAY_DELAY_SECONDS", DEFAULT_REPLAY_DELAY_SECONDS
        ),
        phone_match=mode,
    )
