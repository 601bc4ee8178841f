"""FMCSA authority lookup configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

import httpx

from .env import env_float, optional_env, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

QC_BASE_URL: Final[str] = "https://mobile.fmcsa.dot.gov/qc/services"
SAFER_BASE_URL: Final[str] = "https://safer.fmcsa.dot.gov"
DEFAULT_USER_AGENT: Final[str] = "carrierbase/1.0"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 12.0


@dataclass(slots=True, frozen=True)
class FmcsaConfig:
    web_key: str | None
    qc_base_url: str = QC_BASE_URL
    safer_base_url: str = SAFER_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    primary: ResilienceConfig = field(init=False)
    fallback: ResilienceConfig = field(init=False)

    def __post_init__(self) -> None:
        # A timed-out attempt has already spent the request deadline.
        retry = RetryPolicy(
            total=1,
            backoff_factor=0.25,
            max_backoff_wait=2.0,
            retry_on_exceptions=(httpx.NetworkError, httpx.RemoteProtocolError),
        )
        object.__setattr__(
            self,
            "primary",
            ResilienceConfig(
                name="fmcsa-qc",
                base_url=self.qc_base_url,
                timeout_seconds=self.timeout_seconds,
                deadline_seconds=self.timeout_seconds,
                retry=retry,
                ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
                default_headers={
                    "Accept": "application/json",
                    "User-Agent": self.user_agent,
                },
            ),
        )
        object.__setattr__(
            self,
            "fallback",
            ResilienceConfig(
                name="fmcsa-safer",
                base_url=self.safer_base_url,
                timeout_seconds=self.timeout_seconds,
                deadline_seconds=self.timeout_seconds,
                retry=retry,
                ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
                default_headers={
                    "Accept": "text/html",
                    "User-Agent": self.user_agent,
                },
            ),
        )


def get_fmcsa_config(*, require_web_key: bool = False) -> FmcsaConfig:
    """Build the FMCSA configuration.

    Without a QC web key only the SAFER snapshot source is consulted, unless
    ``require_web_key`` is set, in which case a missing key is an error.
    """

    if require_web_key:
        web_key: str | None = require_env_vars(["FMCSA_WEB_KEY"])["FMCSA_WEB_KEY"].strip()
    else:
        web_key = optional_env("FMCSA_WEB_KEY")
    return FmcsaConfig(
        web_key=web_key,
        qc_base_url=optional_env("FMCSA_BASE_URL") or QC_BASE_URL,
        safer_base_url=optional_env("SAFER_BASE_URL") or SAFER_BASE_URL,
        user_agent=optional_env("FMCSA_USER_AGENT") or DEFAULT_USER_AGENT,
        timeout_seconds=env_float("FMCSA_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
    )
