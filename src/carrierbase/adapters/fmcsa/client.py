"""FMCSA authority lookups: QCMobile API first, SAFER snapshot page as fallback."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from carrierbase.adapters.http_resilience import ResilientClient
from carrierbase.domain.errors import AuthoritySourceUnavailableError

from .schema import FmcsaCarrier, FmcsaResponse
from .translator import snapshot_from_carrier, snapshot_from_html

if TYPE_CHECKING:
    from collections.abc import Callable

    from carrierbase.config.fmcsa import FmcsaConfig
    from carrierbase.config.http_resilience import ResilienceConfig
    from carrierbase.domain.model import AuthoritySnapshot

log = getLogger(__name__)

SAFER_QUERY_PATH = "query.asp"


class FmcsaAPIError(RuntimeError):
    """Raised when the QCMobile API answers with something unusable."""


class FmcsaAuthorityClient:
    """Authority source backed by the public FMCSA services.

    Without a web key the QCMobile API is skipped and only the SAFER
    snapshot page is consulted.
    """

    def __init__(
        self,
        *,
        config: FmcsaConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient

    def lookup(
        self,
        *,
        mc_number: str | None = None,
        dot_number: str | None = None,
    ) -> AuthoritySnapshot | None:
        if not mc_number and not dot_number:
            msg = "An MC or DOT number is required"
            raise ValueError(msg)
        return asyncio.run(self._lookup_async(mc_number=mc_number, dot_number=dot_number))

    async def _lookup_async(
        self, *, mc_number: str | None, dot_number: str | None
    ) -> AuthoritySnapshot | None:
        if self._config.web_key:
            try:
                return await self._fetch_primary(mc_number=mc_number, dot_number=dot_number)
            except (httpx.HTTPError, ValidationError, ValueError, FmcsaAPIError) as exc:
                log.warning("FMCSA QC lookup failed, falling back to SAFER: %s", exc)
        else:
            log.debug("No FMCSA web key configured; using the SAFER snapshot")

        try:
            return await self._fetch_fallback(mc_number=mc_number, dot_number=dot_number)
        except httpx.HTTPError as exc:
            raise AuthoritySourceUnavailableError(
                f"FMCSA lookup failed for MC {mc_number} / DOT {dot_number}: {exc}"
            ) from exc

    async def _fetch_primary(
        self, *, mc_number: str | None, dot_number: str | None
    ) -> AuthoritySnapshot | None:
        path = (
            f"carriers/docket-number/{mc_number}" if mc_number else f"carriers/{dot_number}"
        )
        params = {"webKey": self._config.web_key or ""}

        async with self._client_factory(self._config.primary) as client:
            response = await client.get(path, params=params)
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise FmcsaAPIError("Unexpected FMCSA response payload")

        if "content" in payload:
            carrier = FmcsaResponse.model_validate(payload).first_carrier()
        else:
            carrier = FmcsaCarrier.model_validate(payload)
        if carrier is None:
            return None
        return snapshot_from_carrier(carrier)

    async def _fetch_fallback(
        self, *, mc_number: str | None, dot_number: str | None
    ) -> AuthoritySnapshot | None:
        params = {
            "searchtype": "MC_MX" if mc_number else "DOT",
            "query": mc_number or dot_number or "",
        }
        async with self._client_factory(self._config.fallback) as client:
            response = await client.get(SAFER_QUERY_PATH, params=params)
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return snapshot_from_html(response.text)
