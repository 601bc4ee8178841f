"""FMCSA authority lookup adapter."""

from __future__ import annotations

from .client import FmcsaAPIError, FmcsaAuthorityClient
from .translator import parse_operating_status, snapshot_from_carrier, snapshot_from_html

__all__ = [
    "FmcsaAPIError",
    "FmcsaAuthorityClient",
    "parse_operating_status",
    "snapshot_from_carrier",
    "snapshot_from_html",
]
