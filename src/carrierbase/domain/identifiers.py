"""Normalization of authority numbers, phone numbers and state codes."""

from __future__ import annotations

import re
from typing import Final

_NON_DIGITS = re.compile(r"\D+")

US_STATE_CODES: Final[frozenset[str]] = frozenset(
    {
        "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "FL",
        "GA", "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME",
        "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH",
        "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI",
        "SC", "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI",
        "WY",
    }
)  # fmt: skip

MIN_PHONE_DIGITS: Final[int] = 7


def digits_only(value: str | None) -> str:
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def normalize_authority_number(value: str | int | None) -> str | None:
    """Reduce ``"MC-778899"``, ``"MC # 778899"`` or ``778899`` to ``"778899"``."""

    if value is None:
        return None
    digits = digits_only(str(value)).lstrip("0")
    return digits or None


def normalize_phone(value: str | None) -> str | None:
    """Strip a phone to its digits, dropping the US country code."""

    digits = digits_only(value)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    return digits or None


def normalize_state(value: str | None) -> str | None:
    if not value:
        return None
    code = value.strip().upper()
    return code if code in US_STATE_CODES else None


def lane_token(origin: str | None, destination: str | None) -> str | None:
    """Return ``"XX-YY"`` when both ends are known US state codes."""

    origin_code = normalize_state(origin)
    destination_code = normalize_state(destination)
    if origin_code is None or destination_code is None:
        return None
    return f"{origin_code}-{destination_code}"
