"""Translate FMCSA payloads into authority snapshots."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import TYPE_CHECKING, Final

from carrierbase.domain.identifiers import normalize_authority_number
from carrierbase.domain.model import (
    DEFAULT_BIPD_REQUIRED,
    AuthoritySnapshot,
    OperatingStatus,
    SafetyRating,
)

if TYPE_CHECKING:
    from .schema import FmcsaCarrier, Scalar

QC_SOURCE: Final[str] = "fmcsa_qc"
SAFER_SOURCE: Final[str] = "safer_snapshot"

DEFAULT_CARGO_REQUIRED: Final[float] = 100_000.0
# QCMobile reports insurance amounts in thousands of dollars.
QC_AMOUNT_UNIT: Final[float] = 1_000.0

_SAFETY_RATING_CODES: dict[str, SafetyRating] = {
    "S": SafetyRating.SATISFACTORY,
    "C": SafetyRating.CONDITIONAL,
    "U": SafetyRating.UNSATISFACTORY,
    "N": SafetyRating.NOT_RATED,
}

_HTML_MC = re.compile(r"MC-(\d+)")
_HTML_DOT = re.compile(r"DOT:\s*(\d+)")
_HTML_LEGAL_NAME = re.compile(r"Legal Name:.*?<[^>]+>([^<]+)<", re.DOTALL)
_HTML_STATUS = re.compile(r"Operating Status:.*?<[^>]+>([^<]+)<", re.DOTALL)
_HTML_NOT_FOUND = re.compile(r"record\s+not\s+found|no\s+records?\s+(?:found|matching)", re.I)

_DATE_FORMATS: tuple[str, ...] = ("%Y-%m-%d", "%m/%d/%Y", "%d-%b-%y", "%d-%b-%Y")


def parse_operating_status(value: str | None) -> OperatingStatus:
    """Map free-form status text onto the closed status set.

    Negated phrases are checked before ``AUTHORIZED`` since
    ``"NOT AUTHORIZED"`` contains it.
    """

    text = (value or "").upper()
    if "NOT" in text and "AUTHORIZED" in text:
        return OperatingStatus.NOT_AUTHORIZED
    if "OUT" in text and "SERVICE" in text:
        return OperatingStatus.OUT_OF_SERVICE
    if "SUSPENDED" in text:
        return OperatingStatus.SUSPENDED
    if "AUTHORIZED" in text:
        return OperatingStatus.AUTHORIZED
    return OperatingStatus.UNREGISTERED


def parse_safety_rating(value: str | None) -> SafetyRating | None:
    if not value or not value.strip():
        return None
    text = value.strip().upper()
    if text in _SAFETY_RATING_CODES:
        return _SAFETY_RATING_CODES[text]
    for rating in SafetyRating:
        if text == rating.value:
            return rating
    if "UNSAT" in text:
        return SafetyRating.UNSATISFACTORY
    if "COND" in text:
        return SafetyRating.CONDITIONAL
    if "SAT" in text:
        return SafetyRating.SATISFACTORY
    return SafetyRating.NOT_RATED


def parse_date(value: Scalar) -> date | None:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()  # noqa: DTZ007
        except ValueError:
            continue
    return None


def parse_flag(value: Scalar) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value > 0
    text = value.strip().upper()
    if text in {"Y", "YES", "TRUE"}:
        return True
    if text in {"N", "NO", "FALSE", "", "0"}:
        return False
    number = parse_float(text)
    return number is not None and number > 0


def parse_float(value: Scalar) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    text = value.replace(",", "").replace("$", "").replace("%", "").strip()
    try:
        return float(text)
    except ValueError:
        return None


def parse_int(value: Scalar) -> int | None:
    number = parse_float(value)
    return int(number) if number is not None else None


def _text(value: Scalar) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _cargo(value: list[str] | str | None) -> list[str]:
    if value is None:
        return []
    items = value if isinstance(value, list) else value.split(",")
    return [item.strip() for item in items if item and item.strip()]


def _status(carrier: FmcsaCarrier) -> OperatingStatus:
    if carrier.status:
        return parse_operating_status(carrier.status)
    allowed = parse_flag(carrier.allowed_to_operate)
    if allowed is None:
        return OperatingStatus.UNREGISTERED
    return OperatingStatus.AUTHORIZED if allowed else OperatingStatus.NOT_AUTHORIZED


def _insurance(
    flag: Scalar, amount: Scalar, required: Scalar, default_required: float
) -> tuple[bool, float | None, float]:
    """Return (on file, amount on file, required amount).

    QCMobile puts the amount in thousands into the on-file flag itself, so a
    numeric flag with no separate amount doubles as the amount.
    """

    on_file_amount = parse_float(amount)
    if on_file_amount is None and not isinstance(flag, bool):
        flagged_amount = parse_float(flag)
        if flagged_amount is not None and flagged_amount > 0:
            on_file_amount = flagged_amount * QC_AMOUNT_UNIT
    required_amount = parse_float(required)
    if required_amount is not None and 0 < required_amount < QC_AMOUNT_UNIT:
        required_amount *= QC_AMOUNT_UNIT
    on_file = bool(parse_flag(flag)) or bool(on_file_amount)
    return on_file, on_file_amount, required_amount or default_required


def snapshot_from_carrier(carrier: FmcsaCarrier) -> AuthoritySnapshot:
    bipd_on_file, bipd_amount, bipd_required = _insurance(
        carrier.bipd_insurance_on_file,
        carrier.bipd_on_file,
        carrier.bipd_required,
        DEFAULT_BIPD_REQUIRED,
    )
    cargo_on_file, cargo_amount, cargo_required = _insurance(
        carrier.cargo_insurance_on_file,
        carrier.cargo_on_file,
        carrier.cargo_required,
        DEFAULT_CARGO_REQUIRED,
    )
    return AuthoritySnapshot(
        operating_status=_status(carrier),
        source=QC_SOURCE,
        mc_number=normalize_authority_number(_text(carrier.mc_number)),
        dot_number=normalize_authority_number(_text(carrier.dot_number)),
        legal_name=_text(carrier.legal_name),
        dba_name=_text(carrier.dba_name),
        physical_address=_text(carrier.physical_address),
        physical_city=_text(carrier.physical_city),
        physical_state=_text(carrier.physical_state),
        physical_zip=_text(carrier.physical_zip),
        phone=_text(carrier.phone),
        entity_type=_text(carrier.entity_type),
        cargo_carried=_cargo(carrier.cargo_carried),
        authority_date=parse_date(carrier.authority_date),
        safety_rating=parse_safety_rating(carrier.safety_rating),
        safety_rating_date=parse_date(carrier.safety_rating_date),
        out_of_service_date=parse_date(carrier.out_of_service_date),
        mcs150_date=parse_date(carrier.mcs150_date),
        mcs150_mileage=parse_int(carrier.mcs150_mileage),
        bipd_insurance_on_file=bipd_on_file,
        bipd_required=bipd_required,
        bipd_on_file=bipd_amount,
        cargo_insurance_on_file=cargo_on_file,
        cargo_required=cargo_required,
        cargo_on_file=cargo_amount,
        vehicle_inspections=parse_int(carrier.vehicle_inspections),
        vehicle_oos_rate=parse_float(carrier.vehicle_oos_rate),
        driver_inspections=parse_int(carrier.driver_inspections),
        driver_oos_rate=parse_float(carrier.driver_oos_rate),
        hazmat_inspections=parse_int(carrier.hazmat_inspections),
        hazmat_oos_rate=parse_float(carrier.hazmat_oos_rate),
        fatal_crashes=parse_int(carrier.fatal_crashes),
        injury_crashes=parse_int(carrier.injury_crashes),
        tow_crashes=parse_int(carrier.tow_crashes),
        total_crashes=parse_int(carrier.total_crashes),
        power_units=parse_int(carrier.power_units),
        drivers=parse_int(carrier.drivers),
    )


def snapshot_from_html(html: str) -> AuthoritySnapshot | None:
    """Pull the few fields the SAFER company snapshot page exposes reliably.

    Returns ``None`` for a "record not found" page or when nothing matched.
    """

    if _HTML_NOT_FOUND.search(html):
        return None

    mc = _HTML_MC.search(html)
    dot = _HTML_DOT.search(html)
    name = _HTML_LEGAL_NAME.search(html)
    status = _HTML_STATUS.search(html)
    if not any((mc, dot, name, status)):
        return None

    return AuthoritySnapshot(
        operating_status=parse_operating_status(status.group(1).strip())
        if status
        else OperatingStatus.UNREGISTERED,
        source=SAFER_SOURCE,
        mc_number=normalize_authority_number(mc.group(1)) if mc else None,
        dot_number=normalize_authority_number(dot.group(1)) if dot else None,
        legal_name=name.group(1).strip() if name else None,
    )
