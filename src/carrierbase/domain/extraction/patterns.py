"""Free-text pattern scanning for carrier identifiers, equipment and lanes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from carrierbase.domain.extraction.equipment import scan_equipment
from carrierbase.domain.identifiers import lane_token

if TYPE_CHECKING:
    from collections.abc import Iterable

    from carrierbase.domain.model import EquipmentType

_NUMBER_WORD = r"(?:\s*(?:number|num|no\.?))?"

MC_PATTERN = re.compile(r"\bMC" + _NUMBER_WORD + r"[\s#:\-]*(\d{5,7})\b", re.IGNORECASE)
DOT_PATTERN = re.compile(r"\b(?:US)?DOT" + _NUMBER_WORD + r"[\s#:\-]*(\d{6,8})\b", re.IGNORECASE)
PHONE_PATTERN = re.compile(r"(?<!\d)(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")
EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
# Upper case only, so ordinary words like "go to me" are not read as lanes.
LANE_PATTERN = re.compile(r"\b([A-Z]{2})\s*(?:-+|to|>|→)\s*([A-Z]{2})\b")


@dataclass(slots=True, frozen=True)
class ScannedIdentifiers:
    mc_number: str | None = None
    dot_number: str | None = None
    phone: str | None = None
    email: str | None = None


@runtime_checkable
class CandidateExtractor(Protocol):
    """Rules for pulling carrier facts out of unstructured call text."""

    def scan_identifiers(self, texts: Iterable[str]) -> ScannedIdentifiers: ...

    def scan_equipment(self, texts: Iterable[str]) -> set[EquipmentType]: ...

    def scan_lanes(self, texts: Iterable[str]) -> set[str]: ...


class RegexCandidateExtractor:
    """Regular-expression rules; the first match in text order wins per field."""

    def scan_identifiers(self, texts: Iterable[str]) -> ScannedIdentifiers:
        mc_number = dot_number = phone = email = None
        for text in texts:
            if mc_number is None and (match := MC_PATTERN.search(text)):
                mc_number = match.group(1)
            if dot_number is None and (match := DOT_PATTERN.search(text)):
                dot_number = match.group(1)
            if phone is None and (match := PHONE_PATTERN.search(text)):
                phone = match.group(0)
            if email is None and (match := EMAIL_PATTERN.search(text)):
                email = match.group(0)
        return ScannedIdentifiers(
            mc_number=mc_number,
            dot_number=dot_number,
            phone=phone,
            email=email,
        )

    def scan_equipment(self, texts: Iterable[str]) -> set[EquipmentType]:
        return scan_equipment(texts)

    def scan_lanes(self, texts: Iterable[str]) -> set[str]:
        lanes: set[str] = set()
        for text in texts:
            for origin, destination in LANE_PATTERN.findall(text):
                token = lane_token(origin, destination)
                if token is not None:
                    lanes.add(token)
        return lanes
