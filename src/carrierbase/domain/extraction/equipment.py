"""Equipment synonym table and keyword scanning."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Final

from carrierbase.domain.model import EquipmentType

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)

EQUIPMENT_SYNONYMS: Final[dict[str, EquipmentType]] = {
    "dry van": EquipmentType.DRY_VAN,
    "dryvan": EquipmentType.DRY_VAN,
    "van": EquipmentType.DRY_VAN,
    "reefer": EquipmentType.REEFER,
    "reefer van": EquipmentType.REEFER,
    "refrigerated": EquipmentType.REEFER,
    "refrigerated van": EquipmentType.REEFER,
    "flatbed": EquipmentType.FLATBED,
    "flat bed": EquipmentType.FLATBED,
    "flat": EquipmentType.FLATBED,
    "step deck": EquipmentType.STEP_DECK,
    "stepdeck": EquipmentType.STEP_DECK,
    "lowboy": EquipmentType.LOWBOY,
    "low boy": EquipmentType.LOWBOY,
    "tanker": EquipmentType.TANKER,
    "hopper": EquipmentType.HOPPER,
    "pneumatic": EquipmentType.PNEUMATIC,
    "intermodal": EquipmentType.INTERMODAL,
    "container": EquipmentType.CONTAINER,
    "car hauler": EquipmentType.CAR_HAULER,
    "auto carrier": EquipmentType.CAR_HAULER,
    "dump": EquipmentType.DUMP_TRUCK,
    "dump truck": EquipmentType.DUMP_TRUCK,
    "box": EquipmentType.BOX_TRUCK,
    "box truck": EquipmentType.BOX_TRUCK,
    "sprinter": EquipmentType.SPRINTER_VAN,
    "sprinter van": EquipmentType.SPRINTER_VAN,
}

# Too common in ordinary speech to be trusted in free text.
_STRUCTURED_ONLY: Final[frozenset[str]] = frozenset({"flat", "box", "dump"})

_SCAN_KEYWORDS = sorted(
    (keyword for keyword in EQUIPMENT_SYNONYMS if keyword not in _STRUCTURED_ONLY),
    key=len,
    reverse=True,
)
_SCAN_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(keyword) for keyword in _SCAN_KEYWORDS) + r")s?\b",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"[\s_\-]+")


def normalize_equipment(value: str | None) -> EquipmentType | None:
    """Map a structured equipment value onto :class:`EquipmentType`."""

    if not value:
        return None
    key = _WHITESPACE.sub(" ", value.strip().lower())
    if key in EQUIPMENT_SYNONYMS:
        return EQUIPMENT_SYNONYMS[key]
    for member in EquipmentType:
        if member.value.lower() == key:
            return member
    log.debug("Dropping unknown equipment type %r", value)
    return None


def scan_equipment(texts: Iterable[str]) -> set[EquipmentType]:
    """Collect equipment mentioned anywhere in free text.

    Longer phrases win over their parts, so "sprinter van" does not also
    count as a dry van.
    """

    found: set[EquipmentType] = set()
    for text in texts:
        for match in _SCAN_PATTERN.finditer(text):
            found.add(EQUIPMENT_SYNONYMS[match.group(1).lower()])
    return found
