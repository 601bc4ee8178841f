"""Permissive boundary model for upstream freight-call extraction output.

The language-model extraction is best effort: fields may be missing, null,
numbers where text is expected, or a single string where a list is
expected. Everything is coerced here so the normalizer only ever sees one
shape. Nothing outside :mod:`carrierbase.domain.extraction` should import
these models.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Annotated, ClassVar

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

log = logging.getLogger(__name__)

_MONEY_NOISE = re.compile(r"[$,\s]|USD", re.IGNORECASE)


def _to_text(value: object) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return str(int(value)) if float(value).is_integer() else str(value)
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _to_text_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str | int | float):
        items: list[object] = [value]
    elif isinstance(value, Mapping):
        items = list(value.values())  # pyright: ignore[reportUnknownArgumentType]
    elif isinstance(value, list | tuple | set):
        items = list(value)  # pyright: ignore[reportUnknownArgumentType]
    else:
        return []
    texts = (_to_text(item) for item in items)
    return [text for text in texts if text]


def _to_money(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        cleaned = _MONEY_NOISE.sub("", value)
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def _to_date(value: object) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            log.debug("Ignoring unparseable date %r", text)
    return None


def _to_model_list(value: object) -> list[object]:
    if value is None:
        return []
    if isinstance(value, list | tuple):
        return [item for item in value if isinstance(item, Mapping)]  # pyright: ignore[reportUnknownVariableType]
    if isinstance(value, Mapping):
        return [value]
    return []


LooseText = Annotated[str | None, BeforeValidator(_to_text)]
LooseTextList = Annotated[list[str], BeforeValidator(_to_text_list)]
LooseMoney = Annotated[float | None, BeforeValidator(_to_money)]
LooseDate = Annotated[date | None, BeforeValidator(_to_date)]


class ExtractionBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Extraction %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class CarrierInformation(ExtractionBaseModel):
    company_name: LooseText = Field(
        default=None, validation_alias=AliasChoices("company_name", "carrier_name", "name")
    )
    mc_number: LooseText = Field(default=None, validation_alias=AliasChoices("mc_number", "mc"))
    dot_number: LooseText = Field(
        default=None, validation_alias=AliasChoices("dot_number", "dot", "usdot")
    )
    contact_name: LooseText = Field(
        default=None, validation_alias=AliasChoices("contact_name", "dispatcher_name", "contact")
    )
    phone: LooseText = Field(
        default=None, validation_alias=AliasChoices("phone", "contact_phone", "dispatcher_phone")
    )
    email: LooseText = None
    address: LooseText = None
    city: LooseText = None
    state: LooseText = None
    zip_code: LooseText = Field(default=None, validation_alias=AliasChoices("zip", "zip_code"))
    driver_name: LooseText = None
    driver_phone: LooseText = None
    equipment_types: LooseTextList = Field(
        default_factory=list,
        validation_alias=AliasChoices("equipment_types", "equipment_type", "equipment"),
    )


class Location(ExtractionBaseModel):
    city: LooseText = None
    state: LooseText = None


class DriverInfo(ExtractionBaseModel):
    name: LooseText = None
    phone: LooseText = None


class RouteDetails(ExtractionBaseModel):
    origin: Location | None = None
    destination: Location | None = None
    pickup_date: LooseDate = None
    driver_info: DriverInfo | None = None


class Pricing(ExtractionBaseModel):
    carrier_rate: LooseMoney = None
    linehaul: LooseMoney = None


class Participant(ExtractionBaseModel):
    name: LooseText = None
    role: LooseText = None
    phone: LooseText = None


class EquipmentDetails(ExtractionBaseModel):
    type: LooseText = None


class FreightExtractionPayload(ExtractionBaseModel):
    call_type: LooseText = None
    summary: LooseText = None
    key_points: LooseTextList = Field(default_factory=list)
    action_items: LooseTextList = Field(default_factory=list)
    carrier_information: CarrierInformation | None = None
    route_details: RouteDetails | None = None
    pricing: Pricing | None = None
    reference_numbers: LooseTextList = Field(default_factory=list)
    participants: Annotated[list[Participant], BeforeValidator(_to_model_list)] = Field(
        default_factory=list
    )
    equipment_details: EquipmentDetails | None = None

    def carrier_participant(self) -> Participant | None:
        for participant in self.participants:
            if participant.role and participant.role.strip().lower() == "carrier":
                return participant
        return None
