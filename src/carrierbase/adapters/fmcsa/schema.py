"""FMCSA QCMobile response schemas.

The service has shipped several field spellings over time; each field
accepts the known variants. Values are kept close to the wire (strings,
numbers, ``"Y"``/``"N"`` flags) and converted in the translator.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

type Scalar = str | int | float | bool | None


def _aliases(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class FmcsaBaseModel(BaseModel):
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
            "FMCSA %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class FmcsaCarrier(FmcsaBaseModel):
    dot_number: Scalar = Field(default=None, validation_alias=_aliases("dotNumber", "dot"))
    mc_number: Scalar = Field(
        default=None, validation_alias=_aliases("mcNumber", "mc", "docketNumber")
    )
    legal_name: str | None = Field(default=None, validation_alias=_aliases("legalName", "name"))
    dba_name: str | None = Field(
        default=None, validation_alias=_aliases("dbaName", "doingBusinessAs")
    )

    physical_address: str | None = Field(
        default=None, validation_alias=_aliases("phyStreet", "physicalAddress")
    )
    physical_city: str | None = Field(
        default=None, validation_alias=_aliases("phyCity", "physicalCity")
    )
    physical_state: str | None = Field(
        default=None, validation_alias=_aliases("phyState", "physicalState")
    )
    physical_zip: Scalar = Field(
        default=None, validation_alias=_aliases("phyZipcode", "phyZip", "physicalZip")
    )
    phone: Scalar = Field(default=None, validation_alias=_aliases("phone", "telephone"))

    status: str | None = Field(default=None, validation_alias=_aliases("status", "operatingStatus"))
    allowed_to_operate: Scalar = Field(default=None, alias="allowedToOperate")
    entity_type: str | None = Field(default=None, alias="entityType")
    cargo_carried: list[str] | str | None = Field(
        default=None, validation_alias=_aliases("cargoCarried", "cargo")
    )

    authority_date: Scalar = Field(default=None, alias="authorityDate")
    safety_rating: str | None = Field(
        default=None, validation_alias=_aliases("safetyRating", "rating")
    )
    safety_rating_date: Scalar = Field(default=None, alias="safetyRatingDate")
    out_of_service_date: Scalar = Field(
        default=None, validation_alias=_aliases("outOfServiceDate", "oosDate")
    )
    mcs150_date: Scalar = Field(
        default=None, validation_alias=_aliases("mcs150Date", "mcs150FormDate")
    )
    mcs150_mileage: Scalar = Field(default=None, alias="mcs150Mileage")

    bipd_insurance_on_file: Scalar = Field(default=None, alias="bipdInsuranceOnFile")
    bipd_required: Scalar = Field(
        default=None, validation_alias=_aliases("bipdRequired", "bipdRequiredAmount")
    )
    bipd_on_file: Scalar = Field(default=None, alias="bipdOnFile")
    cargo_insurance_on_file: Scalar = Field(default=None, alias="cargoInsuranceOnFile")
    cargo_required: Scalar = Field(default=None, alias="cargoRequired")
    cargo_on_file: Scalar = Field(default=None, alias="cargoOnFile")

    vehicle_inspections: Scalar = Field(
        default=None, validation_alias=_aliases("vehicleInspections", "vehicleInsp")
    )
    vehicle_oos_rate: Scalar = Field(
        default=None, validation_alias=_aliases("vehicleOOSRate", "vehicleOosRate")
    )
    driver_inspections: Scalar = Field(
        default=None, validation_alias=_aliases("driverInspections", "driverInsp")
    )
    driver_oos_rate: Scalar = Field(
        default=None, validation_alias=_aliases("driverOOSRate", "driverOosRate")
    )
    hazmat_inspections: Scalar = Field(
        default=None, validation_alias=_aliases("hazmatInspections", "hazmatInsp")
    )
    hazmat_oos_rate: Scalar = Field(
        default=None, validation_alias=_aliases("hazmatOOSRate", "hazmatOosRate")
    )

    fatal_crashes: Scalar = Field(
        default=None, validation_alias=_aliases("fatalCrashes", "fatalCrash")
    )
    injury_crashes: Scalar = Field(
        default=None, validation_alias=_aliases("injuryCrashes", "injCrash")
    )
    tow_crashes: Scalar = Field(
        default=None, validation_alias=_aliases("towCrashes", "towawayCrash")
    )
    total_crashes: Scalar = Field(
        default=None, validation_alias=_aliases("totalCrashes", "crashTotal")
    )

    power_units: Scalar = Field(
        default=None, validation_alias=_aliases("powerUnits", "totalPowerUnits")
    )
    drivers: Scalar = Field(default=None, validation_alias=_aliases("drivers", "totalDrivers"))


class FmcsaCarrierEnvelope(FmcsaBaseModel):
    carrier: FmcsaCarrier | None = None


class FmcsaResponse(FmcsaBaseModel):
    """Top-level QCMobile payload.

    ``content`` is a single envelope for DOT lookups and a list of envelopes
    for docket (MC) lookups; it is ``null`` when nothing matched.
    """

    content: FmcsaCarrierEnvelope | list[FmcsaCarrierEnvelope] | None = None

    def first_carrier(self) -> FmcsaCarrier | None:
        envelopes = self.content if isinstance(self.content, list) else [self.content]
        for envelope in envelopes:
            if envelope is not None and envelope.carrier is not None:
                return envelope.carrier
        return None
