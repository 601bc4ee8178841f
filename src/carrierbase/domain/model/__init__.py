"""Public domain model surface."""

from __future__ import annotations

from carrierbase.domain.model.candidate import CallMetadata, CarrierCandidate
from carrierbase.domain.model.carrier import CALL_SOURCE, PLACEHOLDER_NAME, Carrier
from carrierbase.domain.model.entity import Entity, ensure_utc, new_id, utcnow
from carrierbase.domain.model.enums import (
    CarrierStatus,
    ConflictKind,
    EquipmentType,
    FieldOrigin,
    LinkageOutcome,
    LoadStatus,
    MatchStrategy,
    OperatingStatus,
    PhoneMatchMode,
    RiskLevel,
    SafetyRating,
    WarningSeverity,
)
from carrierbase.domain.model.interaction import CarrierCallInteraction, CarrierConflict
from carrierbase.domain.model.load import LoadLinkDetails, LoadRecord
from carrierbase.domain.model.statistics import CarrierStatisticsSnapshot, FrequencyCount
from carrierbase.domain.model.verification import (
    DEFAULT_BIPD_REQUIRED,
    AuthoritySnapshot,
    RiskAssessment,
    VerificationRecord,
    VerificationWarning,
)

__all__ = [
    "CALL_SOURCE",
    "DEFAULT_BIPD_REQUIRED",
    "PLACEHOLDER_NAME",
    "AuthoritySnapshot",
    "CallMetadata",
    "Carrier",
    "CarrierCallInteraction",
    "CarrierCandidate",
    "CarrierConflict",
    "CarrierStatisticsSnapshot",
    "CarrierStatus",
    "ConflictKind",
    "Entity",
    "EquipmentType",
    "FieldOrigin",
    "FrequencyCount",
    "LinkageOutcome",
    "LoadLinkDetails",
    "LoadRecord",
    "LoadStatus",
    "MatchStrategy",
    "OperatingStatus",
    "PhoneMatchMode",
    "RiskAssessment",
    "RiskLevel",
    "SafetyRating",
    "VerificationRecord",
    "VerificationWarning",
    "WarningSeverity",
    "ensure_utc",
    "new_id",
    "utcnow",
]
