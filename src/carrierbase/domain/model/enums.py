"""Enumerations used across the carrier registry."""

from __future__ import annotations

from enum import StrEnum


class CarrierStatus(StrEnum):
    ACTIVE = "active"
    BLACKLISTED = "blacklisted"
    INACTIVE = "inactive"


class EquipmentType(StrEnum):
    DRY_VAN = "Dry Van"
    REEFER = "Reefer"
    FLATBED = "Flatbed"
    STEP_DECK = "Step Deck"
    LOWBOY = "Lowboy"
    TANKER = "Tanker"
    HOPPER = "Hopper"
    PNEUMATIC = "Pneumatic"
    INTERMODAL = "Intermodal"
    CONTAINER = "Container"
    CAR_HAULER = "Car Hauler"
    DUMP_TRUCK = "Dump Truck"
    BOX_TRUCK = "Box Truck"
    SPRINTER_VAN = "Sprinter Van"


class LoadStatus(StrEnum):
    NEEDS_CARRIER = "needs_carrier"
    QUOTED = "quoted"
    BOOKED = "booked"
    DISPATCHED = "dispatched"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FieldOrigin(StrEnum):
    """Whether a candidate field was stated in structured data or scanned from text."""

    EXPLICIT = "explicit"
    INFERRED = "inferred"


class OperatingStatus(StrEnum):
    AUTHORIZED = "AUTHORIZED"
    NOT_AUTHORIZED = "NOT AUTHORIZED"
    OUT_OF_SERVICE = "OUT OF SERVICE"
    SUSPENDED = "SUSPENDED"
    UNREGISTERED = "UNREGISTERED"


class SafetyRating(StrEnum):
    SATISFACTORY = "SATISFACTORY"
    CONDITIONAL = "CONDITIONAL"
    UNSATISFACTORY = "UNSATISFACTORY"
    NOT_RATED = "NOT RATED"


class RiskLevel(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class WarningSeverity(StrEnum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"


class MatchStrategy(StrEnum):
    MC_NUMBER = "mc_number"
    PHONE = "phone"


class ConflictKind(StrEnum):
    PHONE_MC_MISMATCH = "phone_mc_mismatch"
    MC_PHONE_SPLIT = "mc_phone_split"


class LinkageOutcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    CONFLICT = "conflict"


class PhoneMatchMode(StrEnum):
    CONTAINS = "contains"
    EXACT = "exact"
