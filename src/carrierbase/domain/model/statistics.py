"""Value objects describing computed carrier performance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(slots=True, frozen=True)
class FrequencyCount:
    key: str
    count: int


@dataclass(slots=True, frozen=True)
class CarrierStatisticsSnapshot:
    carrier_id: UUID
    total_loads: int
    completed_loads: int
    cancelled_loads: int
    on_time_percentage: int
    average_rate: float | None
    average_margin: float | None
    lifetime_revenue: float
    performance_score: int
    last_load_date: datetime | None
    computed_at: datetime
    top_equipment: tuple[FrequencyCount, ...] = field(default_factory=tuple)
    top_lanes: tuple[FrequencyCount, ...] = field(default_factory=tuple)
