"""Carrier performance statistics derived from load history."""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import TYPE_CHECKING, Final

from carrierbase.domain.errors import (
    CarrierNotFoundError,
    PersistenceError,
    StatisticsUnavailableError,
)
from carrierbase.domain.model import (
    CarrierStatisticsSnapshot,
    FrequencyCount,
    LoadStatus,
    utcnow,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import datetime
    from uuid import UUID

    from carrierbase.domain.model import LoadRecord
    from carrierbase.domain.ports import RegistryUnitOfWork

log = logging.getLogger(__name__)

DELIVERED_STATUSES: Final[frozenset[str]] = frozenset(
    {LoadStatus.DELIVERED.value, LoadStatus.COMPLETED.value}
)
TOP_EQUIPMENT: Final[int] = 3
TOP_LANES: Final[int] = 5

ON_TIME_WEIGHT: Final[float] = 0.4
COMPLETION_WEIGHT: Final[float] = 0.3
CANCELLATION_WEIGHT: Final[float] = 0.2
EXPERIENCE_WEIGHT: Final[float] = 0.1
CANCELLATION_PENALTY_FACTOR: Final[float] = 10.0
# Experience saturates at 50 loads.
LOADS_PER_EXPERIENCE_POINT: Final[float] = 2.0
# Score of a carrier without load history.
NEW_CARRIER_SCORE: Final[int] = 70


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _mean(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), 2)


def _top(keys: Iterable[str], limit: int) -> tuple[FrequencyCount, ...]:
    # Counter keeps first-seen order and sorted() is stable, so ties keep query order.
    counts = Counter(keys)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return tuple(FrequencyCount(key=key, count=count) for key, count in ranked[:limit])


def _is_on_time(load: LoadRecord) -> bool:
    if load.delivery_date is None or load.actual_delivery_date is None:
        return True
    return load.actual_delivery_date <= load.delivery_date


def performance_score(
    *,
    on_time_percentage: float,
    completion_rate: float,
    cancellation_rate: float,
    total_loads: int,
) -> int:
    """Blend on-time, completion, cancellation and experience into 0..100.

    Cancellations cost ten times their raw rate; experience tops out at 50 loads.
    A carrier with no loads gets :data:`NEW_CARRIER_SCORE`.
    """

    if total_loads <= 0:
        return NEW_CARRIER_SCORE
    cancellation_score = max(0.0, 100.0 - cancellation_rate * CANCELLATION_PENALTY_FACTOR)
    experience_score = min(100.0, total_loads * LOADS_PER_EXPERIENCE_POINT)
    score = (
        on_time_percentage * ON_TIME_WEIGHT
        + completion_rate * COMPLETION_WEIGHT
        + cancellation_score * CANCELLATION_WEIGHT
        + experience_score * EXPERIENCE_WEIGHT
    )
    return max(0, min(100, round_half_up(score)))


def compute_statistics(
    carrier_id: UUID,
    loads: Sequence[LoadRecord],
    *,
    now: datetime | None = None,
) -> CarrierStatisticsSnapshot:
    """Pure aggregation over the full load history of one carrier."""

    total = len(loads)
    completed = sum(1 for load in loads if load.status == LoadStatus.COMPLETED.value)
    cancelled = sum(1 for load in loads if load.status == LoadStatus.CANCELLED.value)

    delivered = [load for load in loads if load.status in DELIVERED_STATUSES]
    if delivered:
        on_time_count = sum(1 for load in delivered if _is_on_time(load))
        on_time_percentage = round_half_up(on_time_count * 100 / len(delivered))
    else:
        on_time_percentage = 100

    rates = [load.rate_to_carrier for load in loads if load.rate_to_carrier is not None]
    margins = [load.margin for load in loads if load.margin is not None]

    completion_rate = completed * 100 / total if total else 100.0
    cancellation_rate = cancelled * 100 / total if total else 0.0

    created = [load.created_at for load in loads if load.created_at is not None]

    return CarrierStatisticsSnapshot(
        carrier_id=carrier_id,
        total_loads=total,
        completed_loads=completed,
        cancelled_loads=cancelled,
        on_time_percentage=on_time_percentage,
        average_rate=_mean(rates),
        average_margin=_mean(margins),
        lifetime_revenue=round(sum(rates), 2),
        performance_score=performance_score(
            on_time_percentage=on_time_percentage,
            completion_rate=completion_rate,
            cancellation_rate=cancellation_rate,
            total_loads=total,
        ),
        last_load_date=max(created) if created else None,
        computed_at=now or utcnow(),
        top_equipment=_top(
            (load.equipment_type for load in loads if load.equipment_type), TOP_EQUIPMENT
        ),
        top_lanes=_top((lane for load in loads if (lane := load.lane)), TOP_LANES),
    )


class StatisticsEngine:
    """Recompute and store a carrier's cached statistics.

    Each run reads the whole load history and overwrites the cached fields,
    so repeating it is harmless.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], RegistryUnitOfWork],
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._clock = clock

    def recompute(self, carrier_id: UUID) -> CarrierStatisticsSnapshot:
        """Raises :class:`StatisticsUnavailableError` if history cannot be read."""

        with self._unit_of_work_factory() as uow:
            carrier = uow.repositories.carriers.get(carrier_id)
            if carrier is None:
                raise CarrierNotFoundError(carrier_id)
            try:
                loads = uow.repositories.loads.list_for_carrier(carrier_id)
            except PersistenceError as exc:
                raise StatisticsUnavailableError(
                    f"Load history for carrier {carrier_id} unavailable: {exc}"
                ) from exc

            snapshot = compute_statistics(carrier_id, loads, now=self._clock())
            carrier.apply_statistics(snapshot)
            uow.commit()

        log.debug(
            "Carrier %s: %d loads, score %d",
            carrier_id,
            snapshot.total_loads,
            snapshot.performance_score,
        )
        return snapshot
