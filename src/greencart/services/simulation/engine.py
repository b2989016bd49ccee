"""KPI engine: per-order delivery rules and their fleet-level aggregation.

Every order with a resolved route is evaluated independently and the
per-order figures are folded into a :class:`KpiTotals`. Combining totals is
associative and commutative, so the evaluation order of the snapshot never
changes the outcome.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Optional

from ...errors import InvalidInputError, MissingInputError
from ...models.domain import Order, RunParameters, TrafficLevel

logger = logging.getLogger(__name__)

BASE_FUEL_RATE_PER_KM = 5
HIGH_TRAFFIC_SURCHARGE_PER_KM = 2
FUEL_RATE_PER_KM: dict[TrafficLevel, float] = {
    TrafficLevel.LOW: BASE_FUEL_RATE_PER_KM,
    TrafficLevel.MEDIUM: BASE_FUEL_RATE_PER_KM,
    TrafficLevel.HIGH: BASE_FUEL_RATE_PER_KM + HIGH_TRAFFIC_SURCHARGE_PER_KM,
}

ON_TIME_GRACE_MINUTES = 10
LATE_PENALTY = 50
HIGH_VALUE_THRESHOLD = 1000
HIGH_VALUE_BONUS_RATE = 0.10

MISSING_INPUT_MESSAGE = "Please provide numberOfDrivers, routeStartTime, and maxHoursPerDay."
INVALID_INPUT_MESSAGE = "Number of drivers and max hours per day must be positive."


@dataclass(frozen=True, slots=True)
class OrderEvaluation:
    order_id: str
    fuel_cost: float
    is_late: bool
    penalty: float
    bonus: float
    profit: float


@dataclass(frozen=True, slots=True)
class KpiTotals:
    """Running aggregate over evaluated orders."""

    total_profit: float = 0
    total_fuel_cost: float = 0
    on_time_deliveries: int = 0
    total_deliveries: int = 0

    @classmethod
    def of(cls, evaluation: OrderEvaluation) -> KpiTotals:
        return cls(
            total_profit=evaluation.profit,
            total_fuel_cost=evaluation.fuel_cost,
            on_time_deliveries=0 if evaluation.is_late else 1,
            total_deliveries=1,
        )

    def combine(self, other: KpiTotals) -> KpiTotals:
        return KpiTotals(
            total_profit=self.total_profit + other.total_profit,
            total_fuel_cost=self.total_fuel_cost + other.total_fuel_cost,
            on_time_deliveries=self.on_time_deliveries + other.on_time_deliveries,
            total_deliveries=self.total_deliveries + other.total_deliveries,
        )

    @property
    def efficiency_score(self) -> float:
        if self.total_deliveries <= 0:
            return 0
        return (self.on_time_deliveries / self.total_deliveries) * 100


@dataclass(frozen=True, slots=True)
class KpiSummary:
    """Fleet-level KPIs for one simulation run."""

    params: RunParameters
    totals: KpiTotals
    skipped_order_ids: tuple[str, ...] = ()

    @property
    def total_profit(self) -> float:
        return self.totals.total_profit

    @property
    def total_fuel_cost(self) -> float:
        return self.totals.total_fuel_cost

    @property
    def on_time_deliveries(self) -> int:
        return self.totals.on_time_deliveries

    @property
    def total_deliveries(self) -> int:
        return self.totals.total_deliveries

    @property
    def efficiency_score(self) -> float:
        return self.totals.efficiency_score

    def as_dict(self) -> dict[str, float | int]:
        return {
            "total_profit": self.total_profit,
            "efficiency_score": self.efficiency_score,
            "on_time_deliveries": self.on_time_deliveries,
            "total_deliveries": self.total_deliveries,
            "total_fuel_cost": self.total_fuel_cost,
        }


def validate_parameters(
    number_of_drivers: Optional[int],
    route_start_time: Optional[str],
    max_hours_per_day: Optional[float],
) -> RunParameters:
    """Check run parameters before any order is touched.

    ``route_start_time`` is only required to be present; it is echoed into the
    stored result without being parsed.
    """
    provided = {
        "numberOfDrivers": number_of_drivers,
        "routeStartTime": route_start_time,
        "maxHoursPerDay": max_hours_per_day,
    }
    missing = [name for name, value in provided.items() if value is None]
    if missing:
        raise MissingInputError(MISSING_INPUT_MESSAGE, fields=missing)

    # negated comparisons so NaN is rejected too
    invalid = []
    if not number_of_drivers > 0:
        invalid.append("numberOfDrivers")
    if not (max_hours_per_day > 0 and math.isfinite(max_hours_per_day)):
        invalid.append("maxHoursPerDay")
    if invalid:
        raise InvalidInputError(INVALID_INPUT_MESSAGE, fields=invalid)

    return RunParameters(
        number_of_drivers=number_of_drivers,
        route_start_time=route_start_time,
        max_hours_per_day=max_hours_per_day,
    )


def on_time_threshold(base_time_min: float) -> float:
    return base_time_min + ON_TIME_GRACE_MINUTES


def evaluate_order(order: Order) -> OrderEvaluation:
    """Apply the fuel, lateness, penalty, bonus and profit rules to one order."""
    route = order.route
    if route is None:
        raise ValueError(f"Order {order.order_id} has no resolved route")

    fuel_cost = FUEL_RATE_PER_KM[route.traffic_level] * route.distance_km
    is_late = order.actual_delivery_duration_min > on_time_threshold(route.base_time_min)
    penalty = LATE_PENALTY if is_late else 0
    bonus = 0
    if order.value_rs > HIGH_VALUE_THRESHOLD and not is_late:
        bonus = HIGH_VALUE_BONUS_RATE * order.value_rs
    profit = order.value_rs + bonus - penalty - fuel_cost

    return OrderEvaluation(
        order_id=order.order_id,
        fuel_cost=fuel_cost,
        is_late=is_late,
        penalty=penalty,
        bonus=bonus,
        profit=profit,
    )


def evaluate(orders: Iterable[Order], params: RunParameters) -> KpiSummary:
    """Fold every routable order into fleet-level KPIs.

    Orders without a resolvable route are logged and excluded from all
    counts and totals. The run parameters are carried through unchanged and
    do not restrict which orders are evaluated.
    """
    routable: list[Order] = []
    skipped: list[str] = []
    for order in orders:
        if order.route is None:
            logger.warning("Order %s has no assigned route, skipping calculations.", order.order_id)
            skipped.append(order.order_id)
            continue
        routable.append(order)

    totals = reduce(
        KpiTotals.combine,
        (KpiTotals.of(evaluate_order(order)) for order in routable),
        KpiTotals(),
    )
    return KpiSummary(params=params, totals=totals, skipped_order_ids=tuple(skipped))
