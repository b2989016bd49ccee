"""Domain models for routes, orders and simulation runs."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class TrafficLevel(str, Enum):
    """Traffic classification recorded against a route."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: str | TrafficLevel) -> TrafficLevel:
        if isinstance(value, TrafficLevel):
            return value
        normalized = str(value).strip().lower()
        for level in cls:
            if level.value.lower() == normalized:
                return level
        raise ValueError(f"Unknown traffic level '{value}'")


@dataclass(frozen=True, slots=True)
class Route:
    """Reference data describing a delivery route."""

    route_id: str
    distance_km: float
    traffic_level: TrafficLevel
    base_time_min: float


@dataclass(frozen=True, slots=True)
class Order:
    """A delivery snapshot with its route resolved inline (``None`` when unresolved)."""

    order_id: str
    value_rs: float
    route: Optional[Route]
    actual_delivery_duration_min: float


@dataclass(frozen=True, slots=True)
class RunParameters:
    number_of_drivers: int
    route_start_time: str
    max_hours_per_day: float


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """A single simulation run as stored in history."""

    number_of_drivers: int
    route_start_time: str
    max_hours_per_day: float
    total_profit: float
    efficiency_score: float
    on_time_deliveries: int
    total_deliveries: int
    total_fuel_cost: float
    timestamp: datetime
    id: Optional[str] = None

    def with_id(self, result_id: str) -> SimulationResult:
        return replace(self, id=result_id)
