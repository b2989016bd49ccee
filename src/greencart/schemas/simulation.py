"""Simulation request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from ..models.domain import SimulationResult


class SimulationRequest(BaseModel):
    """Run parameters; presence and ranges are checked by the engine, not here."""

    model_config = ConfigDict(populate_by_name=True)

    number_of_drivers: Optional[StrictInt] = Field(None, alias="numberOfDrivers")
    route_start_time: Optional[str] = Field(None, alias="routeStartTime", description="HH:MM")
    max_hours_per_day: Optional[float] = Field(None, alias="maxHoursPerDay")


class KpiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_profit: float = Field(..., alias="totalProfit")
    efficiency_score: float = Field(..., alias="efficiencyScore")
    on_time_deliveries: int = Field(..., alias="onTimeDeliveries")
    total_deliveries: int = Field(..., alias="totalDeliveries")
    total_fuel_cost: float = Field(..., alias="totalFuelCost")


class SimulationResponse(KpiModel):
    simulation_id: str = Field(..., alias="simulationId")
    message: str


class SimulationHistoryItem(KpiModel):
    simulation_id: Optional[str] = Field(None, alias="simulationId")
    timestamp: datetime
    number_of_drivers: int = Field(..., alias="numberOfDrivers")
    route_start_time: str = Field(..., alias="routeStartTime")
    max_hours_per_day: float = Field(..., alias="maxHoursPerDay")

    @classmethod
    def from_result(cls, result: SimulationResult) -> SimulationHistoryItem:
        return cls(
            simulation_id=result.id,
            timestamp=result.timestamp,
            number_of_drivers=result.number_of_drivers,
            route_start_time=result.route_start_time,
            max_hours_per_day=result.max_hours_per_day,
            total_profit=result.total_profit,
            efficiency_score=result.efficiency_score,
            on_time_deliveries=result.on_time_deliveries,
            total_deliveries=result.total_deliveries,
            total_fuel_cost=result.total_fuel_cost,
        )


class ErrorResponse(BaseModel):
    message: str
    error: Optional[str] = None
