"""Simulation orchestration: validate, load the order snapshot, evaluate, persist."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from ...errors import PersistenceError, UnexpectedSimulationError
from ...models.domain import SimulationResult
from ...persistence.base import OrderRepository, SimulationResultRepository
from ...schemas.simulation import SimulationRequest
from .engine import KpiSummary, evaluate, validate_parameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SimulationRun:
    summary: KpiSummary
    result: SimulationResult


def build_result(summary: KpiSummary, timestamp: datetime | None = None) -> SimulationResult:
    params = summary.params
    return SimulationResult(
        number_of_drivers=params.number_of_drivers,
        route_start_time=params.route_start_time,
        max_hours_per_day=params.max_hours_per_day,
        total_profit=summary.total_profit,
        efficiency_score=summary.efficiency_score,
        on_time_deliveries=summary.on_time_deliveries,
        total_deliveries=summary.total_deliveries,
        total_fuel_cost=summary.total_fuel_cost,
        timestamp=timestamp or datetime.now(timezone.utc),
    )


def run_simulation(
    request: SimulationRequest,
    order_repository: OrderRepository,
    result_repository: SimulationResultRepository,
) -> SimulationRun:
    """Run one simulation over every stored order and record it in history.

    Raises:
        MissingInputError / InvalidInputError: before any store is read.
        UnexpectedSimulationError: loading or evaluating the snapshot failed.
        PersistenceError: KPIs were computed but could not be saved; the
            summary is attached to the exception.
    """
    params = validate_parameters(
        request.number_of_drivers,
        request.route_start_time,
        request.max_hours_per_day,
    )

    try:
        orders = order_repository.find_all()
        summary = evaluate(orders, params)
    except Exception as exc:
        raise UnexpectedSimulationError(str(exc)) from exc

    try:
        saved = result_repository.save(build_result(summary))
    except Exception as exc:
        logger.error(f"Simulation computed but could not be saved: {exc}")
        raise PersistenceError(str(exc), summary=summary) from exc

    logger.info(
        "Simulation %s saved: profit=%s efficiency=%s on_time=%d/%d fuel=%s",
        saved.id,
        summary.total_profit,
        summary.efficiency_score,
        summary.on_time_deliveries,
        summary.total_deliveries,
        summary.total_fuel_cost,
    )
    return SimulationRun(summary=summary, result=saved)


def get_history(result_repository: SimulationResultRepository) -> list[SimulationResult]:
    """Return every stored simulation result, newest first."""
    return result_repository.list_all()
