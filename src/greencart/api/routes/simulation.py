"""Simulation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import UnexpectedSimulationError
from ...persistence import get_order_repository, get_result_repository
from ...schemas.simulation import (
    ErrorResponse,
    SimulationHistoryItem,
    SimulationRequest,
    SimulationResponse,
)
from ...services.simulation import get_history, run_simulation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulation", tags=["simulation"])

SUCCESS_MESSAGE = "Simulation completed and KPIs calculated successfully."


@router.post(
    "",
    response_model=SimulationResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def post_simulation(request: SimulationRequest) -> SimulationResponse:
    """Run the delivery simulation over all stored orders and record the KPIs."""
    try:
        order_repository = get_order_repository()
        result_repository = get_result_repository()
    except Exception as exc:
        raise UnexpectedSimulationError(str(exc)) from exc

    run = run_simulation(request, order_repository, result_repository)
    summary = run.summary
    return SimulationResponse(
        total_profit=summary.total_profit,
        efficiency_score=summary.efficiency_score,
        on_time_deliveries=summary.on_time_deliveries,
        total_deliveries=summary.total_deliveries,
        total_fuel_cost=summary.total_fuel_cost,
        simulation_id=run.result.id,
        message=SUCCESS_MESSAGE,
    )


@router.get("/history", response_model=list[SimulationHistoryItem], status_code=status.HTTP_200_OK)
def get_simulation_history() -> list[SimulationHistoryItem]:
    try:
        results = get_history(get_result_repository())
    except Exception as exc:
        logger.error(f"Failed to fetch simulation history: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error fetching simulation history",
        ) from exc
    return [SimulationHistoryItem.from_result(result) for result in results]
