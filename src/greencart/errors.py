"""Exceptions raised while running delivery simulations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .services.simulation.engine import KpiSummary


class GreenCartError(Exception):
    """Base class for all application errors."""


class SimulationInputError(GreenCartError):
    """Run parameters were rejected before any order was evaluated."""

    def __init__(self, message: str, fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.fields = tuple(fields)


class MissingInputError(SimulationInputError):
    pass


class InvalidInputError(SimulationInputError):
    pass


class PersistenceError(GreenCartError):
    """KPIs were computed but the simulation result could not be stored."""

    def __init__(self, message: str, summary: KpiSummary | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.summary = summary


class UnexpectedSimulationError(GreenCartError):
    """Loading or evaluating the order snapshot failed."""

