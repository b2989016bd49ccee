"""Repository contracts consumed by the simulation service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models.domain import Order, Route, SimulationResult


class RouteRepository(ABC):
    """Read access to route reference data."""

    @abstractmethod
    def get(self, route_ref: str) -> Route | None:
        raise NotImplementedError

    @abstractmethod
    def find_all(self) -> list[Route]:
        raise NotImplementedError


class OrderRepository(ABC):
    """Read access to orders, each with its route resolved inline."""

    @abstractmethod
    def find_all(self) -> list[Order]:
        raise NotImplementedError


class SimulationResultRepository(ABC):
    """Append-only store of simulation results."""

    @abstractmethod
    def save(self, result: SimulationResult) -> SimulationResult:
        """Persist ``result`` and return it with its assigned identifier."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[SimulationResult]:
        """Return every stored result, newest first."""
        raise NotImplementedError
