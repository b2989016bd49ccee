"""Process-local repositories for development runs and tests."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from typing import Iterable, Optional

from ..models.domain import Order, Route, SimulationResult
from .base import OrderRepository, RouteRepository, SimulationResultRepository


@dataclass(frozen=True, slots=True)
class StoredOrder:
    """Order record as stored, referencing its route by ``route_id``."""

    order_id: str
    value_rs: float
    route_ref: Optional[str]
    actual_delivery_duration_min: float


class InMemoryRouteRepository(RouteRepository):
    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self._routes = {route.route_id: route for route in routes}

    def add(self, route: Route) -> None:
        self._routes[route.route_id] = route

    def get(self, route_ref: str) -> Route | None:
        return self._routes.get(route_ref)

    def find_all(self) -> list[Route]:
        return list(self._routes.values())


class InMemoryOrderRepository(OrderRepository):
    """Orders whose route references are resolved through a route repository on read."""

    def __init__(self, routes: RouteRepository, orders: Iterable[StoredOrder] = ()) -> None:
        self.routes = routes
        self._orders = list(orders)

    def add(self, order: StoredOrder) -> None:
        self._orders.append(order)

    def find_all(self) -> list[Order]:
        snapshot: list[Order] = []
        for stored in self._orders:
            route = self.routes.get(stored.route_ref) if stored.route_ref else None
            snapshot.append(
                Order(
                    order_id=stored.order_id,
                    value_rs=stored.value_rs,
                    route=route,
                    actual_delivery_duration_min=stored.actual_delivery_duration_min,
                )
            )
        return snapshot


class InMemorySimulationResultRepository(SimulationResultRepository):
    def __init__(self) -> None:
        self._results: list[SimulationResult] = []
        self._lock = threading.Lock()

    def save(self, result: SimulationResult) -> SimulationResult:
        stored = result.with_id(uuid.uuid4().hex)
        with self._lock:
            self._results.append(stored)
        return stored

    def list_all(self) -> list[SimulationResult]:
        with self._lock:
            indexed = list(enumerate(self._results))
        # insertion order breaks timestamp ties
        indexed.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        return [result for _, result in indexed]
