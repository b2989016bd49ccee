"""Repository selection for the configured storage backend."""

from __future__ import annotations

from functools import lru_cache

from ..config import settings
from ..db.supabase import get_supabase_client
from .base import OrderRepository, RouteRepository, SimulationResultRepository
from .database import (
    SupabaseOrderRepository,
    SupabaseRouteRepository,
    SupabaseSimulationResultRepository,
)
from .memory import (
    InMemoryOrderRepository,
    InMemoryRouteRepository,
    InMemorySimulationResultRepository,
)


def _require_supabase():
    client = get_supabase_client()
    if client is None:
        raise RuntimeError(
            "Supabase storage selected but not configured. "
            "Set GREENCART_SUPABASE_URL and GREENCART_SUPABASE_KEY environment variables."
        )
    return client


@lru_cache(maxsize=1)
def _memory_routes() -> InMemoryRouteRepository:
    return InMemoryRouteRepository()


@lru_cache(maxsize=1)
def _memory_orders() -> InMemoryOrderRepository:
    return InMemoryOrderRepository(_memory_routes())


@lru_cache(maxsize=1)
def _memory_results() -> InMemorySimulationResultRepository:
    return InMemorySimulationResultRepository()


def get_route_repository() -> RouteRepository:
    if settings.storage_backend == "supabase":
        return SupabaseRouteRepository(_require_supabase())
    return _memory_routes()


def get_order_repository() -> OrderRepository:
    if settings.storage_backend == "supabase":
        client = _require_supabase()
        return SupabaseOrderRepository(client, SupabaseRouteRepository(client))
    return _memory_orders()


def get_result_repository() -> SimulationResultRepository:
    if settings.storage_backend == "supabase":
        return SupabaseSimulationResultRepository(_require_supabase())
    return _memory_results()


__all__ = [
    "OrderRepository",
    "RouteRepository",
    "SimulationResultRepository",
    "get_order_repository",
    "get_result_repository",
    "get_route_repository",
]
