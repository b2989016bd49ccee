"""Supabase-backed repositories for routes, orders and simulation results."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from supabase import Client

from ..models.domain import Order, Route, SimulationResult, TrafficLevel
from .base import OrderRepository, RouteRepository, SimulationResultRepository

logger = logging.getLogger(__name__)

ROUTES_TABLE = "routes"
ORDERS_TABLE = "orders"
RESULTS_TABLE = "simulation_results"


def route_from_row(row: dict[str, Any]) -> Route | None:
    """Build a Route from a database row, or None when the row cannot be used."""
    try:
        distance_km = float(row["distance_km"])
        base_time_min = float(row["base_time_min"])
        if not (distance_km >= 0 and base_time_min >= 0):
            raise ValueError("distance_km and base_time_min must be non-negative")
        return Route(
            route_id=str(row["route_id"]),
            distance_km=distance_km,
            traffic_level=TrafficLevel.parse(row.get("traffic_level") or TrafficLevel.LOW),
            base_time_min=base_time_min,
        )
    except (KeyError, ValueError, TypeError) as e:
        logger.warning(f"Skipping invalid route row {row.get('route_id', 'unknown')}: {e}")
        return None


def result_to_row(result: SimulationResult) -> dict[str, Any]:
    return {
        "timestamp": result.timestamp.isoformat(),
        "number_of_drivers": result.number_of_drivers,
        "route_start_time": result.route_start_time,
        "max_hours_per_day": result.max_hours_per_day,
        "total_profit": result.total_profit,
        "efficiency_score": result.efficiency_score,
        "on_time_deliveries": result.on_time_deliveries,
        "total_deliveries": result.total_deliveries,
        "total_fuel_cost": result.total_fuel_cost,
    }


def result_from_row(row: dict[str, Any]) -> SimulationResult:
    timestamp = row["timestamp"]
    if isinstance(timestamp, str):
        timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    return SimulationResult(
        id=str(row["id"]),
        timestamp=timestamp,
        number_of_drivers=int(row["number_of_drivers"]),
        route_start_time=str(row["route_start_time"]),
        max_hours_per_day=float(row["max_hours_per_day"]),
        total_profit=float(row["total_profit"]),
        efficiency_score=float(row["efficiency_score"]),
        on_time_deliveries=int(row["on_time_deliveries"]),
        total_deliveries=int(row["total_deliveries"]),
        total_fuel_cost=float(row["total_fuel_cost"]),
    )


class SupabaseRouteRepository(RouteRepository):
    def __init__(self, client: Client) -> None:
        self.client = client

    def get(self, route_ref: str) -> Route | None:
        response = self.client.table(ROUTES_TABLE).select("*").eq("route_id", route_ref).limit(1).execute()
        rows = response.data or []
        return route_from_row(rows[0]) if rows else None

    def find_all(self) -> list[Route]:
        response = self.client.table(ROUTES_TABLE).select("*").execute()
        routes = (route_from_row(row) for row in (response.data or []))
        return [route for route in routes if route is not None]


class SupabaseOrderRepository(OrderRepository):
    """Loads all orders and resolves their ``route_id`` against the routes table."""

    def __init__(self, client: Client, routes: RouteRepository | None = None) -> None:
        self.client = client
        self.routes = routes or SupabaseRouteRepository(client)

    def find_all(self) -> list[Order]:
        routes_by_id = {route.route_id: route for route in self.routes.find_all()}
        response = self.client.table(ORDERS_TABLE).select("*").execute()

        orders: list[Order] = []
        for row in response.data or []:
            try:
                route_ref = row.get("route_id")
                orders.append(
                    Order(
                        order_id=str(row["order_id"]),
                        value_rs=float(row["value_rs"]),
                        route=routes_by_id.get(str(route_ref)) if route_ref is not None else None,
                        actual_delivery_duration_min=float(row["actual_delivery_duration_min"]),
                    )
                )
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid order row {row.get('order_id', 'unknown')}: {e}")
                continue
        return orders


class SupabaseSimulationResultRepository(SimulationResultRepository):
    def __init__(self, client: Client) -> None:
        self.client = client

    def save(self, result: SimulationResult) -> SimulationResult:
        try:
            response = self.client.table(RESULTS_TABLE).insert(result_to_row(result)).execute()
        except Exception as e:
            logger.error(f"Failed to save simulation result: {e}")
            raise
        rows = response.data or []
        if not rows or rows[0].get("id") is None:
            raise RuntimeError("Supabase insert returned no simulation result id")
        return result.with_id(str(rows[0]["id"]))

    def list_all(self) -> list[SimulationResult]:
        response = self.client.table(RESULTS_TABLE).select("*").order("timestamp", desc=True).execute()
        return [result_from_row(row) for row in (response.data or [])]
