"""Supabase client for the GreenCart backend."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


# Tables used by the backend:
#
#   routes(id, route_id, distance_km, traffic_level, base_time_min)
#   orders(id, order_id, value_rs, route_id -> routes.route_id, actual_delivery_duration_min)
#   simulation_results(id, timestamp, number_of_drivers, route_start_time, max_hours_per_day,
#                      total_profit, efficiency_score, on_time_deliveries, total_deliveries,
#                      total_fuel_cost)
