"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check the configured storage backend and report what it holds."""
    from ...db.supabase import get_supabase_client
    from ...persistence import get_result_repository, get_route_repository

    if settings.storage_backend == "memory":
        return {
            "backend": "memory",
            "configured": True,
            "connected": True,
            "routes_count": len(get_route_repository().find_all()),
            "simulations_count": len(get_result_repository().list_all()),
            "message": "Using in-process storage; data is lost on restart.",
        }

    supabase = get_supabase_client()
    if not supabase:
        return {
            "backend": "supabase",
            "configured": False,
            "message": "Supabase not configured. Set GREENCART_SUPABASE_URL and GREENCART_SUPABASE_KEY environment variables.",
        }

    try:
        routes_count = len(get_route_repository().find_all())
        simulations_count = len(get_result_repository().list_all())
        return {
            "backend": "supabase",
            "configured": True,
            "connected": True,
            "routes_count": routes_count,
            "simulations_count": simulations_count,
            "message": f"Database connected. Found {routes_count} routes and {simulations_count} simulation runs.",
        }
    except Exception as exc:
        return {
            "backend": "supabase",
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
