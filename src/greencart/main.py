"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routes import health, simulation
from .config import settings
from .errors import PersistenceError, SimulationInputError, UnexpectedSimulationError
from .logging_config import setup_logging
from .services.simulation.engine import MISSING_INPUT_MESSAGE

logger = logging.getLogger(__name__)

SIMULATION_ERROR_MESSAGE = "Server error during simulation calculation"
PERSISTENCE_ERROR_MESSAGE = "Simulation completed but the results could not be saved."


def _error_body(message: str, exc: Exception | None = None, **extra) -> dict:
    body: dict = {"message": message, **extra}
    if exc is not None and settings.expose_error_detail:
        body["error"] = str(exc)
    return body


def _body_field_names(exc: RequestValidationError) -> tuple[list[str], list[str]]:
    missing: list[str] = []
    invalid: list[str] = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        name = ".".join(loc) or "body"
        (missing if error.get("type") == "missing" else invalid).append(name)
    return missing, invalid


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SimulationInputError)
    async def handle_input_error(request: Request, exc: SimulationInputError) -> JSONResponse:
        logger.info(f"Rejected simulation request ({', '.join(exc.fields)}): {exc.message}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        missing, invalid = _body_field_names(exc)
        if missing and not invalid:
            message = MISSING_INPUT_MESSAGE
        else:
            message = f"Invalid value for: {', '.join(invalid + missing)}."
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
        extra = {}
        if exc.summary is not None:
            summary = exc.summary
            extra["kpis"] = {
                "totalProfit": summary.total_profit,
                "efficiencyScore": summary.efficiency_score,
                "onTimeDeliveries": summary.on_time_deliveries,
                "totalDeliveries": summary.total_deliveries,
                "totalFuelCost": summary.total_fuel_cost,
            }
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(PERSISTENCE_ERROR_MESSAGE, exc, **extra),
        )

    @app.exception_handler(UnexpectedSimulationError)
    async def handle_simulation_error(request: Request, exc: UnexpectedSimulationError) -> JSONResponse:
        logger.exception("Error during simulation", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(SIMULATION_ERROR_MESSAGE, exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, root_path="")
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    register_exception_handlers(app)
    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(simulation.router, prefix=settings.api_prefix)
    return app


app = create_app()
