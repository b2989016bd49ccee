"""Delivery simulation services."""

from .engine import KpiSummary, KpiTotals, OrderEvaluation, evaluate, evaluate_order, validate_parameters
from .service import SimulationRun, get_history, run_simulation

__all__ = [
    "KpiSummary",
    "KpiTotals",
    "OrderEvaluation",
    "SimulationRun",
    "evaluate",
    "evaluate_order",
    "get_history",
    "run_simulation",
    "validate_parameters",
]
