"""Route group exports."""

from . import health, simulation

__all__ = ["health", "simulation"]
