"""Simulation engine for invariant backtesting."""

from .engine import SimulationEngine, SimulationResult, aggregate_results

__all__ = [
    'SimulationEngine',
    'SimulationResult',
    'aggregate_results',
]
