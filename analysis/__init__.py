"""Analysis, summary and visualization utilities."""

from .activity_summary import (
    DistributionSlice,
    build_workout_distribution,
    weekly_activity_totals,
)
from .visualizations import (
    plot_workout_distribution,
    plot_weekly_schedule,
    plot_weekly_activity,
    plot_invariant_pass_rates,
    create_plan_dashboard,
)
from .reports import generate_plan_report, generate_backtest_report

__all__ = [
    'DistributionSlice',
    'build_workout_distribution',
    'weekly_activity_totals',
    'plot_workout_distribution',
    'plot_weekly_schedule',
    'plot_weekly_activity',
    'plot_invariant_pass_rates',
    'create_plan_dashboard',
    'generate_plan_report',
    'generate_backtest_report',
]
