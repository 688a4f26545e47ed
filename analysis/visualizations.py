"""
Visualization utilities for fitness plans and backtests.

Provides charts for:
- Workout type distribution (pie)
- Weekly schedule
- Trailing-week activity totals
- Backtest invariant pass rates
"""

from typing import List, Optional, Dict, Any, Sequence, Tuple
import numpy as np
import pandas as pd

import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from fitness_engine.scheduling import WorkoutScheduleItem
from simulation.engine import SimulationResult, aggregate_results, INVARIANTS
from .activity_summary import DISTRIBUTION_COLORS


def plot_workout_distribution(
    summary: Dict[str, Any],
    title: str = "Workout Distribution",
    figsize: Tuple[int, int] = (6, 6),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Plot the activity distribution as a donut chart.

    Args:
        summary: Output of build_workout_distribution
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    slices = summary.get('slices', [])
    if not slices:
        ax.text(0.5, 0.5, 'No activities logged', ha='center', va='center')
        ax.set_axis_off()
        ax.set_title(title)
        return fig

    ax.pie(
        [s.count for s in slices],
        labels=[f"{s.type} ({s.percentage}%)" for s in slices],
        colors=[s.color for s in slices],
        startangle=90,
        counterclock=False,
        wedgeprops={'width': 0.4},
    )
    ax.text(0, 0, str(summary['total']), ha='center', va='center', fontsize=20)
    ax.set_title(title)
    ax.axis('equal')

    return fig


def plot_weekly_schedule(
    schedule: Sequence[WorkoutScheduleItem],
    title: str = "Weekly Schedule",
    figsize: Tuple[int, int] = (10, 5),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Bar chart of session minutes per day, coloured by workout type.

    Args:
        schedule: 7-day schedule
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    types = []
    for item in schedule:
        if item.workout_type and item.workout_type not in types:
            types.append(item.workout_type)
    color_for = {t: DISTRIBUTION_COLORS[i % len(DISTRIBUTION_COLORS)] for i, t in enumerate(types)}

    x = np.arange(len(schedule))
    heights = [item.duration_minutes for item in schedule]
    colors = [color_for.get(item.workout_type, 'lightgray') for item in schedule]
    ax.bar(x, heights, color=colors)

    for i, item in enumerate(schedule):
        if item.is_rest_day:
            ax.text(x[i], 1, 'REST', ha='center', va='bottom', color='gray')

    ax.set_xticks(x)
    ax.set_xticklabels([item.day_of_week.label[:3] for item in schedule])
    ax.set_ylabel('Minutes')
    ax.set_title(title)

    legend_elements = [Patch(facecolor=color_for[t], label=t) for t in types]
    if legend_elements:
        ax.legend(handles=legend_elements, loc='upper right')

    plt.tight_layout()
    return fig


def plot_weekly_activity(
    totals: pd.DataFrame,
    metric: str = 'minutes',
    title: Optional[str] = None,
    figsize: Tuple[int, int] = (10, 4),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Plot one column of weekly_activity_totals per day.

    Args:
        totals: Output of weekly_activity_totals
        metric: 'minutes', 'calories' or 'steps'
        title: Plot title (default derived from metric)
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    values = totals[metric].astype(float).to_numpy()
    x = np.arange(len(values))
    ax.bar(x, values, color=DISTRIBUTION_COLORS[0])
    ax.axhline(np.mean(values), color='gray', linestyle='--', label='Mean')

    ax.set_xticks(x)
    ax.set_xticklabels(list(totals['day']))
    ax.set_ylabel(metric.capitalize())
    ax.set_title(title or f"Last 7 Days: {metric.capitalize()}")
    ax.legend()
    ax.grid(True, axis='y', alpha=0.3)

    return fig


def plot_invariant_pass_rates(
    results: List[SimulationResult],
    title: str = "Backtest Invariant Pass Rates",
    figsize: Tuple[int, int] = (10, 6),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Horizontal bars of per-invariant pass rates.

    Args:
        results: Simulation results
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    rates = aggregate_results(results).get('invariant_pass_rates', {})
    values = [rates.get(name, 0.0) for name in INVARIANTS]
    colors = ['green' if v >= 100 else 'red' for v in values]

    bars = ax.barh(list(INVARIANTS), values, color=colors)
    for bar, val in zip(bars, values):
        ax.text(bar.get_width() + 1, bar.get_y() + bar.get_height()/2,
                f'{val:.0f}%', va='center')

    ax.set_xlim(0, 110)
    ax.set_xlabel('Pass rate (%)')
    ax.set_title(title)

    plt.tight_layout()
    return fig


def create_plan_dashboard(
    schedule: Sequence[WorkoutScheduleItem],
    summary: Dict[str, Any],
    totals: pd.DataFrame,
    save_path: Optional[str] = None,
    figsize: Tuple[int, int] = (16, 10)
) -> plt.Figure:
    """
    Combine schedule, distribution and weekly activity in one figure.

    Args:
        schedule: 7-day schedule
        summary: Output of build_workout_distribution
        totals: Output of weekly_activity_totals
        save_path: Optional file to save the figure to
        figsize: Figure size

    Returns:
        Matplotlib figure
    """
    fig = plt.figure(figsize=figsize)
    grid = fig.add_gridspec(2, 2)

    plot_weekly_schedule(schedule, ax=fig.add_subplot(grid[0, 0]))
    plot_workout_distribution(summary, ax=fig.add_subplot(grid[0, 1]))
    plot_weekly_activity(totals, ax=fig.add_subplot(grid[1, :]))

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    return fig
