"""
Report generation utilities for fitness plans and backtests.

Generates plain-text summaries and per-user breakdowns.
"""

from typing import List, Optional
from datetime import datetime
import numpy as np

from fitness_engine.fitness_plan_engine import FitnessPlanState
from fitness_engine.plan_params import PlanParams
from fitness_engine.recommendations import RecommendedWorkout
from fitness_engine.scheduling import format_weekly_schedule
from fitness_engine.workout_splits import format_distribution
from simulation.engine import SimulationResult, aggregate_results, INVARIANTS


def generate_plan_report(
    state: FitnessPlanState,
    recommendations: Optional[List[RecommendedWorkout]] = None,
    title: str = "Fitness Plan Report"
) -> str:
    """
    Generate a text report for one user's plan.

    Args:
        state: Plan state (targets and optional schedule)
        recommendations: Today's recommendations to include
        title: Report title

    Returns:
        Formatted report string
    """
    b = state.biometrics
    t = state.targets

    report = f"""
{'='*60}
{title}
{'='*60}

PROFILE
-------
Weight:            {b.weight_kg:>8.1f} kg
Height:            {b.height_cm:>8.1f} cm
BMI:               {b.bmi:>8.1f}
Activity level:    {b.activity_level or '(not set)'}
Goal:              {b.fitness_goal or '(not set)'}
Preferences:       {', '.join(b.workout_preferences) or '(none)'}

TARGETS
-------
Daily move target:       {t.daily_move_target:>6d} kcal
Weekly calorie burn:     {t.weekly_calorie_burn_target:>6d} kcal
Weekly workout minutes:  {t.weekly_workout_minutes:>6d} min
Weekly sessions:         {t.weekly_workout_frequency_target:>6d}
Daily exercise target:   {t.daily_exercise_target:>6d} min
Edited:                  {'yes' if state.has_changes else 'no'}

{format_distribution(t.workout_type_distribution)}
"""

    if state.schedule:
        report += "\n" + format_weekly_schedule(state.schedule) + "\n"

    if recommendations:
        report += "\nRECOMMENDED TODAY\n-----------------\n"
        for rec in recommendations:
            report += (f"{rec.template.title:<26} {rec.type:<11} "
                       f"{rec.duration:>3d} min {rec.calories:>5d} kcal\n")

    report += "\n" + "=" * 60 + "\n"
    return report


def generate_backtest_report(
    results: List[SimulationResult],
    params: Optional[PlanParams] = None,
    title: str = "Fitness Plan Backtesting Report"
) -> str:
    """
    Generate comprehensive text report from simulation results.

    Args:
        results: Simulation results
        params: Parameters used (for documentation)
        title: Report title

    Returns:
        Formatted report string
    """
    agg = aggregate_results(results)
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    if not results:
        return f"\n{'='*70}\n{title}\n{'='*70}\nGenerated: {timestamp}\nNo simulations.\n"

    report = f"""
{'='*70}
{title}
{'='*70}
Generated: {timestamp}
Simulations: {agg['n_simulations']}
All invariants held: {agg['n_passed']}/{agg['n_simulations']} ({agg['pct_passed']:.1f}%)

TARGETS
-------
Daily move target (mean):  {agg['mean_daily_move_target']:>8.1f} kcal
Daily move target (std):   {agg['std_daily_move_target']:>8.1f}
Daily move target (range): {agg['min_daily_move_target']} - {agg['max_daily_move_target']}
Weekly sessions (mean):    {agg['mean_weekly_sessions']:>8.2f}
Weekly minutes (mean):     {agg['mean_weekly_minutes']:>8.1f}
Dropped sessions:          {agg['total_dropped_sessions']:>8d}

INVARIANTS
----------
"""
    for name in INVARIANTS:
        rate = agg['invariant_pass_rates'][name]
        report += f"{name:<26} {rate:>6.1f}%\n"

    # Per-user breakdown
    report += """
PER-USER BREAKDOWN
------------------
"""
    report += f"{'User':<28} {'kcal/day':>8} {'Sess':>5} {'Min':>5} {'Types':>6} {'Status':>8}\n"
    report += "-" * 70 + "\n"

    for r in results:
        t = r.state.targets
        status = "ok" if r.passed else "FAIL"
        report += (f"{r.profile_name[:28]:<28} "
                   f"{t.daily_move_target:>8d} "
                   f"{t.weekly_workout_frequency_target:>5d} "
                   f"{t.weekly_workout_minutes:>5d} "
                   f"{len(t.workout_type_distribution):>6d} "
                   f"{status:>8}\n")

    failed = [r for r in results if not r.passed]
    if failed:
        report += "\nFAILURES\n--------\n"
        for r in failed:
            report += f"{r.profile_id}: {', '.join(r.failures)}\n"

    # Archetype breakdown
    archetypes = sorted(set(r.archetype for r in results))
    report += "\nBY ARCHETYPE\n------------\n"
    for archetype in archetypes:
        group = [r.state.targets.daily_move_target for r in results if r.archetype == archetype]
        report += f"{archetype:<26} n={len(group):<3d} mean kcal/day={np.mean(group):>7.1f}\n"

    if params:
        report += f"""
PLAN PARAMETERS
---------------
Session length:        {params.session_minutes} min
Lose-weight deficit:   {params.lose_weight_deficit:.0f} kcal
Build-muscle surplus:  {params.build_muscle_surplus:.0f} kcal
Fallbacks:             {params.fallback_weight_kg:.0f} kg, {params.fallback_height_cm:.0f} cm, age {params.fallback_age}
Default time of day:   {params.default_time_of_day}
"""

    report += "\n" + "=" * 70 + "\n"
    return report


def save_report(report: str, filepath: str):
    """Save report to file."""
    with open(filepath, 'w') as f:
        f.write(report)
    print(f"Report saved to: {filepath}")
