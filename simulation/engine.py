"""
Simulation Engine: Invariant backtesting of the fitness plan engine.

Runs every synthetic user through target computation, a series of
edit-then-rescale steps and schedule generation, and records which plan
invariants held.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Dict, Any
import numpy as np

from fitness_engine.fitness_plan_engine import FitnessPlanEngine, FitnessPlanState
from fitness_engine.plan_params import PlanParams
from fitness_engine.scheduling import DAYS_PER_WEEK, count_training_days
from fitness_engine.workout_splits import FitnessTargets, MINUTES, SESSIONS
from data.synthetic import SyntheticUser, REFERENCE_DATE


INVARIANTS = (
    'minutes_sum',
    'sessions_sum',
    'frequency_in_range',
    'weekly_burn_consistent',
    'schedule_has_seven_days',
    'training_days_match',
    'rest_days_empty',
    'rescale_minutes_sum',
    'rescale_sessions_sum',
    'rescale_repeatable',
)


def check_target_sums(targets: FitnessTargets) -> Dict[str, bool]:
    """Whether the distribution rows add up to the weekly totals."""
    rows = targets.workout_type_distribution
    return {
        MINUTES: sum(r.weekly_minutes for r in rows) == targets.weekly_workout_minutes,
        SESSIONS: sum(r.weekly_sessions for r in rows) == targets.weekly_workout_frequency_target,
    }


@dataclass
class SimulationResult:
    """Outcome of running one user through the engine."""
    profile_id: str
    profile_name: str
    archetype: str
    state: FitnessPlanState
    checks: Dict[str, bool]
    dropped_sessions: int
    edits: List[Dict[str, int]] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(self.checks.values())

    @property
    def failures(self) -> List[str]:
        return [name for name, ok in self.checks.items() if not ok]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for analysis."""
        t = self.state.targets
        return {
            'profile_id': self.profile_id,
            'profile_name': self.profile_name,
            'archetype': self.archetype,
            'daily_move_target': t.daily_move_target,
            'weekly_calorie_burn_target': t.weekly_calorie_burn_target,
            'weekly_workout_minutes': t.weekly_workout_minutes,
            'weekly_sessions': t.weekly_workout_frequency_target,
            'n_types': len(t.workout_type_distribution),
            'training_days': count_training_days(self.state.schedule),
            'dropped_sessions': self.dropped_sessions,
            'passed': self.passed,
            'failures': ','.join(self.failures),
        }


class SimulationEngine:
    """
    Engine for running invariant backtests.

    For each user: compute targets, apply random total edits (each
    rescaled from the original targets), restore the originals and build
    the schedule.
    """

    def __init__(
        self,
        params: Optional[PlanParams] = None,
        reference_date: date = REFERENCE_DATE,
        num_edits: int = 3,
        verbose: bool = False
    ):
        """
        Initialize simulation engine.

        Args:
            params: Plan parameters (uses defaults if None)
            reference_date: 'Today' for the age calculation
            num_edits: Random total edits applied per field
            verbose: Print progress during simulation
        """
        self.plan_engine = FitnessPlanEngine(params)
        self.reference_date = reference_date
        self.num_edits = num_edits
        self.verbose = verbose

    def run_simulation(
        self,
        user: SyntheticUser,
        seed: Optional[int] = None
    ) -> SimulationResult:
        """
        Run the full engine pipeline for one user.

        Args:
            user: Synthetic user to simulate
            seed: Random seed for the edit values

        Returns:
            SimulationResult with invariant checks
        """
        if seed is not None:
            np.random.seed(seed)

        engine = self.plan_engine
        state = engine.initialize_plan(user.biometrics, today=self.reference_date)
        original = state.original_targets
        checks: Dict[str, bool] = {}

        sums = check_target_sums(original)
        checks['minutes_sum'] = sums[MINUTES]
        checks['sessions_sum'] = sums[SESSIONS]
        checks['frequency_in_range'] = 2 <= original.weekly_workout_frequency_target <= 6
        checks['weekly_burn_consistent'] = (
            abs(original.weekly_calorie_burn_target - 7 * original.daily_move_target) <= 4
        )

        # Edit-then-rescale
        edits = []
        minutes_ok = True
        sessions_ok = True
        for _ in range(self.num_edits):
            new_minutes = int(np.random.randint(30, 600))
            new_sessions = int(np.random.randint(1, 8))
            # Both sums must hold after every edit, not only the edited field
            for field_name, value in ((MINUTES, new_minutes), (SESSIONS, new_sessions)):
                state = engine.update_total(state, field_name, value)
                sums = check_target_sums(state.targets)
                minutes_ok &= sums[MINUTES]
                sessions_ok &= sums[SESSIONS]
            minutes_ok &= state.targets.weekly_workout_minutes == new_minutes
            sessions_ok &= state.targets.weekly_workout_frequency_target == new_sessions
            edits.append({'minutes': new_minutes, 'sessions': new_sessions})

        checks['rescale_minutes_sum'] = minutes_ok
        checks['rescale_sessions_sum'] = sessions_ok

        if edits:
            last = edits[-1]['minutes']
            rescaled = engine.rescale_distribution(original, last, MINUTES)
            edited = engine.update_total(state, MINUTES, last).targets.workout_type_distribution
            checks['rescale_repeatable'] = (
                rescaled == engine.rescale_distribution(original, last, MINUTES)
                and [r.weekly_minutes for r in rescaled] == [r.weekly_minutes for r in edited]
            )
        else:
            checks['rescale_repeatable'] = True

        # Schedule from the computed targets
        state = engine.build_schedule(engine.reset(state))
        schedule = state.schedule
        planned = original.total_for(SESSIONS)
        placed = count_training_days(schedule)

        checks['schedule_has_seven_days'] = len(schedule) == DAYS_PER_WEEK
        checks['training_days_match'] = placed == min(planned, DAYS_PER_WEEK)
        checks['rest_days_empty'] = all(
            item.workout_type is None and item.duration_minutes == 0
            for item in schedule if item.is_rest_day
        )

        result = SimulationResult(
            profile_id=user.id,
            profile_name=user.name,
            archetype=user.archetype,
            state=state,
            checks=checks,
            dropped_sessions=max(0, planned - placed),
            edits=edits,
        )

        if self.verbose:
            status = "ok" if result.passed else "FAILED: " + ", ".join(result.failures)
            print(f"  {user.name:28s} {original.weekly_workout_frequency_target} sessions, "
                  f"{original.daily_move_target:5d} kcal/day  {status}")

        return result

    def run_batch(
        self,
        users: List[SyntheticUser],
        seed: Optional[int] = None
    ) -> List[SimulationResult]:
        """
        Run simulations for multiple users.

        Args:
            users: Synthetic users
            seed: Base random seed

        Returns:
            List of SimulationResult objects
        """
        if self.verbose:
            print(f"Simulating {len(users)} users")

        results = []
        for i, user in enumerate(users):
            user_seed = seed + i if seed is not None else None
            results.append(self.run_simulation(user, seed=user_seed))
        return results


def aggregate_results(results: List[SimulationResult]) -> Dict[str, Any]:
    """
    Aggregate metrics across multiple simulation results.

    Args:
        results: List of SimulationResult objects

    Returns:
        Dictionary of aggregated metrics
    """
    if not results:
        return {}

    n = len(results)
    daily_move = np.array([r.state.targets.daily_move_target for r in results])
    sessions = np.array([r.state.targets.weekly_workout_frequency_target for r in results])
    minutes = np.array([r.state.targets.weekly_workout_minutes for r in results])

    pass_rates = {
        name: sum(1 for r in results if r.checks.get(name, False)) / n * 100
        for name in INVARIANTS
    }

    return {
        'n_simulations': n,
        'n_passed': sum(1 for r in results if r.passed),
        'pct_passed': sum(1 for r in results if r.passed) / n * 100,
        'invariant_pass_rates': pass_rates,

        # Targets
        'mean_daily_move_target': float(np.mean(daily_move)),
        'std_daily_move_target': float(np.std(daily_move)),
        'min_daily_move_target': int(np.min(daily_move)),
        'max_daily_move_target': int(np.max(daily_move)),
        'mean_weekly_sessions': float(np.mean(sessions)),
        'mean_weekly_minutes': float(np.mean(minutes)),

        'total_dropped_sessions': sum(r.dropped_sessions for r in results),
    }


if __name__ == '__main__':
    from data.synthetic import generate_user_profiles

    print("Testing Simulation Engine...")
    print("=" * 60)

    users = generate_user_profiles(10, seed=42)
    sim = SimulationEngine(verbose=True)
    results = sim.run_batch(users, seed=42)

    agg = aggregate_results(results)
    print(f"\nPassed: {agg['n_passed']}/{agg['n_simulations']}")
    print(f"Mean daily move target: {agg['mean_daily_move_target']:.0f} kcal")
