"""
Fitness Plan Engine: Unified system integrating all equations.

This module ties the individual equation modules together:
- Target computation from a biometric snapshot
- Edit-then-rescale of weekly totals and per-type rows
- Default weekly schedule generation and cell edits
- Per-activity calorie/step estimates and daily recommendations

Every operation is a pure function of its inputs. The engine object only
holds read-only parameters, so a single instance can serve concurrent
callers.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional, Dict, Any, List, Sequence

from .energy import BiometricInput, calculate_energy_targets
from .frequency import calculate_frequency
from .metrics import estimate_activity_calories, estimate_steps
from .plan_params import PlanParams, DEFAULT_PARAMS
from .recommendations import RecommendedWorkout, recommend_workouts
from .scheduling import (
    DayOfWeek,
    WorkoutScheduleItem,
    generate_default_schedule,
    toggle_rest_day,
    update_schedule_item,
    apply_time_to_all,
    format_weekly_schedule,
)
from .workout_splits import (
    FitnessTargets,
    WorkoutTypeDistribution,
    calculate_distribution,
    rescale_distribution,
    apply_total_edit,
    update_distribution_entry,
    validate_targets,
    format_distribution,
)


def compute_fitness_targets(
    biometrics: BiometricInput,
    today: Optional[date] = None,
    params: PlanParams = DEFAULT_PARAMS
) -> FitnessTargets:
    """
    Compute weekly/daily targets and the per-type distribution.

    Args:
        biometrics: User snapshot
        today: Reference date for the age calculation (default: today)
        params: Plan parameters

    Returns:
        FitnessTargets whose distribution sums match its totals
    """
    energy, _ = calculate_energy_targets(biometrics, today=today, params=params)
    frequency, freq_breakdown = calculate_frequency(
        biometrics.activity_level, params.session_minutes
    )
    distribution, _ = calculate_distribution(
        biometrics.workout_preferences,
        biometrics.fitness_goal,
        frequency,
        freq_breakdown['weekly_minutes'],
        params.default_preferences,
    )

    return FitnessTargets(
        weekly_calorie_burn_target=energy['weekly_calorie_burn_target'],
        weekly_workout_minutes=freq_breakdown['weekly_minutes'],
        weekly_workout_frequency_target=frequency,
        daily_move_target=energy['daily_move_target'],
        daily_exercise_target=freq_breakdown['daily_exercise_target'],
        workout_type_distribution=distribution,
    )


def generate_weekly_schedule(
    targets: FitnessTargets,
    params: PlanParams = DEFAULT_PARAMS
) -> List[WorkoutScheduleItem]:
    """Generate the default 7-day schedule for a set of targets."""
    return generate_default_schedule(targets, params.default_time_of_day)


@dataclass
class FitnessPlanState:
    """
    Plan being reviewed and edited by the user.

    original_targets is never modified; every rescale reads its ratios so
    repeated edits do not drift. targets is the working copy.
    """
    biometrics: BiometricInput
    original_targets: FitnessTargets
    targets: FitnessTargets
    schedule: List[WorkoutScheduleItem] = field(default_factory=list)
    has_changes: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'biometrics': self.biometrics.to_dict(),
            'targets': self.targets.to_dict(),
            'original_targets': self.original_targets.to_dict(),
            'schedule': [item.to_dict() for item in self.schedule],
            'has_changes': self.has_changes,
        }


class FitnessPlanEngine:
    """
    Main engine for building and editing fitness plans.

    This class orchestrates all equation modules to provide
    a unified interface for plan management.
    """

    def __init__(
        self,
        params: Optional[PlanParams] = None,
        verbose: bool = False
    ):
        """
        Initialize the fitness plan engine.

        Args:
            params: Custom plan parameters (optional)
            verbose: Print progress while building plans
        """
        self.params = params or DEFAULT_PARAMS
        self.verbose = verbose

    # ------------------------------------------------------------------
    # External operations
    # ------------------------------------------------------------------

    def compute_fitness_targets(
        self,
        biometrics: BiometricInput,
        today: Optional[date] = None
    ) -> FitnessTargets:
        """Compute targets using this engine's parameters."""
        return compute_fitness_targets(biometrics, today=today, params=self.params)

    def rescale_distribution(
        self,
        original: FitnessTargets,
        new_total: int,
        field_name: str
    ) -> Sequence[WorkoutTypeDistribution]:
        """Rescale the original distribution to a new weekly total."""
        return rescale_distribution(original, new_total, field_name)

    def generate_weekly_schedule(self, targets: FitnessTargets) -> List[WorkoutScheduleItem]:
        """Generate the default schedule using this engine's parameters."""
        return generate_weekly_schedule(targets, self.params)

    def estimate_activity_calories(
        self,
        activity_type: str,
        duration_minutes: float,
        weight_kg: float
    ) -> int:
        """MET-based calorie estimate."""
        return estimate_activity_calories(activity_type, duration_minutes, weight_kg)

    def estimate_steps(self, activity_type: str, duration_minutes: float) -> int:
        """Cadence-based step estimate."""
        return estimate_steps(activity_type, duration_minutes)

    def recommend_workouts(
        self,
        preferred_types: Sequence[str],
        weight_kg: float,
        limit: Optional[int] = None,
        is_rest_day: bool = False
    ) -> List[RecommendedWorkout]:
        """Recommendations with this engine's limit and wellness slots."""
        return recommend_workouts(
            preferred_types,
            weight_kg,
            self.params.recommendation_limit if limit is None else limit,
            is_rest_day,
            mental_wellness_slots=self.params.mental_wellness_slots,
        )

    # ------------------------------------------------------------------
    # Plan lifecycle
    # ------------------------------------------------------------------

    def initialize_plan(
        self,
        biometrics: BiometricInput,
        today: Optional[date] = None
    ) -> FitnessPlanState:
        """
        Compute targets for a new user and wrap them in an editable state.

        Args:
            biometrics: User snapshot
            today: Reference date for the age calculation

        Returns:
            FitnessPlanState with no schedule yet
        """
        targets = self.compute_fitness_targets(biometrics, today=today)

        if self.verbose:
            print(f"Targets: {targets.weekly_workout_frequency_target} sessions, "
                  f"{targets.weekly_workout_minutes} min/week, "
                  f"{targets.daily_move_target} kcal/day")

        return FitnessPlanState(
            biometrics=biometrics,
            original_targets=targets,
            targets=targets,
        )

    def update_total(
        self,
        state: FitnessPlanState,
        field_name: str,
        value: int
    ) -> FitnessPlanState:
        """
        Edit weekly minutes or sessions and rescale the distribution.

        Args:
            state: Current plan state
            field_name: 'minutes' or 'sessions'
            value: New weekly total

        Returns:
            Updated state
        """
        targets = apply_total_edit(state.original_targets, state.targets, value, field_name)

        if self.verbose:
            _, message = validate_targets(targets)
            print(f"Rescaled {field_name} to {value}: {message}")

        return replace(state, targets=targets, has_changes=True)

    def update_distribution_entry(
        self,
        state: FitnessPlanState,
        index: int,
        field_name: str,
        value: Any
    ) -> FitnessPlanState:
        """Edit one distribution row; weekly totals follow the rows."""
        targets = update_distribution_entry(state.targets, index, field_name, value)
        return replace(state, targets=targets, has_changes=True)

    def reset(self, state: FitnessPlanState) -> FitnessPlanState:
        """Discard edits and return to the computed targets."""
        return replace(
            state, targets=state.original_targets, schedule=[], has_changes=False
        )

    def build_schedule(self, state: FitnessPlanState) -> FitnessPlanState:
        """Generate the weekly schedule from the working targets."""
        schedule = self.generate_weekly_schedule(state.targets)

        if self.verbose:
            print(format_weekly_schedule(schedule))

        return replace(state, schedule=schedule)

    def toggle_rest_day(self, state: FitnessPlanState, index: int) -> FitnessPlanState:
        """Flip one schedule cell between rest and training."""
        schedule = toggle_rest_day(state.schedule, index, state.targets, self.params)
        return replace(state, schedule=schedule)

    def update_schedule_item(
        self,
        state: FitnessPlanState,
        index: int,
        **changes: Any
    ) -> FitnessPlanState:
        """Edit fields of one schedule cell."""
        return replace(state, schedule=update_schedule_item(state.schedule, index, **changes))

    def apply_time_to_all(self, state: FitnessPlanState, time_of_day: str) -> FitnessPlanState:
        """Use the same session time on every day."""
        return replace(state, schedule=apply_time_to_all(state.schedule, time_of_day))

    def recommend_for_day(
        self,
        state: FitnessPlanState,
        day: DayOfWeek,
        weight_kg: Optional[float] = None
    ) -> List[RecommendedWorkout]:
        """
        Recommendations for a given weekday of the plan.

        The rest/training decision comes from the plan's schedule; days
        without a schedule count as training days.
        """
        is_rest = any(
            item.day_of_week == day and item.is_rest_day for item in state.schedule
        )
        weight = state.biometrics.weight_kg if weight_kg is None else weight_kg
        preferred = (state.biometrics.workout_preferences
                     or self.params.default_preferences)
        return self.recommend_workouts(preferred, weight, is_rest_day=is_rest)

    def summarize(self, state: FitnessPlanState) -> str:
        """Readable summary of the working plan."""
        t = state.targets
        lines = [
            "Fitness Plan:",
            "=" * 40,
            f"Weekly calorie burn target: {t.weekly_calorie_burn_target} kcal",
            f"Daily move target:          {t.daily_move_target} kcal",
            f"Weekly workout minutes:     {t.weekly_workout_minutes} min",
            f"Weekly sessions:            {t.weekly_workout_frequency_target}",
            f"Daily exercise target:      {t.daily_exercise_target} min",
            "",
            format_distribution(t.workout_type_distribution),
        ]
        if state.schedule:
            lines += ["", format_weekly_schedule(state.schedule)]
        return "\n".join(lines)


if __name__ == '__main__':
    print("Testing Fitness Plan Engine...")
    print("=" * 60)

    engine = FitnessPlanEngine(verbose=True)
    snapshot = BiometricInput(
        weight_kg=70,
        height_cm=170,
        birthdate="1990-01-01",
        gender="male",
        activity_level="moderately_active",
        fitness_goal="StayFit",
        workout_preferences=("strength", "cardio"),
    )

    state = engine.initialize_plan(snapshot)
    state = engine.update_total(state, 'minutes', 200)
    state = engine.update_total(state, 'minutes', 180)
    state = engine.build_schedule(state)
    print()
    print(engine.summarize(state))

    print("\nMonday recommendations:")
    for rec in engine.recommend_for_day(state, DayOfWeek.MONDAY):
        print(f"  {rec.template.title}: {rec.calories} kcal")
