"""
Workout Types and Splits: Weekly sessions and minutes across workout types.

Splits the weekly session and minute targets across the user's preferred
workout types, weighted by fitness goal. Proportional rounding alone would
lose or gain units, so the last preference absorbs whatever is left and the
per-type sums always reproduce the weekly totals exactly.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Dict, Any, List, Tuple, Sequence, Union

from .energy import FitnessGoal, enum_key
from .plan_params import DEFAULT_PARAMS
from .rounding import round_half_up


class WorkoutType(Enum):
    """Workout types a user can prefer or log."""
    STRENGTH = "strength"
    CARDIO = "cardio"
    YOGA = "yoga"
    HIIT = "hiit"
    PILATES = "pilates"
    SPORTS = "sports"
    CROSSFIT = "crossfit"
    SWIMMING = "swimming"
    WALKING = "walking"


# Goal -> {workout type -> weight}. Types missing from a table weigh 1;
# goals without a table weigh every type 1.
GOAL_WEIGHTS = MappingProxyType({
    FitnessGoal.LOSE_WEIGHT.value: MappingProxyType({
        WorkoutType.CARDIO.value: 3,
        WorkoutType.HIIT.value: 3,
        WorkoutType.CROSSFIT.value: 2,
        WorkoutType.SWIMMING.value: 2,
        WorkoutType.SPORTS.value: 2,
        WorkoutType.WALKING.value: 2,
    }),
    FitnessGoal.BUILD_MUSCLE.value: MappingProxyType({
        WorkoutType.STRENGTH.value: 3,
        WorkoutType.CROSSFIT.value: 2,
    }),
    FitnessGoal.IMPROVE_ENDURANCE.value: MappingProxyType({
        WorkoutType.CARDIO.value: 3,
        WorkoutType.SWIMMING.value: 3,
        WorkoutType.SPORTS.value: 2,
        WorkoutType.HIIT.value: 2,
        WorkoutType.WALKING.value: 2,
    }),
})
DEFAULT_TYPE_WEIGHT = 1

MINUTES = 'minutes'
SESSIONS = 'sessions'


@dataclass(frozen=True)
class WorkoutTypeDistribution:
    """Weekly minutes and sessions assigned to one workout type."""
    workout_type: str
    weekly_minutes: int
    weekly_sessions: int

    @property
    def minutes_per_session(self) -> int:
        """Even split of the type's minutes; 0 when it has no sessions."""
        if self.weekly_sessions <= 0:
            return 0
        return round_half_up(self.weekly_minutes / self.weekly_sessions)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored document shape."""
        return {
            'workoutType': self.workout_type,
            'weeklyMinutes': self.weekly_minutes,
            'weeklySessions': self.weekly_sessions,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'WorkoutTypeDistribution':
        """Create from the stored document shape."""
        return cls(
            workout_type=d['workoutType'],
            weekly_minutes=int(d.get('weeklyMinutes', 0)),
            weekly_sessions=int(d.get('weeklySessions', 0)),
        )


@dataclass(frozen=True)
class FitnessTargets:
    """
    Weekly and daily goals plus the per-type distribution.

    Invariant: distribution sessions sum to weekly_workout_frequency_target
    and distribution minutes sum to weekly_workout_minutes.
    """
    weekly_calorie_burn_target: int
    weekly_workout_minutes: int
    weekly_workout_frequency_target: int
    daily_move_target: int
    daily_exercise_target: int
    workout_type_distribution: Tuple[WorkoutTypeDistribution, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'workout_type_distribution',
                           tuple(self.workout_type_distribution))

    def total_for(self, field_name: str) -> int:
        """Weekly total for 'minutes' or 'sessions'."""
        if field_name == MINUTES:
            return self.weekly_workout_minutes
        if field_name == SESSIONS:
            return self.weekly_workout_frequency_target
        raise ValueError(f"field must be '{MINUTES}' or '{SESSIONS}', got '{field_name}'")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored document shape."""
        return {
            'weeklyCalorieBurnTarget': self.weekly_calorie_burn_target,
            'weeklyWorkoutMinutes': self.weekly_workout_minutes,
            'weeklyWorkoutFrequencyTarget': self.weekly_workout_frequency_target,
            'dailyMoveTarget': self.daily_move_target,
            'dailyExerciseTarget': self.daily_exercise_target,
            'workoutTypeDistribution': [d.to_dict() for d in self.workout_type_distribution],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'FitnessTargets':
        """Create from the stored document shape."""
        return cls(
            weekly_calorie_burn_target=int(d.get('weeklyCalorieBurnTarget', 0)),
            weekly_workout_minutes=int(d.get('weeklyWorkoutMinutes', 0)),
            weekly_workout_frequency_target=int(d.get('weeklyWorkoutFrequencyTarget', 0)),
            daily_move_target=int(d.get('dailyMoveTarget', 0)),
            daily_exercise_target=int(d.get('dailyExerciseTarget', 0)),
            workout_type_distribution=tuple(
                WorkoutTypeDistribution.from_dict(x)
                for x in d.get('workoutTypeDistribution', [])
            ),
        )


def get_type_weight(fitness_goal: Union[FitnessGoal, str], workout_type: str) -> float:
    """Weight of a workout type under a fitness goal."""
    table = GOAL_WEIGHTS.get(enum_key(fitness_goal))
    if table is None:
        return DEFAULT_TYPE_WEIGHT
    return table.get(enum_key(workout_type), DEFAULT_TYPE_WEIGHT)


def calculate_distribution(
    preferences: Sequence[str],
    fitness_goal: Union[FitnessGoal, str],
    target_sessions: int,
    target_minutes: int,
    default_preferences: Sequence[str] = DEFAULT_PARAMS.default_preferences
) -> Tuple[Tuple[WorkoutTypeDistribution, ...], Dict[str, Any]]:
    """
    Split weekly sessions and minutes across preferred workout types.

    Algorithm:
        1. weight(p) from the goal table, total = Σ weight over the list
           (duplicates counted)
        2. For every preference but the last:
               sessions = min(round(w/total × target_sessions), remaining)
               minutes  = min(round(w/total × target_minutes), remaining)
        3. The last preference takes the remaining sessions and minutes
        4. Zero-session entries are dropped; any minutes they held move to
           the last kept entry

    Preference order decides which type absorbs rounding slack.

    Args:
        preferences: Ordered preferred workout types
        fitness_goal: Goal selecting the weight table
        target_sessions: Weekly sessions to split
        target_minutes: Weekly minutes to split
        default_preferences: Used when preferences is empty

    Returns:
        Tuple of (distribution, breakdown_dict)
    """
    prefs = [enum_key(p) for p in preferences] or list(default_preferences)
    weights = [get_type_weight(fitness_goal, p) for p in prefs]
    total_weight = sum(weights)

    remaining_sessions = target_sessions
    remaining_minutes = target_minutes
    allocations: List[Tuple[str, int, int]] = []

    last_index = len(prefs) - 1
    for i, (workout_type, weight) in enumerate(zip(prefs, weights)):
        if i == last_index:
            sessions = remaining_sessions
            minutes = remaining_minutes
        else:
            share = weight / total_weight
            sessions = min(round_half_up(share * target_sessions), remaining_sessions)
            minutes = min(round_half_up(share * target_minutes), remaining_minutes)

        remaining_sessions -= sessions
        remaining_minutes -= minutes
        allocations.append((workout_type, minutes, sessions))

    kept = [
        WorkoutTypeDistribution(workout_type=t, weekly_minutes=m, weekly_sessions=s)
        for t, m, s in allocations if s > 0
    ]
    orphaned_minutes = sum(m for _, m, s in allocations if s <= 0)
    if kept and orphaned_minutes:
        kept[-1] = replace(kept[-1], weekly_minutes=kept[-1].weekly_minutes + orphaned_minutes)

    breakdown = {
        'preferences': prefs,
        'used_default_preferences': not preferences,
        'weights': weights,
        'total_weight': total_weight,
        'raw_allocations': allocations,
        'dropped_types': [t for t, _, s in allocations if s <= 0],
        'orphaned_minutes': orphaned_minutes,
    }

    return tuple(kept), breakdown


def rescale_distribution(
    original: FitnessTargets,
    new_total: int,
    field_name: str
) -> Tuple[WorkoutTypeDistribution, ...]:
    """
    Rescale one field of the distribution to a new weekly total.

    Ratios come from the original computed targets, never from an edited
    copy, so repeated edits do not compound rounding error. The other
    field is copied from the original unchanged. Rows stay index-aligned
    with the original; the last row takes the remainder.

    Args:
        original: Targets as originally computed
        new_total: New weekly total for the field
        field_name: 'minutes' or 'sessions'

    Returns:
        Rescaled distribution (the original one if new_total <= 0 or the
        original total is 0)
    """
    original_total = original.total_for(field_name)
    rows = original.workout_type_distribution

    if new_total <= 0 or original_total <= 0 or not rows:
        return rows

    attr = 'weekly_minutes' if field_name == MINUTES else 'weekly_sessions'
    remaining = new_total
    rescaled = []

    for i, row in enumerate(rows):
        if i == len(rows) - 1:
            value = max(0, remaining)
        else:
            ratio = getattr(row, attr) / original_total
            value = min(round_half_up(ratio * new_total), remaining)
            remaining -= value
        rescaled.append(replace(row, **{attr: value}))

    return tuple(rescaled)


def apply_total_edit(
    original: FitnessTargets,
    current: FitnessTargets,
    new_total: int,
    field_name: str
) -> FitnessTargets:
    """
    Set a weekly total on the working targets and rescale its distribution.

    The edited field is rescaled from the original ratios. The other field
    keeps its working values, so a minutes edit survives a later sessions
    edit. Rows are index-aligned because rescaling never drops one.

    Args:
        original: Targets as originally computed (ratio source)
        current: Working copy being edited
        new_total: New weekly minutes or sessions
        field_name: 'minutes' or 'sessions'

    Returns:
        New working targets
    """
    total_attr = ('weekly_workout_minutes' if field_name == MINUTES
                  else 'weekly_workout_frequency_target')
    updated = replace(current, **{total_attr: new_total})

    if new_total > 0 and original.total_for(field_name) > 0:
        attr = 'weekly_minutes' if field_name == MINUTES else 'weekly_sessions'
        rescaled = rescale_distribution(original, new_total, field_name)
        rows = current.workout_type_distribution
        if len(rows) != len(rescaled):
            rows = rescaled
        updated = replace(
            updated,
            workout_type_distribution=tuple(
                replace(row, **{attr: getattr(new_row, attr)})
                for row, new_row in zip(rows, rescaled)
            ),
        )
    return updated


def _to_count(value: Any) -> int:
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError):
        return 0


def update_distribution_entry(
    targets: FitnessTargets,
    index: int,
    field_name: str,
    value: Any
) -> FitnessTargets:
    """
    Edit one distribution row and recompute the weekly totals from the rows.

    Args:
        targets: Working targets
        index: Row to edit
        field_name: 'minutes', 'sessions' or 'workout_type'
        value: New value (numbers that fail to parse count as 0)

    Returns:
        New working targets whose minute/session totals are the row sums
    """
    rows = list(targets.workout_type_distribution)

    if field_name == MINUTES:
        rows[index] = replace(rows[index], weekly_minutes=_to_count(value))
    elif field_name == SESSIONS:
        rows[index] = replace(rows[index], weekly_sessions=_to_count(value))
    elif field_name == 'workout_type':
        rows[index] = replace(rows[index], workout_type=enum_key(value))
    else:
        raise ValueError(f"Unknown distribution field '{field_name}'")

    return replace(
        targets,
        workout_type_distribution=tuple(rows),
        weekly_workout_minutes=sum(r.weekly_minutes for r in rows),
        weekly_workout_frequency_target=sum(r.weekly_sessions for r in rows),
    )


def validate_targets(targets: FitnessTargets) -> Tuple[bool, str]:
    """
    Check the distribution sums and non-negativity of a targets object.

    Returns:
        Tuple of (is_valid, message)
    """
    rows = targets.workout_type_distribution
    issues = []

    sessions = sum(r.weekly_sessions for r in rows)
    minutes = sum(r.weekly_minutes for r in rows)

    if sessions != targets.weekly_workout_frequency_target:
        issues.append(f"Sessions sum to {sessions}, target is "
                      f"{targets.weekly_workout_frequency_target}")
    if minutes != targets.weekly_workout_minutes:
        issues.append(f"Minutes sum to {minutes}, target is {targets.weekly_workout_minutes}")

    if any(r.weekly_sessions < 0 or r.weekly_minutes < 0 for r in rows):
        issues.append("Distribution contains negative values")
    if min(targets.weekly_workout_minutes, targets.weekly_workout_frequency_target,
           targets.weekly_calorie_burn_target) < 0:
        issues.append("Weekly targets must be non-negative")

    if issues:
        return False, "; ".join(issues)
    return True, "Valid"


def format_distribution(distribution: Sequence[WorkoutTypeDistribution]) -> str:
    """Format a distribution as a readable table."""
    total_minutes = sum(d.weekly_minutes for d in distribution)
    lines = ["Workout Distribution:", "=" * 40]
    for d in distribution:
        share = d.weekly_minutes / total_minutes * 100 if total_minutes else 0
        lines.append(
            f"{d.workout_type:12s}: {d.weekly_sessions} x {d.minutes_per_session:3d} min "
            f"({d.weekly_minutes} min, {share:.0f}%)"
        )
    return "\n".join(lines)


if __name__ == '__main__':
    print("Testing Distribution Allocator...")
    print("=" * 60)

    cases = [
        (['strength', 'cardio'], FitnessGoal.STAY_FIT, 4, 180),
        (['strength', 'cardio', 'hiit'], FitnessGoal.BUILD_MUSCLE, 4, 180),
        (['cardio', 'hiit', 'strength'], FitnessGoal.LOSE_WEIGHT, 5, 225),
        (['yoga', 'pilates', 'walking', 'swimming', 'cardio'], FitnessGoal.STAY_FIT, 2, 90),
    ]

    for prefs, goal, sessions, minutes in cases:
        dist, breakdown = calculate_distribution(prefs, goal, sessions, minutes)
        print(f"\n{goal.value} {prefs} -> {sessions} sessions / {minutes} min")
        print(format_distribution(dist))
        if breakdown['dropped_types']:
            print(f"  dropped: {breakdown['dropped_types']}")
