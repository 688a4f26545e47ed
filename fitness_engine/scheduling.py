"""
Scheduling and Day Assignment: Lay weekly sessions onto Monday..Sunday.

The generator spaces sessions evenly with a fixed stride and resolves
collisions by probing forward to the next rest day, wrapping around the
week. It is a deterministic heuristic over its own 7 slots, not a
calendar-aware scheduler: once generated, the user edits the week cell by
cell without triggering regeneration.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple, Sequence
import math

from .plan_params import PlanParams, DEFAULT_PARAMS
from .rounding import clamp
from .workout_splits import FitnessTargets, WorkoutTypeDistribution

DAYS_PER_WEEK = 7


class DayOfWeek(Enum):
    """Days of the week."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        """Display name, e.g. 'Monday'."""
        return self.name.capitalize()

    @classmethod
    def from_label(cls, label: str) -> 'DayOfWeek':
        """Parse 'Monday'..'Sunday' (case-insensitive)."""
        return cls[label.strip().upper()]


@dataclass(frozen=True)
class PlannedSession:
    """One individual session produced by flattening the distribution."""
    workout_type: str
    duration_minutes: int


@dataclass(frozen=True)
class WorkoutScheduleItem:
    """
    One day of the weekly schedule.

    Rest days carry no workout type and zero duration.
    """
    day_of_week: DayOfWeek
    workout_type: Optional[str] = None
    duration_minutes: int = 0
    time_of_day: str = DEFAULT_PARAMS.default_time_of_day
    is_rest_day: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored document shape."""
        d = {
            'dayOfWeek': self.day_of_week.label,
            'durationMinutes': self.duration_minutes,
            'timeOfDay': self.time_of_day,
            'isRestDay': self.is_rest_day,
        }
        if self.workout_type is not None:
            d['workoutType'] = self.workout_type
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'WorkoutScheduleItem':
        """Create from the stored document shape."""
        return cls(
            day_of_week=DayOfWeek.from_label(d['dayOfWeek']),
            workout_type=d.get('workoutType') or None,
            duration_minutes=d.get('durationMinutes', 0),
            time_of_day=d.get('timeOfDay', DEFAULT_PARAMS.default_time_of_day),
            is_rest_day=d.get('isRestDay', d.get('workoutType') is None),
        )


def rest_day(day: DayOfWeek, time_of_day: str = DEFAULT_PARAMS.default_time_of_day) -> WorkoutScheduleItem:
    """Build an empty rest slot."""
    return WorkoutScheduleItem(day_of_week=day, time_of_day=time_of_day)


def flatten_sessions(distribution: Sequence[WorkoutTypeDistribution]) -> List[PlannedSession]:
    """
    Expand the distribution into individual sessions, in distribution order.

    Each session of a type gets round(weekly_minutes / weekly_sessions)
    minutes; types without sessions contribute nothing.
    """
    sessions = []
    for dist in distribution:
        if dist.weekly_sessions <= 0:
            continue
        per_session = dist.minutes_per_session
        sessions.extend(
            PlannedSession(workout_type=dist.workout_type, duration_minutes=per_session)
            for _ in range(dist.weekly_sessions)
        )
    return sessions


def calculate_target_slot(index: int, frequency: int) -> int:
    """
    Target day index for the index-th session.

    Formula:
        freq = clamp(frequency, 1, 7)
        slot = floor(index × 7 / freq) mod 7
    """
    freq = int(clamp(frequency, 1, DAYS_PER_WEEK))
    stride = DAYS_PER_WEEK / freq
    return math.floor(index * stride) % DAYS_PER_WEEK


def find_free_slot(start: int, occupied: Sequence[bool]) -> Optional[int]:
    """Probe forward from start with wraparound for the first free slot."""
    for offset in range(DAYS_PER_WEEK):
        slot = (start + offset) % DAYS_PER_WEEK
        if not occupied[slot]:
            return slot
    return None


def place_sessions(
    sessions: Sequence[PlannedSession],
    frequency_target: int,
    time_of_day: str = DEFAULT_PARAMS.default_time_of_day
) -> Tuple[List[WorkoutScheduleItem], List[PlannedSession]]:
    """
    Place sessions onto the week.

    Algorithm:
        1. Start with 7 rest slots
        2. Session i targets floor(i × 7/freq) mod 7
        3. If taken, probe forward (wrapping) to the next rest slot
        4. With no rest slot left the session is dropped

    Args:
        sessions: Flattened sessions in placement order
        frequency_target: Weekly frequency target (clamped to 1..7)
        time_of_day: Time assigned to every slot

    Returns:
        Tuple of (7 schedule items Monday..Sunday, dropped sessions)
    """
    schedule = [rest_day(day, time_of_day) for day in DayOfWeek]
    occupied = [False] * DAYS_PER_WEEK
    dropped = []

    for i, session in enumerate(sessions):
        slot = find_free_slot(calculate_target_slot(i, frequency_target), occupied)
        if slot is None:
            dropped.append(session)
            continue

        occupied[slot] = True
        schedule[slot] = replace(
            schedule[slot],
            workout_type=session.workout_type,
            duration_minutes=session.duration_minutes,
            is_rest_day=False,
        )

    return schedule, dropped


def generate_default_schedule(
    targets: FitnessTargets,
    time_of_day: str = DEFAULT_PARAMS.default_time_of_day
) -> List[WorkoutScheduleItem]:
    """
    Generate the initial 7-day schedule for a set of targets.

    Sessions beyond the free slots are dropped silently.

    Args:
        targets: Fitness targets (possibly user-edited)
        time_of_day: Default session time

    Returns:
        7 WorkoutScheduleItem, Monday first
    """
    sessions = flatten_sessions(targets.workout_type_distribution)
    schedule, _ = place_sessions(
        sessions, targets.weekly_workout_frequency_target, time_of_day
    )
    return schedule


def update_schedule_item(
    schedule: Sequence[WorkoutScheduleItem],
    index: int,
    **changes: Any
) -> List[WorkoutScheduleItem]:
    """Return a copy of the schedule with one item's fields replaced."""
    updated = list(schedule)
    updated[index] = replace(updated[index], **changes)
    return updated


def toggle_rest_day(
    schedule: Sequence[WorkoutScheduleItem],
    index: int,
    targets: Optional[FitnessTargets] = None,
    params: PlanParams = DEFAULT_PARAMS
) -> List[WorkoutScheduleItem]:
    """
    Flip one day between rest and training.

    A rest day becomes a session of the first distribution type (or the
    fallback type) at the toggled session length; a training day becomes
    a rest day with no type and zero duration.

    Args:
        schedule: Current schedule
        index: Day index (0 = Monday)
        targets: Targets providing the default workout type
        params: Plan parameters

    Returns:
        New schedule
    """
    item = schedule[index]

    if item.is_rest_day:
        workout_type = params.fallback_workout_type
        if targets is not None and targets.workout_type_distribution:
            workout_type = targets.workout_type_distribution[0].workout_type
        return update_schedule_item(
            schedule, index,
            is_rest_day=False,
            workout_type=workout_type,
            duration_minutes=params.toggled_session_minutes,
        )

    return update_schedule_item(
        schedule, index, is_rest_day=True, workout_type=None, duration_minutes=0
    )


def apply_time_to_all(
    schedule: Sequence[WorkoutScheduleItem],
    time_of_day: str
) -> List[WorkoutScheduleItem]:
    """Set the same time of day on every item."""
    return [replace(item, time_of_day=time_of_day) for item in schedule]


def count_training_days(schedule: Sequence[WorkoutScheduleItem]) -> int:
    """Number of non-rest days."""
    return sum(1 for item in schedule if not item.is_rest_day)


def format_weekly_schedule(schedule: Sequence[WorkoutScheduleItem]) -> str:
    """
    Format schedule as a readable string.

    Args:
        schedule: The schedule to format

    Returns:
        Formatted string representation
    """
    lines = ["Weekly Schedule:", "=" * 40]

    for item in schedule:
        if item.is_rest_day:
            lines.append(f"{item.day_of_week.label:10s}: REST")
        else:
            lines.append(
                f"{item.day_of_week.label:10s}: {item.workout_type:12s} "
                f"({item.duration_minutes} min @ {item.time_of_day})"
            )

    return "\n".join(lines)


if __name__ == '__main__':
    print("Testing Scheduling Equations...")
    print("=" * 60)

    targets = FitnessTargets(
        weekly_calorie_burn_target=2000,
        weekly_workout_minutes=180,
        weekly_workout_frequency_target=4,
        daily_move_target=300,
        daily_exercise_target=26,
        workout_type_distribution=(
            WorkoutTypeDistribution('strength', 90, 2),
            WorkoutTypeDistribution('cardio', 90, 2),
        ),
    )
    print(format_weekly_schedule(generate_default_schedule(targets)))

    print("\n--- Overfull week (8 sessions, frequency 7) ---")
    sessions = [PlannedSession('cardio', 30)] * 8
    schedule, dropped = place_sessions(sessions, 7)
    print(format_weekly_schedule(schedule))
    print(f"  dropped sessions: {len(dropped)}")
