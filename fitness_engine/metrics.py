"""
Activity metrics: energy expenditure and step estimates.

Based on:
- Ainsworth, B. E. et al. (2011). Compendium of Physical Activities (MET)
- Typical cadence ranges for walking, running and court sports

Both estimators accept fractional minutes so a live timer can be
re-estimated every tick. They are linear in duration (and, for calories,
in body weight).
"""

from dataclasses import dataclass
import datetime
from types import MappingProxyType
from typing import Optional, Dict, Any, Iterable

from .plan_params import DEFAULT_PARAMS
from .rounding import round_half_up


MET_VALUES = MappingProxyType({
    'strength': 6.0,
    'cardio': 8.0,
    'yoga': 3.0,
    'hiit': 11.0,
    'pilates': 3.5,
    'sports': 7.0,
    'crossfit': 10.0,
    'swimming': 8.0,
    'walking': 3.5,
    'meditation': 1.3,   # Recovery catalog types
    'breathing': 1.3,
})
DEFAULT_MET = 3.5

STEPS_PER_MINUTE = MappingProxyType({
    'running': 160,
    'cardio': 140,
    'walking': 100,
    'hiking': 110,
    'sports': 120,     # Court and field sports involve running
    'dance': 110,
    'hiit': 130,
    'strength': 30,    # Moving between sets
    'yoga': 5,
    'pilates': 5,
    'cycling': 0,
    'swimming': 0,
    'rowing': 0,
})
DEFAULT_STEPS_PER_MINUTE = 80


def _type_key(activity_type: Any) -> str:
    value = getattr(activity_type, 'value', activity_type)
    return str(value or "").strip().lower()


def get_met_value(activity_type: str) -> float:
    """MET for an activity type; unknown types use the walking value."""
    return MET_VALUES.get(_type_key(activity_type), DEFAULT_MET)


def get_steps_per_minute(activity_type: str) -> int:
    """Cadence for an activity type; unknown types use 80 steps/min."""
    return STEPS_PER_MINUTE.get(_type_key(activity_type), DEFAULT_STEPS_PER_MINUTE)


def estimate_activity_calories(
    activity_type: str,
    duration_minutes: float,
    weight_kg: float = DEFAULT_PARAMS.fallback_weight_kg
) -> int:
    """
    Estimate energy expenditure for one activity.

    Formula:
        kcal = round(MET × weight_kg × duration_minutes / 60)

    Args:
        activity_type: Workout type (e.g. 'strength')
        duration_minutes: Duration, fractional minutes allowed
        weight_kg: Body weight at estimation time

    Returns:
        Estimated kilocalories
    """
    met = get_met_value(activity_type)
    return round_half_up(met * weight_kg * (duration_minutes / 60))


def estimate_steps(activity_type: str, duration_minutes: float) -> int:
    """
    Estimate step count for one activity.

    Formula:
        steps = round(steps_per_minute × duration_minutes)
    """
    return round_half_up(get_steps_per_minute(activity_type) * duration_minutes)


@dataclass(frozen=True)
class ActivityLogEntry:
    """
    A logged or in-progress activity.

    Only consumed by the estimators; never stored by this package.
    """
    type: str
    duration_minutes: float
    weight_kg: float = DEFAULT_PARAMS.fallback_weight_kg
    calories_burned: Optional[float] = None
    date: Optional[datetime.date] = None

    @property
    def estimated_calories(self) -> int:
        """Logged calories if present, otherwise the MET estimate."""
        if self.calories_burned is not None:
            return round_half_up(self.calories_burned)
        return estimate_activity_calories(self.type, self.duration_minutes, self.weight_kg)

    @property
    def estimated_steps(self) -> int:
        """Step estimate for this entry."""
        return estimate_steps(self.type, self.duration_minutes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'type': self.type,
            'duration_minutes': self.duration_minutes,
            'weight_kg': self.weight_kg,
            'calories': self.estimated_calories,
            'steps': self.estimated_steps,
            'date': self.date.isoformat() if self.date else None,
        }


def summarize_entries(entries: Iterable[ActivityLogEntry]) -> Dict[str, Any]:
    """
    Total minutes, calories and steps across activity entries.

    Args:
        entries: Logged activities

    Returns:
        Dictionary with 'count', 'minutes', 'calories' and 'steps'
    """
    count = 0
    minutes = 0.0
    calories = 0
    steps = 0
    for entry in entries:
        count += 1
        minutes += entry.duration_minutes
        calories += entry.estimated_calories
        steps += entry.estimated_steps

    return {
        'count': count,
        'minutes': minutes,
        'calories': calories,
        'steps': steps,
    }


if __name__ == '__main__':
    print("Testing Activity Metrics...")
    print("=" * 60)

    for activity, minutes in [('strength', 60), ('hiit', 20), ('yoga', 45),
                              ('cardio', 45.75), ('unknown', 60)]:
        kcal = estimate_activity_calories(activity, minutes, 70)
        steps = estimate_steps(activity, minutes)
        print(f"  {activity:10s} {minutes:6.2f} min: {kcal:4d} kcal, {steps:5d} steps")
