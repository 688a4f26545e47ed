"""
Frequency Equations: Weekly session count and training minutes.

The session count is read from the user's self-reported activity level:
more active users are assumed to tolerate more sessions per week. Every
session is planned at a fixed default length.
"""

from types import MappingProxyType
from typing import Dict, Any, Tuple, Union

from .energy import ActivityLevel, enum_key
from .plan_params import DEFAULT_PARAMS
from .rounding import round_half_up


SESSIONS_PER_WEEK = MappingProxyType({
    ActivityLevel.SEDENTARY.value: 2,
    ActivityLevel.LIGHTLY_ACTIVE.value: 3,
    ActivityLevel.MODERATELY_ACTIVE.value: 4,
    ActivityLevel.VERY_ACTIVE.value: 5,
    ActivityLevel.EXTREMELY_ACTIVE.value: 6,
})
DEFAULT_SESSIONS_PER_WEEK = 3


def calculate_weekly_frequency(activity_level: Union[ActivityLevel, str]) -> int:
    """Weekly session count for an activity level; unknown levels get 3."""
    return SESSIONS_PER_WEEK.get(enum_key(activity_level), DEFAULT_SESSIONS_PER_WEEK)


def calculate_frequency(
    activity_level: Union[ActivityLevel, str],
    session_minutes: int = DEFAULT_PARAMS.session_minutes
) -> Tuple[int, Dict[str, Any]]:
    """
    Calculate weekly workout frequency and training minutes.

    Formula:
        sessions = table[activity_level]
        weekly_minutes = sessions × session_minutes
        daily_exercise_target = round(weekly_minutes / 7)

    Args:
        activity_level: Self-reported activity level
        session_minutes: Planned length of one session

    Returns:
        Tuple of (frequency, breakdown_dict)
    """
    frequency = calculate_weekly_frequency(activity_level)
    weekly_minutes = frequency * session_minutes

    breakdown = {
        'activity_level': enum_key(activity_level),
        'known_level': enum_key(activity_level) in SESSIONS_PER_WEEK,
        'session_minutes': session_minutes,
        'final_frequency': frequency,
        'weekly_minutes': weekly_minutes,
        'daily_exercise_target': round_half_up(weekly_minutes / 7),
    }

    return frequency, breakdown


if __name__ == '__main__':
    print("Testing Frequency Equations...")
    print("=" * 60)

    for level in ActivityLevel:
        freq, breakdown = calculate_frequency(level)
        print(f"  {level.value:18s}: {freq} sessions, "
              f"{breakdown['weekly_minutes']} min/week, "
              f"{breakdown['daily_exercise_target']} min/day")
