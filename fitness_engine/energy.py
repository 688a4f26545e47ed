"""
Energy Model: Age, BMR, TDEE and daily calorie goal calculations.

Based on:
- Mifflin, M. D., St Jeor, S. T. et al. (1990). A new predictive equation
  for resting energy expenditure in healthy individuals
- Standard activity-factor multipliers for Total Daily Energy Expenditure

These equations turn a user's biometric snapshot into the calorie targets
shown on the dashboard. They are deterministic heuristics, not a
physiology model.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Optional, Dict, Any, Tuple, Union
import math

from .plan_params import PlanParams, DEFAULT_PARAMS
from .rounding import round_half_up


class ActivityLevel(Enum):
    """Self-reported daily activity classification."""
    SEDENTARY = "sedentary"                   # Desk job, little exercise
    LIGHTLY_ACTIVE = "lightly_active"         # Light exercise 1-3 days/week
    MODERATELY_ACTIVE = "moderately_active"   # Moderate exercise 3-5 days/week
    VERY_ACTIVE = "very_active"               # Hard exercise 6-7 days/week
    EXTREMELY_ACTIVE = "extremely_active"     # Physical job or twice-daily training


class FitnessGoal(Enum):
    """Primary goal picked during onboarding."""
    LOSE_WEIGHT = "LoseWeight"
    BUILD_MUSCLE = "BuildMuscle"
    STAY_FIT = "StayFit"
    IMPROVE_ENDURANCE = "ImproveEndurance"


ACTIVITY_MULTIPLIERS = MappingProxyType({
    ActivityLevel.SEDENTARY.value: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE.value: 1.375,
    ActivityLevel.MODERATELY_ACTIVE.value: 1.55,
    ActivityLevel.VERY_ACTIVE.value: 1.725,
    ActivityLevel.EXTREMELY_ACTIVE.value: 1.9,
})
DEFAULT_ACTIVITY_MULTIPLIER = 1.2


def enum_key(value: Union[Enum, str, None]) -> str:
    """Return the lookup key for an enum member or a raw string."""
    if isinstance(value, Enum):
        return value.value
    return "" if value is None else str(value)


def parse_measurement(value: Any, fallback: float) -> float:
    """
    Parse a numeric biometric value, falling back on anything unusable.

    Empty strings, non-numeric text, NaN and zero all yield the fallback,
    matching how the onboarding form treats blank fields.

    Args:
        value: Raw value (number or string)
        fallback: Value to use when parsing fails

    Returns:
        Parsed float or fallback
    """
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return fallback

    if math.isnan(parsed) or math.isinf(parsed) or parsed == 0:
        return fallback
    return parsed


@dataclass(frozen=True)
class BiometricInput:
    """
    Immutable biometric and preference snapshot captured at plan creation.

    Weight and height are normalized on construction; categorical fields
    are kept as given so unknown keys reach the documented defaults.

    Direct construction always falls back to DEFAULT_PARAMS weight and
    height. Use from_onboarding to apply the fallbacks of a custom
    PlanParams; calculate_energy_targets only sees the normalized values.
    """
    weight_kg: float = DEFAULT_PARAMS.fallback_weight_kg
    height_cm: float = DEFAULT_PARAMS.fallback_height_cm
    birthdate: Optional[Union[date, str]] = None
    gender: str = ""  # only the literal 'male' changes the BMR branch
    activity_level: str = ActivityLevel.SEDENTARY.value
    fitness_goal: str = FitnessGoal.STAY_FIT.value
    workout_preferences: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'weight_kg',
                           parse_measurement(self.weight_kg, DEFAULT_PARAMS.fallback_weight_kg))
        object.__setattr__(self, 'height_cm',
                           parse_measurement(self.height_cm, DEFAULT_PARAMS.fallback_height_cm))
        object.__setattr__(self, 'activity_level', enum_key(self.activity_level))
        object.__setattr__(self, 'fitness_goal', enum_key(self.fitness_goal))
        object.__setattr__(self, 'workout_preferences',
                           tuple(enum_key(p) for p in (self.workout_preferences or ())))

    @property
    def bmi(self) -> float:
        """Calculate Body Mass Index."""
        height_m = self.height_cm / 100
        return self.weight_kg / (height_m ** 2)

    @classmethod
    def from_onboarding(
        cls,
        data: Dict[str, Any],
        params: PlanParams = DEFAULT_PARAMS
    ) -> 'BiometricInput':
        """
        Build a snapshot from the raw onboarding form.

        The form submits camelCase keys and string measurements
        ("70", "" for a skipped field).

        Args:
            data: Onboarding form values
            params: Parameters supplying the fallbacks

        Returns:
            BiometricInput
        """
        return cls(
            weight_kg=parse_measurement(data.get('weight'), params.fallback_weight_kg),
            height_cm=parse_measurement(data.get('height'), params.fallback_height_cm),
            birthdate=data.get('birthdate') or None,
            gender=data.get('gender') or "",
            activity_level=data.get('activityLevel') or "",
            fitness_goal=data.get('fitnessGoal') or "",
            workout_preferences=tuple(data.get('workoutPreferences') or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        birthdate = self.birthdate
        if isinstance(birthdate, date):
            birthdate = birthdate.isoformat()
        return {
            'weight_kg': self.weight_kg,
            'height_cm': self.height_cm,
            'birthdate': birthdate,
            'gender': self.gender,
            'activity_level': self.activity_level,
            'fitness_goal': self.fitness_goal,
            'workout_preferences': list(self.workout_preferences),
        }


def _coerce_date(value: Any) -> Optional[date]:
    """Parse a birthdate from a date, datetime or ISO string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def calculate_age(
    birthdate: Any,
    today: Optional[date] = None,
    fallback_age: int = DEFAULT_PARAMS.fallback_age,
    max_plausible_age: int = DEFAULT_PARAMS.max_plausible_age
) -> int:
    """
    Calculate age in whole years.

    The year difference is reduced by one if this year's birthday is
    still ahead. Unparseable dates and implausible results (<= 0 or above
    max_plausible_age) fall back to fallback_age.

    Args:
        birthdate: Date, datetime or ISO 'YYYY-MM-DD' string
        today: Reference date (default: today)
        fallback_age: Age used when the birthdate is unusable
        max_plausible_age: Upper bound for a believable age

    Returns:
        Age in years
    """
    born = _coerce_date(birthdate)
    if born is None:
        return fallback_age

    today = today or date.today()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1

    if age <= 0 or age > max_plausible_age:
        return fallback_age
    return age


def calculate_bmr(
    weight_kg: float,
    height_cm: float,
    age: int,
    gender: str
) -> Tuple[float, Dict[str, Any]]:
    """
    Calculate Basal Metabolic Rate (Mifflin-St Jeor).

    Formula:
        BMR = 10 × weight + 6.25 × height - 5 × age + s
        s = +5 for 'male', -161 otherwise

    Every value other than the exact string 'male' (including unset and
    'other') takes the -161 branch.

    Args:
        weight_kg: Body weight in kg
        height_cm: Height in cm
        age: Age in years
        gender: Free-text gender

    Returns:
        Tuple of (bmr, breakdown_dict)
    """
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    offset = 5 if gender == 'male' else -161

    return base + offset, {
        'weight_kg': weight_kg,
        'height_cm': height_cm,
        'age': age,
        'base': base,
        'gender_offset': offset,
    }


def get_activity_multiplier(activity_level: Union[ActivityLevel, str]) -> float:
    """Look up the TDEE multiplier; unknown levels use the sedentary value."""
    return ACTIVITY_MULTIPLIERS.get(enum_key(activity_level), DEFAULT_ACTIVITY_MULTIPLIER)


def calculate_tdee(bmr: float, activity_level: Union[ActivityLevel, str]) -> float:
    """Total Daily Energy Expenditure = BMR × activity multiplier."""
    return bmr * get_activity_multiplier(activity_level)


def calculate_daily_calorie_goal(
    tdee: float,
    fitness_goal: Union[FitnessGoal, str],
    params: PlanParams = DEFAULT_PARAMS
) -> float:
    """
    Apply the goal adjustment to TDEE.

    LoseWeight subtracts the deficit, BuildMuscle adds the surplus, any
    other goal keeps TDEE unchanged.
    """
    goal = enum_key(fitness_goal)
    if goal == FitnessGoal.LOSE_WEIGHT.value:
        return tdee - params.lose_weight_deficit
    if goal == FitnessGoal.BUILD_MUSCLE.value:
        return tdee + params.build_muscle_surplus
    return tdee


def calculate_energy_targets(
    biometrics: BiometricInput,
    today: Optional[date] = None,
    params: PlanParams = DEFAULT_PARAMS
) -> Tuple[Dict[str, int], Dict[str, Any]]:
    """
    Compute the calorie targets for a biometric snapshot.

    Args:
        biometrics: User snapshot
        today: Reference date for the age calculation
        params: Plan parameters

    Returns:
        Tuple of (targets, breakdown_dict) where targets holds
        'weekly_calorie_burn_target' and 'daily_move_target'
    """
    age = calculate_age(
        biometrics.birthdate,
        today=today,
        fallback_age=params.fallback_age,
        max_plausible_age=params.max_plausible_age,
    )
    bmr, breakdown = calculate_bmr(
        biometrics.weight_kg, biometrics.height_cm, age, biometrics.gender
    )
    multiplier = get_activity_multiplier(biometrics.activity_level)
    tdee = calculate_tdee(bmr, biometrics.activity_level)
    daily_goal = calculate_daily_calorie_goal(tdee, biometrics.fitness_goal, params)

    breakdown.update({
        'bmr': bmr,
        'activity_multiplier': multiplier,
        'tdee': tdee,
        'daily_calorie_goal': daily_goal,
    })

    targets = {
        'weekly_calorie_burn_target': round_half_up(daily_goal * 7),
        'daily_move_target': round_half_up(daily_goal),
    }
    return targets, breakdown


if __name__ == '__main__':
    print("Testing Energy Model...")
    print("=" * 60)

    snapshot = BiometricInput(
        weight_kg=70,
        height_cm=170,
        birthdate="1990-01-01",
        gender="male",
        activity_level=ActivityLevel.MODERATELY_ACTIVE,
        fitness_goal=FitnessGoal.STAY_FIT,
    )
    targets, breakdown = calculate_energy_targets(snapshot)
    print(f"  Age: {breakdown['age']}")
    print(f"  BMR: {breakdown['bmr']:.1f} kcal")
    print(f"  TDEE: {breakdown['tdee']:.1f} kcal")
    print(f"  Daily move target: {targets['daily_move_target']} kcal")
    print(f"  Weekly burn target: {targets['weekly_calorie_burn_target']} kcal")

    for goal in FitnessGoal:
        goal_targets, _ = calculate_energy_targets(
            BiometricInput(birthdate="1990-01-01", gender="female", fitness_goal=goal)
        )
        print(f"  {goal.value:18s} daily: {goal_targets['daily_move_target']}")
