"""
Synthetic user data generation for backtesting.

Generates onboarding snapshots with:
- Varied body measurements, ages and activity levels
- Goal and workout preference mixes per archetype
- Messy form input (skipped fields, bad dates) to exercise fallbacks
- Logged activity history for dashboard summaries
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Dict, Any, Callable, Tuple
import numpy as np

from fitness_engine.energy import ActivityLevel, BiometricInput, FitnessGoal
from fitness_engine.metrics import ActivityLogEntry
from fitness_engine.workout_splits import WorkoutType


REFERENCE_DATE = date(2024, 6, 1)

ACTIVITY_LEVELS = [level.value for level in ActivityLevel]
WORKOUT_TYPES = [t.value for t in WorkoutType]


@dataclass
class SyntheticUser:
    """
    One synthetic user for simulation.

    Holds the biometric snapshot plus the archetype it was drawn from.
    """
    id: str
    name: str
    archetype: str
    biometrics: BiometricInput

    def to_dict(self) -> Dict[str, Any]:
        """Convert profile to dictionary."""
        d = {'id': self.id, 'name': self.name, 'archetype': self.archetype}
        d.update(self.biometrics.to_dict())
        return d


def _birthdate_for_age(age: int, reference: date = REFERENCE_DATE) -> str:
    """ISO birthdate roughly age years before the reference date."""
    days_old = age * 365 + int(np.random.randint(20, 340))
    return (reference - timedelta(days=days_old)).isoformat()


def _pick_preferences(pool: List[str], low: int, high: int) -> Tuple[str, ...]:
    count = int(np.random.randint(low, high + 1))
    count = min(count, len(pool))
    return tuple(np.random.choice(pool, size=count, replace=False).tolist())


# ═══════════════════════════════════════════════════════════════════════════════
# USER ARCHETYPES
# ═══════════════════════════════════════════════════════════════════════════════

def create_weight_loss_beginner(id_num: int) -> SyntheticUser:
    """Sedentary user starting out to lose weight."""
    gender = str(np.random.choice(['male', 'female']))
    return SyntheticUser(
        id=f"weight_loss_{id_num}",
        name=f"Weight Loss Beginner {id_num}",
        archetype='weight_loss_beginner',
        biometrics=BiometricInput(
            weight_kg=float(np.random.uniform(85, 120) if gender == 'male'
                            else np.random.uniform(70, 100)),
            height_cm=float(np.random.uniform(165, 190) if gender == 'male'
                            else np.random.uniform(155, 175)),
            birthdate=_birthdate_for_age(int(np.random.randint(28, 55))),
            gender=gender,
            activity_level=str(np.random.choice(ACTIVITY_LEVELS[:2])),
            fitness_goal=FitnessGoal.LOSE_WEIGHT.value,
            workout_preferences=_pick_preferences(['cardio', 'walking', 'swimming', 'hiit'], 1, 3),
        ),
    )


def create_gym_lifter(id_num: int) -> SyntheticUser:
    """Regular lifter building muscle."""
    gender = str(np.random.choice(['male', 'female'], p=[0.7, 0.3]))
    prefs = ('strength',) + _pick_preferences(['cardio', 'hiit', 'crossfit'], 0, 2)
    return SyntheticUser(
        id=f"lifter_{id_num}",
        name=f"Gym Lifter {id_num}",
        archetype='gym_lifter',
        biometrics=BiometricInput(
            weight_kg=float(np.random.uniform(65, 100)),
            height_cm=float(np.random.uniform(160, 195)),
            birthdate=_birthdate_for_age(int(np.random.randint(18, 40))),
            gender=gender,
            activity_level=str(np.random.choice(ACTIVITY_LEVELS[2:4])),
            fitness_goal=FitnessGoal.BUILD_MUSCLE.value,
            workout_preferences=prefs,
        ),
    )


def create_endurance_athlete(id_num: int) -> SyntheticUser:
    """Very active user training for endurance."""
    gender = str(np.random.choice(['male', 'female']))
    return SyntheticUser(
        id=f"endurance_{id_num}",
        name=f"Endurance Athlete {id_num}",
        archetype='endurance_athlete',
        biometrics=BiometricInput(
            weight_kg=float(np.random.uniform(50, 80)),
            height_cm=float(np.random.uniform(158, 190)),
            birthdate=_birthdate_for_age(int(np.random.randint(20, 50))),
            gender=gender,
            activity_level=str(np.random.choice(ACTIVITY_LEVELS[3:])),
            fitness_goal=FitnessGoal.IMPROVE_ENDURANCE.value,
            workout_preferences=_pick_preferences(['cardio', 'swimming', 'sports', 'walking'], 2, 4),
        ),
    )


def create_general_fitness(id_num: int) -> SyntheticUser:
    """Moderately active user keeping fit with a broad mix."""
    gender = str(np.random.choice(['male', 'female']))
    return SyntheticUser(
        id=f"general_{id_num}",
        name=f"General Fitness {id_num}",
        archetype='general_fitness',
        biometrics=BiometricInput(
            weight_kg=float(np.random.uniform(55, 95)),
            height_cm=float(np.random.uniform(155, 190)),
            birthdate=_birthdate_for_age(int(np.random.randint(25, 70))),
            gender=gender,
            activity_level=str(np.random.choice(ACTIVITY_LEVELS)),
            fitness_goal=FitnessGoal.STAY_FIT.value,
            workout_preferences=_pick_preferences(WORKOUT_TYPES, 1, 5),
        ),
    )


def create_incomplete_onboarding(id_num: int) -> SyntheticUser:
    """User who skipped or mistyped onboarding fields."""
    form = {
        'weight': str(np.random.choice(['', 'abc', '0', '72.5'])),
        'height': str(np.random.choice(['', '-5', '180'])),
        'birthdate': str(np.random.choice(['', 'not-a-date', '1850-01-01', '2090-01-01'])),
        'gender': str(np.random.choice(['', 'male', 'other'])),
        'activityLevel': str(np.random.choice(['', 'couch_potato', 'lightly_active'])),
        'fitnessGoal': str(np.random.choice(['', 'GetStrong', 'LoseWeight'])),
        'workoutPreferences': list(_pick_preferences(WORKOUT_TYPES, 0, 2)),
    }
    return SyntheticUser(
        id=f"incomplete_{id_num}",
        name=f"Incomplete Onboarding {id_num}",
        archetype='incomplete_onboarding',
        biometrics=BiometricInput.from_onboarding(form),
    )


# Archetype creators and their default counts
ARCHETYPE_CREATORS: List[Tuple[Callable[[int], SyntheticUser], int]] = [
    (create_weight_loss_beginner, 2),
    (create_gym_lifter, 2),
    (create_endurance_athlete, 2),
    (create_general_fitness, 2),
    (create_incomplete_onboarding, 2),
]


def generate_user_profiles(
    n_profiles: int = 20,
    seed: Optional[int] = None
) -> List[SyntheticUser]:
    """
    Generate diverse user profiles for backtesting.

    Args:
        n_profiles: Number of profiles to generate
        seed: Random seed for reproducibility

    Returns:
        List of SyntheticUser objects
    """
    if seed is not None:
        np.random.seed(seed)

    profiles = []

    # First, create the default count of each archetype
    for creator, default_count in ARCHETYPE_CREATORS:
        for i in range(default_count):
            if len(profiles) >= n_profiles:
                break
            profiles.append(creator(i + 1))

    # If we need more, randomly select archetypes
    while len(profiles) < n_profiles:
        creator, _ = ARCHETYPE_CREATORS[np.random.randint(len(ARCHETYPE_CREATORS))]
        profiles.append(creator(len(profiles) + 1))

    return profiles[:n_profiles]


# ═══════════════════════════════════════════════════════════════════════════════
# ACTIVITY LOG GENERATION
# ═══════════════════════════════════════════════════════════════════════════════

def generate_activity_log(
    user: SyntheticUser,
    num_days: int = 14,
    end_date: date = REFERENCE_DATE,
    completion_rate: float = 0.6,
    seed: Optional[int] = None
) -> List[ActivityLogEntry]:
    """
    Generate a logged activity history for a user.

    Each day independently has a completed workout with probability
    completion_rate; the type is drawn from the user's preferences.

    Args:
        user: Synthetic user
        num_days: Days of history ending on end_date
        end_date: Last day of history
        completion_rate: Daily probability of a workout
        seed: Random seed for reproducibility

    Returns:
        List of ActivityLogEntry, oldest first
    """
    if seed is not None:
        np.random.seed(seed)

    pool = list(user.biometrics.workout_preferences) or ['strength', 'cardio']
    entries = []

    for offset in range(num_days - 1, -1, -1):
        if np.random.random() >= completion_rate:
            continue
        entries.append(ActivityLogEntry(
            type=str(np.random.choice(pool)),
            duration_minutes=float(np.round(np.random.uniform(15, 75), 1)),
            weight_kg=user.biometrics.weight_kg,
            date=end_date - timedelta(days=offset),
        ))

    return entries


if __name__ == '__main__':
    print("Testing Synthetic Users...")
    print("=" * 60)

    for user in generate_user_profiles(10, seed=42):
        b = user.biometrics
        print(f"  {user.name:26s} {b.weight_kg:6.1f} kg {b.height_cm:6.1f} cm "
              f"{b.activity_level:18s} {b.fitness_goal:16s} {list(b.workout_preferences)}")
