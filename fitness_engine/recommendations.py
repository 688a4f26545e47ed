"""
Workout recommendations for today's dashboard.

Selects templates from a fixed catalog. Rest days surface recovery work,
mental wellness first; training days surface the user's preferred types.
Each result carries a calorie estimate for the user's current weight.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Sequence, Tuple

from .metrics import estimate_activity_calories
from .plan_params import DEFAULT_PARAMS


class WorkoutIntensity(Enum):
    """Intensity tag shown on a template card."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True)
class WorkoutTemplate:
    """Read-only catalog entry."""
    id: str
    title: str
    description: str
    type: str
    duration: int
    intensity: WorkoutIntensity
    display_tag: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'type': self.type,
            'duration': self.duration,
            'intensity': self.intensity.value,
            'displayTag': self.display_tag,
        }


@dataclass(frozen=True)
class RecommendedWorkout:
    """A catalog template annotated with its calorie estimate."""
    template: WorkoutTemplate
    calories: int

    @property
    def id(self) -> str:
        return self.template.id

    @property
    def type(self) -> str:
        return self.template.type

    @property
    def duration(self) -> int:
        return self.template.duration

    def to_dict(self) -> Dict[str, Any]:
        """Template fields plus 'calories'."""
        d = self.template.to_dict()
        d['calories'] = self.calories
        return d


WORKOUT_TEMPLATES: Tuple[WorkoutTemplate, ...] = (
    WorkoutTemplate('up-power', 'Upper Body Power',
                    'Chest, shoulders & arms with heavy resistance',
                    'strength', 45, WorkoutIntensity.HIGH, 'green'),
    WorkoutTemplate('low-strength', 'Leg Day Essentials',
                    'Squats, lunges and glute focus',
                    'strength', 50, WorkoutIntensity.HIGH, 'emerald'),
    WorkoutTemplate('hiit-max', 'HIIT Cardio Blast',
                    'High intensity intervals for maximum burn',
                    'hiit', 30, WorkoutIntensity.HIGH, 'gray'),
    WorkoutTemplate('yoga-flow', 'Zen Yoga Flow',
                    'Flexibility and balance for recovery',
                    'yoga', 40, WorkoutIntensity.LOW, 'blue'),
    WorkoutTemplate('core-stable', 'Core Stability',
                    'Deep abs and back strengthening',
                    'pilates', 35, WorkoutIntensity.MODERATE, 'indigo'),
    WorkoutTemplate('swim-endurance', 'Endurance Swim',
                    'Continuous laps for cardiovascular health',
                    'swimming', 45, WorkoutIntensity.MODERATE, 'cyan'),
    WorkoutTemplate('brisk-walk', 'Brisk Nature Walk',
                    'Active recovery in the fresh air',
                    'walking', 60, WorkoutIntensity.LOW, 'orange'),
    WorkoutTemplate('cross-total', 'Total CrossFit',
                    'Functional movements at high intensity',
                    'crossfit', 45, WorkoutIntensity.HIGH, 'red'),
    WorkoutTemplate('med-deep', 'Mindful Meditation',
                    'Find your center with guided mindfulness',
                    'meditation', 15, WorkoutIntensity.LOW, 'purple'),
    WorkoutTemplate('breath-work', 'Deep Breathing',
                    'Box breathing techniques for stress relief',
                    'breathing', 10, WorkoutIntensity.LOW, 'teal'),
    WorkoutTemplate('relax-muscle', 'Progressive Relaxation',
                    'Release tension from every muscle group',
                    'meditation', 20, WorkoutIntensity.LOW, 'indigo'),
)

RECOVERY_TYPES = frozenset({'meditation', 'breathing', 'yoga', 'walking', 'pilates', 'swimming'})
MENTAL_WELLNESS_TYPES = frozenset({'meditation', 'breathing'})


def select_rest_day_templates(
    catalog: Sequence[WorkoutTemplate] = WORKOUT_TEMPLATES,
    mental_wellness_slots: int = DEFAULT_PARAMS.mental_wellness_slots
) -> List[WorkoutTemplate]:
    """
    Recovery templates for a rest day.

    Up to mental_wellness_slots meditation/breathing templates come first,
    followed by every physical-recovery template, in catalog order.
    """
    recovery = [t for t in catalog if t.type in RECOVERY_TYPES]
    mental = [t for t in recovery if t.type in MENTAL_WELLNESS_TYPES]
    physical = [t for t in recovery if t.type not in MENTAL_WELLNESS_TYPES]
    return mental[:mental_wellness_slots] + physical


def select_training_day_templates(
    preferred_types: Sequence[str],
    catalog: Sequence[WorkoutTemplate] = WORKOUT_TEMPLATES
) -> List[WorkoutTemplate]:
    """Templates of a preferred type, or the whole catalog if none match."""
    preferred = set(getattr(p, 'value', p) for p in preferred_types)
    matches = [t for t in catalog if t.type in preferred]
    return matches or list(catalog)


def recommend_workouts(
    preferred_types: Sequence[str],
    weight_kg: float = DEFAULT_PARAMS.fallback_weight_kg,
    limit: int = DEFAULT_PARAMS.recommendation_limit,
    is_rest_day: bool = False,
    catalog: Sequence[WorkoutTemplate] = WORKOUT_TEMPLATES,
    mental_wellness_slots: int = DEFAULT_PARAMS.mental_wellness_slots
) -> List[RecommendedWorkout]:
    """
    Pick today's recommended workouts.

    Args:
        preferred_types: User's preferred workout types
        weight_kg: Current body weight for calorie estimates
        limit: Maximum number of results (negative counts as 0)
        is_rest_day: Whether today is a scheduled rest day
        catalog: Template catalog
        mental_wellness_slots: Cap on meditation/breathing results

    Returns:
        Up to limit RecommendedWorkout, each with a calorie estimate
    """
    if is_rest_day:
        library = select_rest_day_templates(catalog, mental_wellness_slots)
    else:
        library = select_training_day_templates(preferred_types, catalog)

    if not library:
        library = list(catalog)

    return [
        RecommendedWorkout(
            template=t,
            calories=estimate_activity_calories(t.type, t.duration, weight_kg),
        )
        for t in library[:max(0, limit)]
    ]


if __name__ == '__main__':
    print("Testing Recommendations...")
    print("=" * 60)

    for rest in (False, True):
        print(f"\nRest day: {rest}")
        for rec in recommend_workouts(['strength', 'hiit'], 80, limit=4, is_rest_day=rest):
            print(f"  {rec.template.title:25s} {rec.type:10s} "
                  f"{rec.duration:3d} min  {rec.calories:4d} kcal")
