"""
Fitness target and schedule computation engine.

This package provides the equations for:
- Energy targets (Mifflin-St Jeor BMR, TDEE, goal adjustment)
- Weekly training frequency
- Goal-weighted workout type distribution and rescaling
- Default weekly schedule placement
- MET calorie and cadence step estimates
- Daily workout recommendations
"""

# Configuration
from .plan_params import PlanParams, DEFAULT_PARAMS
from .rounding import round_half_up, clamp

# Energy model
from .energy import (
    ActivityLevel,
    FitnessGoal,
    BiometricInput,
    calculate_age,
    calculate_bmr,
    calculate_tdee,
    calculate_daily_calorie_goal,
    calculate_energy_targets,
)

# Frequency
from .frequency import (
    calculate_weekly_frequency,
    calculate_frequency,
)

# Workout splits
from .workout_splits import (
    WorkoutType,
    WorkoutTypeDistribution,
    FitnessTargets,
    calculate_distribution,
    apply_total_edit,
    update_distribution_entry,
    validate_targets,
    format_distribution,
)

# Scheduling
from .scheduling import (
    DayOfWeek,
    WorkoutScheduleItem,
    generate_default_schedule,
    toggle_rest_day,
    apply_time_to_all,
    count_training_days,
    format_weekly_schedule,
)

# Activity metrics
from .metrics import (
    ActivityLogEntry,
    get_met_value,
    get_steps_per_minute,
    summarize_entries,
)

# Recommendations
from .recommendations import (
    WorkoutIntensity,
    WorkoutTemplate,
    RecommendedWorkout,
    WORKOUT_TEMPLATES,
)

# Unified engine and external operations
from .fitness_plan_engine import (
    FitnessPlanEngine,
    FitnessPlanState,
    compute_fitness_targets,
    rescale_distribution,
    generate_weekly_schedule,
    estimate_activity_calories,
    estimate_steps,
    recommend_workouts,
)

__all__ = [
    # Configuration
    'PlanParams',
    'DEFAULT_PARAMS',
    'round_half_up',
    'clamp',
    # Energy
    'ActivityLevel',
    'FitnessGoal',
    'BiometricInput',
    'calculate_age',
    'calculate_bmr',
    'calculate_tdee',
    'calculate_daily_calorie_goal',
    'calculate_energy_targets',
    # Frequency
    'calculate_weekly_frequency',
    'calculate_frequency',
    # Splits
    'WorkoutType',
    'WorkoutTypeDistribution',
    'FitnessTargets',
    'calculate_distribution',
    'apply_total_edit',
    'update_distribution_entry',
    'validate_targets',
    'format_distribution',
    # Scheduling
    'DayOfWeek',
    'WorkoutScheduleItem',
    'generate_default_schedule',
    'toggle_rest_day',
    'apply_time_to_all',
    'count_training_days',
    'format_weekly_schedule',
    # Metrics
    'ActivityLogEntry',
    'get_met_value',
    'get_steps_per_minute',
    'summarize_entries',
    # Recommendations
    'WorkoutIntensity',
    'WorkoutTemplate',
    'RecommendedWorkout',
    'WORKOUT_TEMPLATES',
    # Engine
    'FitnessPlanEngine',
    'FitnessPlanState',
    'compute_fitness_targets',
    'rescale_distribution',
    'generate_weekly_schedule',
    'estimate_activity_calories',
    'estimate_steps',
    'recommend_workouts',
]
