"""
Comprehensive tests for all fitness plan equations.

Tests cover:
1. Age, BMR, TDEE and calorie targets
2. Weekly frequency
3. Workout distribution and rescaling
4. Scheduling and day assignment
5. Calorie and step estimates
6. Recommendations
7. Full engine integration

Run with: python -m pytest tests/test_equations.py -v
"""

import pytest
from datetime import date

from fitness_engine.rounding import round_half_up
from fitness_engine.plan_params import PlanParams, DEFAULT_PARAMS
from fitness_engine.energy import (
    ActivityLevel,
    FitnessGoal,
    BiometricInput,
    calculate_age,
    calculate_bmr,
    calculate_daily_calorie_goal,
    calculate_energy_targets,
    calculate_tdee,
)
from fitness_engine.frequency import calculate_frequency, calculate_weekly_frequency
from fitness_engine.workout_splits import (
    FitnessTargets,
    WorkoutTypeDistribution,
    calculate_distribution,
    rescale_distribution,
    update_distribution_entry,
    validate_targets,
    MINUTES,
    SESSIONS,
)
from fitness_engine.scheduling import (
    DayOfWeek,
    PlannedSession,
    WorkoutScheduleItem,
    generate_default_schedule,
    place_sessions,
    toggle_rest_day,
    apply_time_to_all,
    count_training_days,
)
from fitness_engine.metrics import (
    ActivityLogEntry,
    estimate_activity_calories,
    estimate_steps,
    summarize_entries,
)
from fitness_engine.recommendations import (
    RECOVERY_TYPES,
    recommend_workouts,
)
from fitness_engine.fitness_plan_engine import (
    FitnessPlanEngine,
    compute_fitness_targets,
    generate_weekly_schedule,
)


TODAY = date(2024, 6, 1)


def make_targets(distribution, frequency=None, minutes=None):
    """Targets whose totals match the given distribution rows."""
    rows = tuple(WorkoutTypeDistribution(*row) for row in distribution)
    return FitnessTargets(
        weekly_calorie_burn_target=14000,
        weekly_workout_minutes=minutes if minutes is not None else sum(r.weekly_minutes for r in rows),
        weekly_workout_frequency_target=(frequency if frequency is not None
                                         else sum(r.weekly_sessions for r in rows)),
        daily_move_target=2000,
        daily_exercise_target=26,
        workout_type_distribution=rows,
    )


@pytest.fixture
def stay_fit_user():
    return BiometricInput(
        weight_kg=70,
        height_cm=170,
        birthdate="1990-01-01",
        gender="male",
        activity_level="moderately_active",
        fitness_goal="StayFit",
        workout_preferences=("strength", "cardio"),
    )


@pytest.fixture
def four_day_targets():
    return make_targets([('strength', 90, 2), ('cardio', 90, 2)])


# =============================================================================
# Rounding
# =============================================================================

class TestRounding:
    """Tests for half-up rounding."""

    def test_halves_round_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(157.5) == 158

    def test_negative_halves_round_toward_positive(self):
        assert round_half_up(-2.5) == -2

    def test_below_half(self):
        assert round_half_up(0.4) == 0
        assert round_half_up(256.666) == 257

    def test_largest_double_below_half(self):
        assert round_half_up(0.49999999999999994) == 0
        assert round_half_up(-0.5) == 0


# =============================================================================
# Energy Model Tests
# =============================================================================

class TestAge:
    """Tests for age calculation and its fallbacks."""

    def test_birthday_passed(self):
        assert calculate_age("1990-01-01", today=TODAY) == 34

    def test_birthday_today(self):
        assert calculate_age("2000-06-01", today=TODAY) == 24

    def test_birthday_ahead(self):
        assert calculate_age("2000-06-02", today=TODAY) == 23

    def test_accepts_date_objects(self):
        assert calculate_age(date(1980, 12, 31), today=TODAY) == 43

    def test_missing_birthdate_falls_back(self):
        assert calculate_age(None, today=TODAY) == 25
        assert calculate_age("", today=TODAY) == 25

    def test_unparseable_birthdate_falls_back(self):
        assert calculate_age("not-a-date", today=TODAY) == 25

    def test_future_birthdate_falls_back(self):
        assert calculate_age("2030-01-01", today=TODAY) == 25

    def test_implausibly_old_falls_back(self):
        assert calculate_age("1800-01-01", today=TODAY) == 25


class TestBMR:
    """Tests for Mifflin-St Jeor BMR."""

    def test_male(self):
        bmr, breakdown = calculate_bmr(70, 170, 34, 'male')
        assert bmr == pytest.approx(1597.5)
        assert breakdown['gender_offset'] == 5

    def test_female(self):
        bmr, _ = calculate_bmr(60, 165, 30, 'female')
        assert bmr == pytest.approx(1320.25)

    def test_only_exact_male_takes_male_branch(self):
        male, _ = calculate_bmr(70, 170, 30, 'male')
        for gender in ('', 'other', 'Male', 'female'):
            bmr, _ = calculate_bmr(70, 170, 30, gender)
            assert male - bmr == pytest.approx(166)


class TestEnergyTargets:
    """Tests for daily and weekly calorie targets."""

    def test_stay_fit_targets(self, stay_fit_user):
        targets, breakdown = calculate_energy_targets(stay_fit_user, today=TODAY)
        assert breakdown['age'] == 34
        assert breakdown['tdee'] == pytest.approx(2476.125)
        assert targets['daily_move_target'] == 2476
        assert targets['weekly_calorie_burn_target'] == 17333

    def test_lose_weight_deficit(self):
        snapshot = BiometricInput(60, 165, "1994-01-01", "female",
                                  "sedentary", "LoseWeight")
        targets, _ = calculate_energy_targets(snapshot, today=TODAY)
        assert targets['daily_move_target'] == 1084
        assert targets['weekly_calorie_burn_target'] == 7590

    def test_goal_adjustments(self):
        assert calculate_daily_calorie_goal(2000, FitnessGoal.LOSE_WEIGHT) == 1500
        assert calculate_daily_calorie_goal(2000, FitnessGoal.BUILD_MUSCLE) == 2300
        assert calculate_daily_calorie_goal(2000, FitnessGoal.STAY_FIT) == 2000
        assert calculate_daily_calorie_goal(2000, FitnessGoal.IMPROVE_ENDURANCE) == 2000
        assert calculate_daily_calorie_goal(2000, 'GetStrong') == 2000

    def test_unknown_activity_level_uses_sedentary_multiplier(self):
        unknown = BiometricInput(70, 170, "1990-01-01", "male", "couch_potato", "StayFit")
        sedentary = BiometricInput(70, 170, "1990-01-01", "male", "sedentary", "StayFit")
        assert (calculate_energy_targets(unknown, today=TODAY)[0]
                == calculate_energy_targets(sedentary, today=TODAY)[0])

    def test_measurement_fallbacks(self):
        snapshot = BiometricInput(weight_kg="", height_cm=None)
        assert snapshot.weight_kg == 70
        assert snapshot.height_cm == 170
        assert BiometricInput(weight_kg=0, height_cm=float('nan')).height_cm == 170
        assert BiometricInput(weight_kg="abc").weight_kg == 70

    def test_enum_members_accepted(self):
        snapshot = BiometricInput(activity_level=ActivityLevel.VERY_ACTIVE,
                                  fitness_goal=FitnessGoal.BUILD_MUSCLE)
        assert snapshot.activity_level == 'very_active'
        assert snapshot.fitness_goal == 'BuildMuscle'

    def test_from_onboarding(self):
        snapshot = BiometricInput.from_onboarding({
            'weight': '72.5',
            'height': '',
            'birthdate': '',
            'gender': 'female',
            'activityLevel': 'very_active',
            'fitnessGoal': 'LoseWeight',
            'workoutPreferences': ['cardio', 'hiit'],
        })
        assert snapshot.weight_kg == 72.5
        assert snapshot.height_cm == 170
        assert snapshot.birthdate is None
        assert snapshot.workout_preferences == ('cardio', 'hiit')

    def test_onboarding_uses_custom_fallbacks(self):
        params = PlanParams(fallback_weight_kg=90)
        blank = BiometricInput.from_onboarding({
            'weight': '',
            'height': '170',
            'birthdate': '1990-01-01',
            'gender': 'male',
            'activityLevel': 'moderately_active',
            'fitnessGoal': 'StayFit',
        }, params)
        heavy = BiometricInput(90, 170, "1990-01-01", "male", "moderately_active", "StayFit")
        assert blank.weight_kg == 90
        assert (calculate_energy_targets(blank, today=TODAY, params=params)[0]
                == calculate_energy_targets(heavy, today=TODAY, params=params)[0])

    def test_direct_construction_uses_default_fallbacks(self):
        assert BiometricInput(weight_kg='').weight_kg == DEFAULT_PARAMS.fallback_weight_kg

    def test_tdee_in_breakdown(self, stay_fit_user):
        _, breakdown = calculate_energy_targets(stay_fit_user, today=TODAY)
        assert breakdown['tdee'] == calculate_tdee(breakdown['bmr'], 'moderately_active')


# =============================================================================
# Frequency Tests
# =============================================================================

class TestFrequency:
    """Tests for weekly frequency."""

    @pytest.mark.parametrize("level,expected", [
        ('sedentary', 2),
        ('lightly_active', 3),
        ('moderately_active', 4),
        ('very_active', 5),
        ('extremely_active', 6),
        ('unknown', 3),
        ('', 3),
    ])
    def test_sessions_per_level(self, level, expected):
        assert calculate_weekly_frequency(level) == expected

    def test_minutes_and_daily_target(self):
        freq, breakdown = calculate_frequency('moderately_active')
        assert freq == 4
        assert breakdown['weekly_minutes'] == 180
        assert breakdown['daily_exercise_target'] == 26

    def test_unknown_level_flagged(self):
        _, breakdown = calculate_frequency('couch_potato')
        assert breakdown['known_level'] is False


# =============================================================================
# Workout Distribution Tests
# =============================================================================

class TestWorkoutDistribution:
    """Tests for goal-weighted distribution."""

    def test_stay_fit_even_split(self):
        dist, _ = calculate_distribution(['strength', 'cardio'], 'StayFit', 4, 180)
        assert [(d.workout_type, d.weekly_minutes, d.weekly_sessions) for d in dist] == [
            ('strength', 90, 2), ('cardio', 90, 2)]

    def test_build_muscle_favours_strength(self):
        dist, _ = calculate_distribution(['strength', 'cardio', 'hiit'], 'BuildMuscle', 4, 180)
        by_type = {d.workout_type: d for d in dist}
        assert by_type['strength'].weekly_sessions >= by_type['cardio'].weekly_sessions
        assert by_type['strength'].weekly_minutes == 108
        assert by_type['cardio'].weekly_minutes == 36

    def test_lose_weight_split(self):
        dist, _ = calculate_distribution(['cardio', 'hiit', 'strength'], 'LoseWeight', 5, 225)
        assert [(d.weekly_minutes, d.weekly_sessions) for d in dist] == [
            (96, 2), (96, 2), (33, 1)]

    def test_empty_preferences_use_defaults(self):
        dist, breakdown = calculate_distribution([], 'StayFit', 4, 180)
        assert [d.workout_type for d in dist] == ['strength', 'cardio']
        assert breakdown['used_default_preferences'] is True

    def test_zero_session_types_dropped_minutes_kept(self):
        prefs = ['yoga', 'pilates', 'walking', 'swimming', 'cardio']
        dist, breakdown = calculate_distribution(prefs, 'StayFit', 2, 90)
        assert [(d.workout_type, d.weekly_minutes, d.weekly_sessions) for d in dist] == [
            ('cardio', 90, 2)]
        assert breakdown['dropped_types'] == ['yoga', 'pilates', 'walking', 'swimming']
        assert breakdown['orphaned_minutes'] == 72

    @pytest.mark.parametrize("goal", [g.value for g in FitnessGoal])
    @pytest.mark.parametrize("sessions,minutes", [(2, 90), (3, 135), (6, 270)])
    def test_sums_match_totals(self, goal, sessions, minutes):
        prefs = ['strength', 'cardio', 'hiit', 'yoga']
        dist, _ = calculate_distribution(prefs, goal, sessions, minutes)
        assert sum(d.weekly_sessions for d in dist) == sessions
        assert sum(d.weekly_minutes for d in dist) == minutes
        assert all(d.weekly_sessions > 0 for d in dist)


class TestRescale:
    """Tests for rescaling from the original distribution."""

    def test_rescale_minutes(self, four_day_targets):
        rows = rescale_distribution(four_day_targets, 200, MINUTES)
        assert [r.weekly_minutes for r in rows] == [100, 100]
        assert [r.weekly_sessions for r in rows] == [2, 2]

    def test_half_goes_to_first_row(self, four_day_targets):
        rows = rescale_distribution(four_day_targets, 101, MINUTES)
        assert [r.weekly_minutes for r in rows] == [51, 50]

    def test_rescale_sessions(self, four_day_targets):
        rows = rescale_distribution(four_day_targets, 5, SESSIONS)
        assert [r.weekly_sessions for r in rows] == [3, 2]
        assert [r.weekly_minutes for r in rows] == [90, 90]

    def test_non_positive_total_keeps_original(self, four_day_targets):
        assert rescale_distribution(four_day_targets, 0, MINUTES) == \
            four_day_targets.workout_type_distribution
        assert rescale_distribution(four_day_targets, -5, SESSIONS) == \
            four_day_targets.workout_type_distribution

    def test_zero_original_total_keeps_original(self):
        targets = make_targets([('strength', 0, 0)])
        assert rescale_distribution(targets, 100, MINUTES) == targets.workout_type_distribution

    def test_unknown_field_raises(self, four_day_targets):
        with pytest.raises(ValueError):
            rescale_distribution(four_day_targets, 100, 'hours')

    @pytest.mark.parametrize("new_total", [1, 7, 33, 180, 599])
    def test_sum_equals_new_total(self, new_total):
        targets = make_targets([('cardio', 96, 2), ('hiit', 96, 2), ('strength', 33, 1)])
        rows = rescale_distribution(targets, new_total, MINUTES)
        assert sum(r.weekly_minutes for r in rows) == new_total
        assert all(r.weekly_minutes >= 0 for r in rows)
        assert len(rows) == 3


class TestDistributionEdits:
    """Tests for per-row edits."""

    def test_minutes_edit_recomputes_total(self, four_day_targets):
        updated = update_distribution_entry(four_day_targets, 0, MINUTES, 120)
        assert updated.weekly_workout_minutes == 210
        assert validate_targets(updated)[0]

    def test_unparseable_count_is_zero(self, four_day_targets):
        updated = update_distribution_entry(four_day_targets, 1, SESSIONS, 'abc')
        assert updated.workout_type_distribution[1].weekly_sessions == 0
        assert updated.weekly_workout_frequency_target == 2

    def test_type_edit(self, four_day_targets):
        updated = update_distribution_entry(four_day_targets, 1, 'workout_type', 'yoga')
        assert updated.workout_type_distribution[1].workout_type == 'yoga'

    def test_unknown_field_raises(self, four_day_targets):
        with pytest.raises(ValueError):
            update_distribution_entry(four_day_targets, 0, 'intensity', 3)

    def test_validate_detects_mismatch(self):
        targets = make_targets([('strength', 90, 2)], frequency=3)
        valid, message = validate_targets(targets)
        assert not valid
        assert 'Sessions' in message


# =============================================================================
# Scheduling Tests
# =============================================================================

class TestScheduling:
    """Tests for default schedule placement."""

    def test_four_day_schedule(self, four_day_targets):
        schedule = generate_default_schedule(four_day_targets)
        assert len(schedule) == 7
        assert [item.day_of_week for item in schedule] == list(DayOfWeek)
        assert count_training_days(schedule) == 4
        assert [item.workout_type for item in schedule] == [
            'strength', 'strength', None, 'cardio', None, 'cardio', None]
        assert all(item.time_of_day == "18:00" for item in schedule)
        assert all(item.duration_minutes == 45 for item in schedule if not item.is_rest_day)

    def test_rest_days_are_empty(self, four_day_targets):
        for item in generate_default_schedule(four_day_targets):
            if item.is_rest_day:
                assert item.workout_type is None
                assert item.duration_minutes == 0

    def test_six_day_schedule_rests_sunday(self):
        targets = make_targets([('strength', 135, 3), ('cardio', 135, 3)])
        schedule = generate_default_schedule(targets)
        assert count_training_days(schedule) == 6
        assert schedule[DayOfWeek.SUNDAY.value].is_rest_day

    def test_collision_probes_forward(self):
        sessions = [PlannedSession('cardio', 30)] * 3
        schedule, dropped = place_sessions(sessions, 2)
        assert [not item.is_rest_day for item in schedule] == [
            True, True, False, True, False, False, False]
        assert dropped == []

    def test_overfull_week_drops_sessions(self):
        schedule, dropped = place_sessions([PlannedSession('cardio', 30)] * 8, 7)
        assert count_training_days(schedule) == 7
        assert len(dropped) == 1

    def test_frequency_is_clamped(self):
        schedule, _ = place_sessions([PlannedSession('yoga', 30)], 0)
        assert count_training_days(schedule) == 1

    def test_custom_time_of_day(self, four_day_targets):
        schedule = generate_default_schedule(four_day_targets, "07:30")
        assert {item.time_of_day for item in schedule} == {"07:30"}

    def test_toggle_rest_to_training(self, four_day_targets):
        schedule = generate_default_schedule(four_day_targets)
        toggled = toggle_rest_day(schedule, 2, four_day_targets)
        assert not toggled[2].is_rest_day
        assert toggled[2].workout_type == 'strength'
        assert toggled[2].duration_minutes == 45
        assert schedule[2].is_rest_day

    def test_toggle_without_targets_uses_fallback(self):
        schedule = [WorkoutScheduleItem(day) for day in DayOfWeek]
        assert toggle_rest_day(schedule, 0)[0].workout_type == 'strength'

    def test_toggle_training_to_rest(self, four_day_targets):
        schedule = generate_default_schedule(four_day_targets)
        toggled = toggle_rest_day(schedule, 0, four_day_targets)
        assert toggled[0].is_rest_day
        assert toggled[0].workout_type is None
        assert toggled[0].duration_minutes == 0

    def test_apply_time_to_all(self, four_day_targets):
        schedule = apply_time_to_all(generate_default_schedule(four_day_targets), "06:00")
        assert all(item.time_of_day == "06:00" for item in schedule)

    def test_item_dict_shape(self):
        item = WorkoutScheduleItem(DayOfWeek.MONDAY)
        d = item.to_dict()
        assert d['dayOfWeek'] == 'Monday'
        assert 'workoutType' not in d
        assert WorkoutScheduleItem.from_dict(d) == item

    def test_item_without_rest_flag(self):
        rest = WorkoutScheduleItem.from_dict({'dayOfWeek': 'Friday'})
        training = WorkoutScheduleItem.from_dict(
            {'dayOfWeek': 'Friday', 'workoutType': 'yoga', 'durationMinutes': 30})
        assert rest.is_rest_day
        assert not training.is_rest_day


# =============================================================================
# Activity Metrics Tests
# =============================================================================

class TestCalorieEstimates:
    """Tests for MET calorie estimates."""

    @pytest.mark.parametrize("activity,minutes,weight,expected", [
        ('strength', 60, 70, 420),
        ('cardio', 30, 70, 280),
        ('hiit', 20, 70, 257),
        ('yoga', 45, 70, 158),
        ('cardio', 45.75, 70, 427),
        ('unknown', 60, 70, 245),
        ('hiit', 1, 70, 13),
        ('cardio', 15, 70, 140),
        ('strength', 0, 70, 0),
    ])
    def test_known_values(self, activity, minutes, weight, expected):
        assert estimate_activity_calories(activity, minutes, weight) == expected

    def test_linear_in_weight(self):
        assert estimate_activity_calories('cardio', 60, 100) == \
            2 * estimate_activity_calories('cardio', 60, 50)

    def test_type_lookup_is_case_insensitive(self):
        assert estimate_activity_calories('HIIT', 20, 70) == 257

    def test_recovery_types_lowest_met(self):
        meditation = estimate_activity_calories('meditation', 60, 70)
        assert meditation < estimate_activity_calories('yoga', 60, 70)
        assert meditation == estimate_activity_calories('breathing', 60, 70)


class TestStepEstimates:
    """Tests for cadence step estimates."""

    @pytest.mark.parametrize("activity,minutes,expected", [
        ('walking', 10, 1000),
        ('cardio', 30, 4200),
        ('swimming', 60, 0),
        ('unknown', 10, 800),
        ('strength', 45.5, 1365),
        ('yoga', 0, 0),
    ])
    def test_known_values(self, activity, minutes, expected):
        assert estimate_steps(activity, minutes) == expected

    def test_entry_summary(self):
        entries = [
            ActivityLogEntry('walking', 10),
            ActivityLogEntry('strength', 60, 70),
            ActivityLogEntry('cardio', 30, calories_burned=301.6),
        ]
        summary = summarize_entries(entries)
        assert summary['count'] == 3
        assert summary['minutes'] == 100
        assert summary['calories'] == 41 + 420 + 302
        assert summary['steps'] == 1000 + 1800 + 4200


# =============================================================================
# Recommendation Tests
# =============================================================================

class TestRecommendations:
    """Tests for workout recommendations."""

    def test_training_day_preferred_types(self):
        recs = recommend_workouts(['strength'], 70, limit=3)
        assert [r.id for r in recs] == ['up-power', 'low-strength']
        assert [r.calories for r in recs] == [315, 350]

    def test_no_matching_preference_uses_catalog(self):
        recs = recommend_workouts(['boxing'], 70, limit=3)
        assert [r.id for r in recs] == ['up-power', 'low-strength', 'hiit-max']

    def test_rest_day_mental_wellness_first(self):
        recs = recommend_workouts(['strength'], 70, limit=3, is_rest_day=True)
        assert [r.id for r in recs] == ['med-deep', 'breath-work', 'yoga-flow']

    def test_rest_day_only_recovery_types(self):
        recs = recommend_workouts(['strength', 'hiit'], 70, limit=20, is_rest_day=True)
        assert [r.id for r in recs] == [
            'med-deep', 'breath-work', 'yoga-flow', 'core-stable',
            'swim-endurance', 'brisk-walk']
        assert all(r.type in RECOVERY_TYPES for r in recs)

    def test_limit_bounds(self):
        assert recommend_workouts(['strength'], 70, limit=0) == []
        assert recommend_workouts(['strength'], 70, limit=-1) == []

    def test_calories_follow_weight(self):
        recs = recommend_workouts([], 80, limit=2, is_rest_day=True)
        assert recs[1].id == 'breath-work'
        assert recs[1].calories == 17

    def test_dict_shape(self):
        d = recommend_workouts(['yoga'], 70, limit=1)[0].to_dict()
        assert d['id'] == 'yoga-flow'
        assert d['intensity'] == 'low'
        assert d['calories'] == 140


# =============================================================================
# Engine Integration Tests
# =============================================================================

class TestFitnessPlanEngine:
    """Tests for the unified engine."""

    def test_compute_targets(self, stay_fit_user):
        targets = compute_fitness_targets(stay_fit_user, today=TODAY)
        assert targets.daily_move_target == 2476
        assert targets.weekly_calorie_burn_target == 17333
        assert targets.weekly_workout_frequency_target == 4
        assert targets.weekly_workout_minutes == 180
        assert targets.daily_exercise_target == 26
        assert validate_targets(targets)[0]

    def test_schedule_from_targets(self, stay_fit_user):
        schedule = generate_weekly_schedule(compute_fitness_targets(stay_fit_user, today=TODAY))
        assert len(schedule) == 7
        assert count_training_days(schedule) == 4

    def test_edit_then_rescale_reads_original(self, stay_fit_user):
        engine = FitnessPlanEngine()
        state = engine.initialize_plan(stay_fit_user, today=TODAY)
        once = engine.update_total(state, MINUTES, 101)
        twice = engine.update_total(engine.update_total(state, MINUTES, 77), MINUTES, 101)
        assert once.targets == twice.targets
        assert once.targets.weekly_workout_minutes == 101
        assert once.has_changes
        assert state.original_targets == once.original_targets

    @pytest.mark.parametrize("edits", [
        [(MINUTES, 200), (SESSIONS, 5)],
        [(SESSIONS, 5), (MINUTES, 200)],
        [(MINUTES, 200), (SESSIONS, 5), (MINUTES, 101)],
    ])
    def test_edit_sequence_keeps_both_sums(self, stay_fit_user, edits):
        engine = FitnessPlanEngine()
        state = engine.initialize_plan(stay_fit_user, today=TODAY)
        for field_name, value in edits:
            state = engine.update_total(state, field_name, value)
            assert validate_targets(state.targets) == (True, "Valid")

    def test_minutes_edit_survives_sessions_edit(self, stay_fit_user):
        engine = FitnessPlanEngine()
        state = engine.initialize_plan(stay_fit_user, today=TODAY)
        state = engine.update_total(state, MINUTES, 200)
        state = engine.update_total(state, SESSIONS, 5)
        rows = state.targets.workout_type_distribution
        assert [r.weekly_minutes for r in rows] == [100, 100]
        assert [r.weekly_sessions for r in rows] == [3, 2]
        assert state.targets.weekly_workout_minutes == 200

    def test_reset(self, stay_fit_user):
        engine = FitnessPlanEngine()
        state = engine.initialize_plan(stay_fit_user, today=TODAY)
        edited = engine.update_distribution_entry(state, 0, MINUTES, 10)
        restored = engine.reset(edited)
        assert restored.targets == state.original_targets
        assert not restored.has_changes

    def test_custom_params(self, stay_fit_user):
        params = PlanParams(session_minutes=30, default_time_of_day="07:00")
        engine = FitnessPlanEngine(params)
        state = engine.build_schedule(engine.initialize_plan(stay_fit_user, today=TODAY))
        assert state.targets.weekly_workout_minutes == 120
        assert {item.time_of_day for item in state.schedule} == {"07:00"}

    def test_recommend_for_day_uses_schedule(self, stay_fit_user):
        engine = FitnessPlanEngine()
        state = engine.build_schedule(engine.initialize_plan(stay_fit_user, today=TODAY))
        monday = engine.recommend_for_day(state, DayOfWeek.MONDAY)
        wednesday = engine.recommend_for_day(state, DayOfWeek.WEDNESDAY)
        assert [r.id for r in monday] == ['up-power', 'low-strength']
        assert all(r.type in RECOVERY_TYPES for r in wednesday)

    def test_summary_text(self, stay_fit_user):
        engine = FitnessPlanEngine()
        state = engine.build_schedule(engine.initialize_plan(stay_fit_user, today=TODAY))
        text = engine.summarize(state)
        assert 'Weekly Schedule' in text
        assert '2476' in text


# =============================================================================
# Parameter Tests
# =============================================================================

class TestPlanParams:
    """Tests for plan parameter handling."""

    def test_defaults_valid(self):
        assert DEFAULT_PARAMS.validate() == (True, "Valid")

    def test_invalid_values(self):
        valid, message = PlanParams(default_time_of_day="25:00", session_minutes=0).validate()
        assert not valid
        assert 'HH:MM' in message
        assert 'Session' in message

    def test_from_dict_ignores_unknown_keys(self):
        params = PlanParams.from_dict({'session_minutes': 30, 'colour': 'red'})
        assert params.session_minutes == 30

    def test_save_load(self, tmp_path):
        path = tmp_path / "params.json"
        params = PlanParams(lose_weight_deficit=400.0, default_preferences=('yoga',))
        params.save(str(path))
        assert PlanParams.load(str(path)) == params
