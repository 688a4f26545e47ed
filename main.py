#!/usr/bin/env python3
"""
Fitness Target Engine - CLI Entry Point

Usage:
    python main.py targets --weight 70 --height 170 --birthdate 1990-01-01 ...
    python main.py schedule [same profile options] [--minutes M] [--sessions S]
    python main.py recommend --types strength cardio [--weight W] [--rest-day]
    python main.py estimate TYPE MINUTES [--weight W]
    python main.py backtest [--profiles N] [--seed S] [--report FILE]
    python main.py test

Every command accepts --params FILE to load PlanParams from JSON.
"""

import sys
import argparse
import json
from datetime import date

from fitness_engine.energy import ActivityLevel, BiometricInput, FitnessGoal
from fitness_engine.fitness_plan_engine import FitnessPlanEngine
from fitness_engine.plan_params import PlanParams
from fitness_engine.workout_splits import MINUTES, SESSIONS
from data.synthetic import generate_user_profiles
from simulation.engine import SimulationEngine, aggregate_results
from analysis.reports import generate_plan_report, generate_backtest_report, save_report


def load_params(path: str = None) -> PlanParams:
    """Load and validate plan parameters, exiting on invalid values."""
    params = PlanParams.load(path) if path else PlanParams()
    valid, message = params.validate()
    if not valid:
        print(f"Invalid parameters: {message}")
        sys.exit(2)
    return params


def biometrics_from_args(args) -> BiometricInput:
    """Build a snapshot from the profile options, like the onboarding form."""
    return BiometricInput.from_onboarding({
        'weight': args.weight,
        'height': args.height,
        'birthdate': args.birthdate,
        'gender': args.gender,
        'activityLevel': args.activity_level,
        'fitnessGoal': args.goal,
        'workoutPreferences': args.preferences,
    })


def run_targets(args):
    """Compute and print targets for one profile."""
    engine = FitnessPlanEngine(load_params(args.params))
    targets = engine.compute_fitness_targets(biometrics_from_args(args), today=args.today)
    print(json.dumps(targets.to_dict(), indent=2))
    return targets


def run_schedule(args):
    """Compute targets, apply optional edits and print the plan report."""
    engine = FitnessPlanEngine(load_params(args.params), verbose=args.verbose)
    biometrics = biometrics_from_args(args)
    state = engine.initialize_plan(biometrics, today=args.today)

    if args.minutes is not None:
        state = engine.update_total(state, MINUTES, args.minutes)
    if args.sessions is not None:
        state = engine.update_total(state, SESSIONS, args.sessions)

    state = engine.build_schedule(state)
    if args.time:
        state = engine.apply_time_to_all(state, args.time)

    if args.json:
        print(json.dumps(state.to_dict(), indent=2))
    else:
        print(generate_plan_report(state))
    return state


def run_recommend(args):
    """Print recommended workouts for today."""
    params = load_params(args.params)
    engine = FitnessPlanEngine(params)
    recs = engine.recommend_workouts(
        args.types or list(params.default_preferences),
        args.weight,
        limit=args.limit,
        is_rest_day=args.rest_day,
    )
    print(json.dumps([r.to_dict() for r in recs], indent=2))
    return recs


def run_estimate(args):
    """Print calorie and step estimates for one activity."""
    engine = FitnessPlanEngine(load_params(args.params))
    result = {
        'type': args.type,
        'duration_minutes': args.minutes,
        'weight_kg': args.weight,
        'calories': engine.estimate_activity_calories(args.type, args.minutes, args.weight),
        'steps': engine.estimate_steps(args.type, args.minutes),
    }
    print(json.dumps(result, indent=2))
    return result


def run_backtest(n_profiles: int = 20, seed: int = 42, params_path: str = None,
                 report_path: str = None):
    """Run the invariant backtest over synthetic users."""
    print(f"Running backtest with {n_profiles} profiles...")

    params = load_params(params_path)
    profiles = generate_user_profiles(n_profiles, seed=seed)
    engine = SimulationEngine(params, verbose=True)

    results = engine.run_batch(profiles, seed=seed)

    report = generate_backtest_report(results, params)
    print(report)
    if report_path:
        save_report(report, report_path)

    agg = aggregate_results(results)
    if agg and agg['n_passed'] < agg['n_simulations']:
        sys.exit(1)

    return results


def run_tests():
    """Run all module smoke tests."""
    print("Running tests...\n")

    from fitness_engine import (
        compute_fitness_targets,
        estimate_activity_calories,
        estimate_steps,
        generate_weekly_schedule,
        recommend_workouts,
        validate_targets,
    )

    # Energy and distribution
    print("Testing target computation...")
    snapshot = BiometricInput(
        weight_kg=70, height_cm=170, birthdate="1990-01-01", gender="male",
        activity_level="moderately_active", fitness_goal="StayFit",
        workout_preferences=("strength", "cardio"),
    )
    targets = compute_fitness_targets(snapshot, today=date(2024, 6, 1))
    assert targets.weekly_workout_frequency_target == 4, "Moderately active should be 4x"
    assert validate_targets(targets)[0], "Distribution must sum to the weekly totals"

    engine = FitnessPlanEngine()
    edited = engine.update_total(engine.initialize_plan(snapshot, today=date(2024, 6, 1)), MINUTES, 200)
    edited = engine.update_total(edited, SESSIONS, 5)
    assert validate_targets(edited.targets)[0], "Edits must keep both sums"
    print(f"  Targets test passed: {targets.daily_move_target} kcal/day")

    # Schedule
    print("\nTesting schedule generation...")
    schedule = generate_weekly_schedule(targets)
    assert len(schedule) == 7, "Schedule should have 7 days"
    assert sum(1 for s in schedule if not s.is_rest_day) == 4, "Should have 4 training days"
    print("  Schedule test passed")

    # Estimators
    print("\nTesting estimators...")
    assert estimate_activity_calories('strength', 60, 70) == 420
    assert estimate_activity_calories('hiit', 20, 70) == 257
    assert estimate_steps('walking', 10) == 1000
    print("  Estimator tests passed")

    # Recommendations
    print("\nTesting recommendations...")
    recs = recommend_workouts(['strength'], 70, limit=3, is_rest_day=True)
    assert all(r.type != 'strength' for r in recs), "No strength on rest days"
    print(f"  Recommendation test passed: {[r.id for r in recs]}")

    # Simulation
    print("\nTesting simulation engine...")
    profiles = generate_user_profiles(5, seed=42)
    results = SimulationEngine().run_batch(profiles, seed=42)
    assert len(results) == 5, "Should have 5 results"
    assert all(r.passed for r in results), "All invariants should hold"
    print(f"  Simulation test passed: {len(results)} users simulated")

    print("\n" + "="*50)
    print("ALL TESTS PASSED!")
    print("="*50)


def _add_profile_arguments(parser):
    parser.add_argument('--weight', default='', help='Weight in kg')
    parser.add_argument('--height', default='', help='Height in cm')
    parser.add_argument('--birthdate', default='', help='Birthdate (YYYY-MM-DD)')
    parser.add_argument('--gender', default='', help="Gender ('male' or other)")
    parser.add_argument('--activity-level', default=ActivityLevel.SEDENTARY.value,
                        help=f"One of: {', '.join(l.value for l in ActivityLevel)}")
    parser.add_argument('--goal', default=FitnessGoal.STAY_FIT.value,
                        help=f"One of: {', '.join(g.value for g in FitnessGoal)}")
    parser.add_argument('--preferences', nargs='*', default=[],
                        help='Preferred workout types, in order')
    parser.add_argument('--today', type=date.fromisoformat, default=None,
                        help='Reference date for age (YYYY-MM-DD)')


def main():
    parser = argparse.ArgumentParser(description='Fitness Target Engine')
    parser.add_argument('--params', default=None, help='PlanParams JSON file')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Targets command
    tg_parser = subparsers.add_parser('targets', help='Compute fitness targets')
    _add_profile_arguments(tg_parser)

    # Schedule command
    sc_parser = subparsers.add_parser('schedule', help='Build a weekly plan')
    _add_profile_arguments(sc_parser)
    sc_parser.add_argument('--minutes', type=int, default=None, help='Edit weekly minutes')
    sc_parser.add_argument('--sessions', type=int, default=None, help='Edit weekly sessions')
    sc_parser.add_argument('--time', default=None, help='Time of day for all sessions')
    sc_parser.add_argument('--json', action='store_true', help='Print JSON state')
    sc_parser.add_argument('--verbose', action='store_true', help='Print progress')

    # Recommend command
    rc_parser = subparsers.add_parser('recommend', help='Recommend workouts for today')
    rc_parser.add_argument('--types', nargs='*', default=[], help='Preferred workout types')
    rc_parser.add_argument('--weight', type=float, default=70.0, help='Weight in kg')
    rc_parser.add_argument('--limit', type=int, default=None, help='Maximum results')
    rc_parser.add_argument('--rest-day', action='store_true', help='Today is a rest day')

    # Estimate command
    es_parser = subparsers.add_parser('estimate', help='Estimate calories and steps')
    es_parser.add_argument('type', help='Activity type')
    es_parser.add_argument('minutes', type=float, help='Duration in minutes')
    es_parser.add_argument('--weight', type=float, default=70.0, help='Weight in kg')

    # Backtest command
    bt_parser = subparsers.add_parser('backtest', help='Run invariant backtest')
    bt_parser.add_argument('--profiles', type=int, default=20, help='Number of profiles')
    bt_parser.add_argument('--seed', type=int, default=42, help='Random seed')
    bt_parser.add_argument('--report', default=None, help='Save report to file')

    # Test command
    subparsers.add_parser('test', help='Run tests')

    args = parser.parse_args()

    if args.command == 'targets':
        run_targets(args)
    elif args.command == 'schedule':
        run_schedule(args)
    elif args.command == 'recommend':
        run_recommend(args)
    elif args.command == 'estimate':
        run_estimate(args)
    elif args.command == 'backtest':
        run_backtest(args.profiles, args.seed, args.params, args.report)
    elif args.command == 'test':
        run_tests()
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
