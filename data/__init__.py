"""Synthetic data generation utilities."""

from .synthetic import SyntheticUser, generate_user_profiles, generate_activity_log

__all__ = [
    'SyntheticUser',
    'generate_user_profiles',
    'generate_activity_log',
]
