"""
Plan Parameters: Tunable defaults for target and schedule generation.

Collects the fallback values and fixed defaults used across the equations
so a deployment can override them from a JSON file without touching code.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Tuple, List
import json


@dataclass(frozen=True)
class PlanParams:
    """
    Parameters for target computation, scheduling and recommendations.

    Defaults reproduce the values the product ships with.
    """

    # ═══════════════════════════════════════════════════════════════════════════
    # BIOMETRIC FALLBACKS
    # ═══════════════════════════════════════════════════════════════════════════

    fallback_weight_kg: float = 70.0
    fallback_height_cm: float = 170.0
    fallback_age: int = 25
    max_plausible_age: int = 120

    # ═══════════════════════════════════════════════════════════════════════════
    # CALORIE GOAL ADJUSTMENTS (kcal/day)
    # ═══════════════════════════════════════════════════════════════════════════

    lose_weight_deficit: float = 500.0
    build_muscle_surplus: float = 300.0

    # ═══════════════════════════════════════════════════════════════════════════
    # SESSIONS AND SCHEDULE
    # ═══════════════════════════════════════════════════════════════════════════

    session_minutes: int = 45
    default_time_of_day: str = "18:00"
    toggled_session_minutes: int = 45
    fallback_workout_type: str = "strength"
    default_preferences: Tuple[str, ...] = ("strength", "cardio")

    # ═══════════════════════════════════════════════════════════════════════════
    # RECOMMENDATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    recommendation_limit: int = 3
    mental_wellness_slots: int = 2

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary."""
        d = asdict(self)
        d['default_preferences'] = list(self.default_preferences)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'PlanParams':
        """Create parameters from dictionary, ignoring unknown keys."""
        known = {k: v for k, v in d.items() if k in cls.__dataclass_fields__}
        if 'default_preferences' in known:
            known['default_preferences'] = tuple(known['default_preferences'])
        return cls(**known)

    @classmethod
    def load(cls, path: str) -> 'PlanParams':
        """Load parameters from a JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def save(self, path: str):
        """Write parameters to a JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def validate(self) -> Tuple[bool, str]:
        """Validate parameter constraints."""
        issues: List[str] = []

        if self.fallback_weight_kg <= 0:
            issues.append("Fallback weight must be positive")
        if self.fallback_height_cm <= 0:
            issues.append("Fallback height must be positive")
        if not (0 < self.fallback_age <= self.max_plausible_age):
            issues.append("Fallback age must be in (0, max_plausible_age]")

        if self.lose_weight_deficit < 0 or self.build_muscle_surplus < 0:
            issues.append("Calorie adjustments are magnitudes and must be >= 0")

        if self.session_minutes <= 0 or self.toggled_session_minutes <= 0:
            issues.append("Session lengths must be positive")

        parts = self.default_time_of_day.split(':')
        if (len(parts) != 2 or not all(p.isdigit() for p in parts)
                or not (0 <= int(parts[0]) < 24 and 0 <= int(parts[1]) < 60)):
            issues.append("Default time of day must be HH:MM")

        if not self.default_preferences:
            issues.append("Default preferences must not be empty")

        if self.recommendation_limit < 0 or self.mental_wellness_slots < 0:
            issues.append("Recommendation counts must be >= 0")

        if issues:
            return False, "; ".join(issues)
        return True, "Valid"


DEFAULT_PARAMS = PlanParams()
