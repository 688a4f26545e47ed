"""
Activity summaries for the dashboard.

Provides:
- Workout distribution slices (count, percentage, colour, pie angles)
- Per-day totals for the trailing week
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Dict, Any, Iterable, Optional

import numpy as np
import pandas as pd

from fitness_engine.metrics import ActivityLogEntry
from fitness_engine.rounding import round_half_up


DISTRIBUTION_COLORS = ('#a3e635', '#60a5fa', '#f97316', '#ec4899', '#8b5cf6', '#06b6d4')
FULL_CIRCLE = 360.0
FULL_SLICE_THRESHOLD = 359.999
WEEK_DAYS = 7

ACTIVITY_COLUMNS = ['type', 'date', 'minutes', 'calories', 'steps']


@dataclass(frozen=True)
class DistributionSlice:
    """One workout type's share of logged activities."""
    type: str
    count: int
    percentage: int
    color: str
    start_angle: float
    end_angle: float
    is_full_slice: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'type': self.type,
            'count': self.count,
            'percentage': self.percentage,
            'color': self.color,
            'startAngle': self.start_angle,
            'endAngle': self.end_angle,
            'isFullSlice': self.is_full_slice,
        }


def activities_to_dataframe(entries: Iterable[ActivityLogEntry]) -> pd.DataFrame:
    """
    Tabulate activity entries.

    Returns:
        DataFrame with columns type, date, minutes, calories, steps
    """
    rows = [
        {
            'type': e.type,
            'date': e.date,
            'minutes': e.duration_minutes,
            'calories': e.estimated_calories,
            'steps': e.estimated_steps,
        }
        for e in entries
    ]
    return pd.DataFrame(rows, columns=ACTIVITY_COLUMNS)


def build_workout_distribution(entries: Iterable[ActivityLogEntry]) -> Dict[str, Any]:
    """
    Group logged activities by type for the distribution chart.

    Types keep first-seen order. Colours cycle through the palette.
    A type holding the whole circle is flagged so it renders as a full
    disc rather than a degenerate arc.

    Args:
        entries: Logged activities

    Returns:
        Dictionary with 'total' (activity count) and 'slices'
    """
    df = activities_to_dataframe(entries)
    total = len(df)
    if total == 0:
        return {'total': 0, 'slices': []}

    counts = df.groupby('type', sort=False).size()
    angles = counts.to_numpy() / total * FULL_CIRCLE
    ends = np.cumsum(angles)
    starts = ends - angles

    slices = []
    for i, (activity_type, count) in enumerate(counts.items()):
        slices.append(DistributionSlice(
            type=activity_type,
            count=int(count),
            percentage=round_half_up(count / total * 100),
            color=DISTRIBUTION_COLORS[i % len(DISTRIBUTION_COLORS)],
            start_angle=float(starts[i]),
            end_angle=float(ends[i]),
            is_full_slice=bool(angles[i] >= FULL_SLICE_THRESHOLD),
        ))

    return {'total': total, 'slices': slices}


def weekly_activity_totals(
    entries: Iterable[ActivityLogEntry],
    end_date: Optional[date] = None
) -> pd.DataFrame:
    """
    Per-day minutes, calories and steps for the 7 days ending on end_date.

    Entries without a date or outside the window are ignored; days without
    activity are zero.

    Args:
        entries: Logged activities
        end_date: Last day of the window (default: today)

    Returns:
        DataFrame indexed by date (oldest first) with columns
        day, minutes, calories, steps
    """
    end = pd.Timestamp(end_date or date.today()).normalize()
    days = pd.date_range(end=end, periods=WEEK_DAYS, freq='D')

    df = activities_to_dataframe(entries).dropna(subset=['date'])
    df = df.assign(date=pd.to_datetime(df['date']).dt.normalize())

    totals = (
        df.groupby('date')[['minutes', 'calories', 'steps']]
        .sum()
        .reindex(days, fill_value=0)
    )
    totals.index.name = 'date'
    totals.insert(0, 'day', [d.strftime('%a') for d in totals.index])
    return totals


if __name__ == '__main__':
    print("Testing Activity Summary...")
    print("=" * 60)

    today = date(2024, 3, 10)
    log = [
        ActivityLogEntry('strength', 45, 70, date=date(2024, 3, 4)),
        ActivityLogEntry('cardio', 30, 70, date=date(2024, 3, 6)),
        ActivityLogEntry('strength', 50, 70, date=date(2024, 3, 8)),
        ActivityLogEntry('yoga', 40, 70, date=date(2024, 3, 10)),
    ]

    summary = build_workout_distribution(log)
    for s in summary['slices']:
        print(f"  {s.type:10s} {s.count} ({s.percentage}%) {s.color} "
              f"{s.start_angle:6.1f}-{s.end_angle:6.1f}")

    print()
    print(weekly_activity_totals(log, today))
