"""Mock historical series.

The dashboard shows eight months of revenue/expenses next to the projection
and nudges them on a timer so the charts look live. None of this feeds the
projection.
"""
import random
from typing import List, Optional

from cfo_helper.simulation.schemas import HistoricalPoint


REVENUE_JITTER = 125000
EXPENSE_JITTER = 75000

DEFAULT_HISTORY = [
    ("Jan", 1250000, 875000),
    ("Feb", 1300000, 900000),
    ("Mar", 1200000, 850000),
    ("Apr", 1375000, 950000),
    ("May", 1450000, 1000000),
    ("Jun", 1550000, 1050000),
    ("Jul", 1600000, 1100000),
    ("Aug", 1750000, 1200000),
]


def default_history() -> List[HistoricalPoint]:
    """Fresh copy of the seed series."""
    return [
        HistoricalPoint(month=month, revenue=revenue, expenses=expenses)
        for month, revenue, expenses in DEFAULT_HISTORY
    ]


def perturb_series(
    series: List[HistoricalPoint],
    rng: Optional[random.Random] = None,
) -> List[HistoricalPoint]:
    """Return a new series with every point randomly nudged, floored at zero."""
    rng = rng or random.Random()
    return [
        HistoricalPoint(
            month=point.month,
            revenue=max(0.0, point.revenue + (rng.random() - 0.5) * REVENUE_JITTER),
            expenses=max(0.0, point.expenses + (rng.random() - 0.5) * EXPENSE_JITTER),
        )
        for point in series
    ]
