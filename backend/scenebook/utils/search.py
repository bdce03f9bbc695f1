"""
Predicate helpers for free-text and bucketed search.
"""
from typing import Dict, Tuple

from sqlalchemy import String, and_, cast, func


def icontains(column, term: str):
    """Case-insensitive substring match; LIKE wildcards in `term` are literal."""
    return func.lower(column).contains(term.strip().lower(), autoescape=True)


def icontains_number(column, term: str):
    """Substring match on the decimal text of an integer column."""
    return cast(column, String).contains(term.strip(), autoescape=True)


def in_range(column, bounds: Tuple[int, int]):
    low, high = bounds
    return and_(column >= low, column <= high)


def overlaps(lower_column, upper_column, bounds: Tuple[int, int]):
    """Rows whose [lower, upper] interval intersects the bucket."""
    low, high = bounds
    return and_(lower_column <= high, upper_column >= low)


# Bucket tables: label -> inclusive (min, max)
AGE_BUCKETS: Dict[str, Tuple[int, int]] = {
    "< 10": (0, 10),
    "10 - 20": (10, 20),
    "20 - 30": (20, 30),
    "30 - 40": (30, 40),
    "40 - 50": (40, 50),
    "50 - 60": (50, 60),
    "60 - 70": (60, 70),
    "70 - 80": (70, 80),
    "80 - 90": (80, 90),
    "> 90": (90, 125),
}

SCREEN_TIME_BUCKETS: Dict[str, Tuple[int, int]] = {
    "< 5 min": (0, 5),
    "5 - 10 min": (5, 10),
    "10 - 20 min": (10, 20),
    "20 - 40 min": (20, 40),
    "40 - 80 min": (40, 80),
    "> 80 min": (80, 300),
}

SCENE_LENGTH_BUCKETS: Dict[str, Tuple[int, int]] = {
    "< 1 min": (0, 1),
    "1 - 3 min": (1, 3),
    "3 - 5 min": (3, 5),
    "5 - 10 min": (5, 10),
    "10 - 20 min": (10, 20),
    "> 20 min": (20, 120),
}

SEQUENCE_LENGTH_BUCKETS: Dict[str, Tuple[int, int]] = {
    "< 10 seconds": (0, 10),
    "10 - 20 seconds": (10, 20),
    "20 - 30 seconds": (20, 30),
    "30 - 40 seconds": (30, 40),
    "40 - 50 seconds": (40, 50),
    "> 50 seconds": (50, 6000),
}

EXTRAS_BUCKETS: Dict[str, Tuple[int, int]] = {
    "< 5": (0, 5),
    "5 - 10": (5, 10),
    "10 - 20": (10, 20),
    "20 - 40": (20, 40),
    "40 - 80": (40, 80),
    "> 80": (80, 10000),
}
