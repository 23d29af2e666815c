# newsroom/services/ranking.py
"""
Scoring for trending and search.

Scores are recomputed on every request and never stored. Everything here is
a pure function of its arguments so it can be exercised without a database:

    engagement_score(views=120, likes=4, saves=1)                 -> 131
    relevance_score("rust", title="Learning Rust", content="Why rust") -> 13.0
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta


@dataclass(frozen=True)
class ScoreWeights:
    """Weights for both scores; the defaults are the published formula."""

    # engagement
    view: float = 1
    like: float = 2
    save: float = 3

    # relevance
    title_match: float = 10
    summary_match: float = 5
    content_match: float = 3
    tag_match: float = 2
    views_per_point: float = 1000
    relevance_like: float = 0.5


DEFAULT_WEIGHTS = ScoreWeights()

DATE_RANGES = ("today", "week", "month", "year")


def engagement_score(views: int, likes: int, saves: int, weights: ScoreWeights = DEFAULT_WEIGHTS):
    return views * weights.view + likes * weights.like + saves * weights.save


def relevance_score(
    query: str,
    title: str,
    content: str,
    summary: Optional[str] = None,
    tag_names: Iterable[str] = (),
    views: int = 0,
    likes: int = 0,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Case-insensitive substring matching, no tokenizing.
    Field matches add fixed points; views and likes add a continuous term.
    """
    needle = query.lower()
    score = 0.0

    if needle in title.lower():
        score += weights.title_match
    if summary and needle in summary.lower():
        score += weights.summary_match
    if needle in content.lower():
        score += weights.content_match
    if any(needle in name.lower() for name in tag_names):
        score += weights.tag_match

    score += views / weights.views_per_point
    score += likes * weights.relevance_like
    return score


def date_range_start(date_range: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Lower bound on createdAt for a named range.
    Returns None when the range is absent or unrecognized.
    """
    if date_range not in DATE_RANGES:
        return None

    now = now or datetime.now(timezone.utc)
    if date_range == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_range == "week":
        return now - timedelta(days=7)
    if date_range == "month":
        return now - relativedelta(months=1)
    return now - relativedelta(years=1)


def trending_window_start(days: int, now: Optional[datetime] = None) -> datetime:
    return (now or datetime.now(timezone.utc)) - timedelta(days=days)


def rank_by_relevance(items: list, key: str = "relevanceScore") -> list:
    """Sort one page of serialized articles by score, highest first (stable)."""
    return sorted(items, key=lambda item: item[key], reverse=True)
