"""Component health scoring."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from .models import PRIORITY_WEIGHTS, CategorizedIssue


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def issue_penalty(issues: Iterable[CategorizedIssue]) -> int:
    return sum(PRIORITY_WEIGHTS.get(issue.priority, 0) for issue in issues)


def health_score(
    issues: Iterable[CategorizedIssue], sub_scores: Sequence[Optional[float]] = ()
) -> int:
    """Fold a component's issues and sub-scores into one 0-100 score.

    The issue-penalized score (floored at 0) is averaged with each available
    sub-score in turn, so the order of ``sub_scores`` matters. Pass them as
    principle compliance, accessibility, then fixture coverage. ``None``
    entries are skipped.
    """
    score: float = max(0, 100 - issue_penalty(issues))
    for sub_score in sub_scores:
        if sub_score is None:
            continue
        score = (score + sub_score) / 2
    return round_half_up(min(100.0, max(0.0, score)))


__all__ = ["health_score", "issue_penalty", "round_half_up"]
