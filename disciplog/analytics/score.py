"""Discipline score calculation.

The score rewards process rather than outcome. It is a weighted sum of
four 0-100 sub-scores:

- rules followed on the session's trades (40%)
- pre-session checklist completed, i.e. rules reviewed (20%)
- post-session reflection completed (20%)
- self-rated emotional control (20%)

Missing data never raises: a session without trades counts as fully
compliant and an unknown emotional-control rating counts as neutral (50).
"""

from typing import Iterable, Optional, Protocol

from disciplog.analytics.common import round_half_up
from disciplog.models import PostSessionData, PreSessionData
from disciplog.models.stats import ScoreBreakdown


DISCIPLINE_WEIGHTS = {
    "rules_followed": 0.4,
    "pre_session_complete": 0.2,
    "post_session_complete": 0.2,
    "emotional_control": 0.2,
}

NEUTRAL_EMOTIONAL_SCORE = 50.0


class HasRulesFollowed(Protocol):
    rules_followed: bool


def score_breakdown(
    pre_session: Optional[PreSessionData],
    post_session: Optional[PostSessionData],
    trades: Iterable[HasRulesFollowed],
) -> ScoreBreakdown:
    """Calculate the discipline score together with its sub-scores.

    Args:
        pre_session: Pre-session payload, or None if it is missing.
        post_session: Post-session payload, or None if it is missing.
        trades: All trades of the session; only ``rules_followed`` is read.

    Returns:
        ScoreBreakdown with every sub-score and the rounded final score.
    """
    total = 0
    followed = 0
    for trade in trades:
        total += 1
        if trade.rules_followed:
            followed += 1

    rules_score = (followed / total) * 100 if total > 0 else 100.0

    pre_session_score = 100.0 if pre_session is not None and pre_session.rules_confirmed else 0.0

    # Any rating counts: this measures that the reflection was done, not its content
    plan_rating = post_session.plan_followed_rating if post_session is not None else None
    post_session_score = 100.0 if plan_rating else 0.0

    emotional_rating = post_session.emotional_control_rating if post_session is not None else None
    if emotional_rating:
        emotional_score = (emotional_rating / 5) * 100
    else:
        emotional_score = NEUTRAL_EMOTIONAL_SCORE

    weighted_total = (
        rules_score * DISCIPLINE_WEIGHTS["rules_followed"]
        + pre_session_score * DISCIPLINE_WEIGHTS["pre_session_complete"]
        + post_session_score * DISCIPLINE_WEIGHTS["post_session_complete"]
        + emotional_score * DISCIPLINE_WEIGHTS["emotional_control"]
    )

    return ScoreBreakdown(
        rules_score=rules_score,
        pre_session_score=pre_session_score,
        post_session_score=post_session_score,
        emotional_score=emotional_score,
        weighted_total=weighted_total,
        score=round_half_up(weighted_total),
    )


def calculate_discipline_score(
    pre_session: Optional[PreSessionData],
    post_session: Optional[PostSessionData],
    trades: Iterable[HasRulesFollowed],
) -> int:
    """Calculate the 0-100 discipline score of a session.

    Args:
        pre_session: Pre-session payload, or None if it is missing.
        post_session: Post-session payload, or None if it is missing.
        trades: All trades of the session.

    Returns:
        Integer discipline score.
    """
    return score_breakdown(pre_session, post_session, trades).score
