"""Property-based tests for the discipline score.

**Feature: discipline-tracking**
"""

from datetime import datetime

from hypothesis import given, settings
from hypothesis import strategies as st

from disciplog.analytics import calculate_discipline_score, score_breakdown
from disciplog.analytics.common import round_half_up
from disciplog.models import EmotionTag, PostSessionData, PreSessionData, Trade, TradeResult


def make_trade(number: int, rules_followed: bool = True) -> Trade:
    return Trade(
        id=f"t{number}",
        session_id="s1",
        user_id="u1",
        trade_number=number,
        result=TradeResult.WIN,
        pnl=10.0,
        rules_followed=rules_followed,
        broken_rule_ids=[] if rules_followed else ["r1"],
        emotion_tag=EmotionTag.CALM,
        logged_at=datetime(2026, 10, 1, 10, 0),
    )


class TestDisciplineScoreExamples:
    """
    **Feature: discipline-tracking, Property 1: Weighted Discipline Score**

    The score is 40% rules followed, 20% pre-session check, 20% reflection
    and 20% emotional control, rounded half up.
    """

    def test_two_of_three_trades_followed(self):
        pre = PreSessionData(rules_confirmed=True)
        post = PostSessionData(plan_followed_rating=5, emotional_control_rating=5)
        trades = [make_trade(1), make_trade(2), make_trade(3, rules_followed=False)]

        breakdown = score_breakdown(pre, post, trades)

        assert round(breakdown.rules_score, 2) == 66.67
        assert breakdown.pre_session_score == 100
        assert breakdown.post_session_score == 100
        assert breakdown.emotional_score == 100
        assert round(breakdown.weighted_total, 2) == 86.67
        assert breakdown.score == 87

    def test_empty_session_without_reflection(self):
        pre = PreSessionData(rules_confirmed=False)

        assert calculate_discipline_score(pre, None, []) == 50

    def test_missing_payloads_do_not_raise(self):
        breakdown = score_breakdown(None, None, [])

        assert breakdown.rules_score == 100
        assert breakdown.pre_session_score == 0
        assert breakdown.post_session_score == 0
        assert breakdown.emotional_score == 50
        assert breakdown.score == 50

    def test_zero_emotional_rating_counts_as_neutral(self):
        post = PostSessionData(plan_followed_rating=3, emotional_control_rating=0)

        assert score_breakdown(None, post, []).emotional_score == 50

    def test_payloads_read_from_camel_case(self):
        pre = PreSessionData.model_validate({"rulesConfirmed": True, "sleepRating": 4})
        post = PostSessionData.model_validate(
            {"planFollowedRating": 2, "emotionalControlRating": 1, "mood": "tired"}
        )

        # 40 + 20 + 20 + 4
        assert calculate_discipline_score(pre, post, []) == 84

    def test_half_rounds_up(self):
        # 1 of 16 followed: 2.5 + 0 + 0 + 10
        trades = [make_trade(i, rules_followed=(i == 1)) for i in range(1, 17)]

        assert score_breakdown(None, None, trades).weighted_total == 12.5
        assert calculate_discipline_score(None, None, trades) == 13

    def test_round_half_up_helper(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(86.666) == 87
        assert round_half_up(0.49) == 0


class TestDisciplineScoreBounds:
    """
    **Feature: discipline-tracking, Property 2: Score Bounds**

    *For any* combination of inputs the score is an integer in 0..100.
    """

    @given(
        followed=st.lists(st.booleans(), max_size=30),
        confirmed=st.one_of(st.none(), st.booleans()),
        plan=st.one_of(st.none(), st.integers(min_value=1, max_value=5)),
        emotional=st.one_of(st.none(), st.integers(min_value=1, max_value=5)),
        has_post=st.booleans(),
    )
    @settings(max_examples=200)
    def test_score_in_range(self, followed, confirmed, plan, emotional, has_post):
        trades = [make_trade(i + 1, rules_followed=f) for i, f in enumerate(followed)]
        pre = PreSessionData(rules_confirmed=confirmed)
        post = (
            PostSessionData(plan_followed_rating=plan, emotional_control_rating=emotional)
            if has_post
            else None
        )

        score = calculate_discipline_score(pre, post, trades)

        assert isinstance(score, int)
        assert 0 <= score <= 100

    @given(followed=st.lists(st.booleans(), min_size=1, max_size=30))
    @settings(max_examples=100)
    def test_rules_component_is_share_followed(self, followed):
        trades = [make_trade(i + 1, rules_followed=f) for i, f in enumerate(followed)]

        breakdown = score_breakdown(None, None, trades)

        assert breakdown.rules_score == sum(followed) / len(followed) * 100

    @given(followed=st.lists(st.booleans(), max_size=20))
    @settings(max_examples=50)
    def test_perfect_session_scores_at_least_rules_share(self, followed):
        trades = [make_trade(i + 1, rules_followed=f) for i, f in enumerate(followed)]
        pre = PreSessionData(rules_confirmed=True)
        post = PostSessionData(plan_followed_rating=5, emotional_control_rating=5)

        score = calculate_discipline_score(pre, post, trades)

        assert score >= 60
        if all(followed):
            assert score == 100
