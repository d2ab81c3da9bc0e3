"""Property-based tests for input validation.

**Feature: discipline-tracking**
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from disciplog.models import EmotionTag, RuleCategory, TradeResult
from disciplog.validations import (
    JournalInput,
    PostSessionInput,
    PreSessionInput,
    RuleInput,
    TradeInput,
    normalize_pnl,
    sleep_rating_from_hours,
)


class TestSleepRating:
    """
    **Feature: discipline-tracking, Property 23: Sleep Buckets**

    *For any* number of hours the sleep rating is in 1..5 and never
    decreases with more sleep.
    """

    @pytest.mark.parametrize(
        "hours,rating",
        [(0, 1), (4.9, 1), (5, 2), (6.5, 3), (7, 4), (7.99, 4), (8, 5), (12, 5)],
    )
    def test_buckets(self, hours, rating):
        assert sleep_rating_from_hours(hours) == rating

    @given(
        a=st.floats(min_value=0, max_value=24, allow_nan=False),
        b=st.floats(min_value=0, max_value=24, allow_nan=False),
    )
    @settings(max_examples=100)
    def test_monotonic(self, a, b):
        low, high = sorted((a, b))

        assert 1 <= sleep_rating_from_hours(low) <= sleep_rating_from_hours(high) <= 5


class TestPnlNormalisation:
    """
    **Feature: discipline-tracking, Property 24: P&L Sign Convention**

    *For any* amount, losses are stored negative, wins positive and
    breakeven as 0.
    """

    @given(pnl=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False))
    @settings(max_examples=100)
    def test_signs(self, pnl):
        assert normalize_pnl(TradeResult.LOSS, pnl) <= 0
        assert normalize_pnl(TradeResult.WIN, pnl) >= 0
        assert normalize_pnl(TradeResult.BREAKEVEN, pnl) == 0.0

    def test_missing_pnl(self):
        assert normalize_pnl(TradeResult.WIN, None) is None
        assert normalize_pnl(TradeResult.BREAKEVEN, None) == 0.0


class TestInputLimits:
    """
    **Feature: discipline-tracking, Property 25: Form Limits**

    Values outside the form limits raise ValidationError.
    """

    def test_rule_name_stripped_and_required(self):
        assert RuleInput(name="  Stop loss ", category=RuleCategory.RISK).name == "Stop loss"
        with pytest.raises(ValidationError):
            RuleInput(name="   ", category=RuleCategory.RISK)
        with pytest.raises(ValidationError):
            RuleInput(name="x" * 101, category=RuleCategory.RISK)
        with pytest.raises(ValidationError):
            RuleInput(name="ok", description="x" * 501, category=RuleCategory.RISK)

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            RuleInput(name="ok", category="psychology")

    @pytest.mark.parametrize("field", ["sleep_rating", "stress_level", "focus_rating"])
    @pytest.mark.parametrize("value", [0, 6])
    def test_pre_session_ratings(self, field, value):
        values = {
            "sleep_rating": 3,
            "stress_level": 3,
            "focus_rating": 3,
            "max_trades": 5,
            "rules_confirmed": True,
        }
        values[field] = value

        with pytest.raises(ValidationError):
            PreSessionInput(**values)

    def test_pre_session_limits(self):
        base = {"sleep_rating": 3, "stress_level": 3, "focus_rating": 3, "rules_confirmed": True}

        with pytest.raises(ValidationError):
            PreSessionInput(**base, max_trades=0)
        with pytest.raises(ValidationError):
            PreSessionInput(**base, max_trades=101)
        with pytest.raises(ValidationError):
            PreSessionInput(**base, max_trades=5, max_loss=-1)
        with pytest.raises(ValidationError):
            PreSessionInput(**base, max_trades=5, wellness_notes="x" * 501)

    def test_pre_session_payload(self):
        payload = PreSessionInput(
            sleep_rating=4, stress_level=2, focus_rating=5, max_trades=3, rules_confirmed=True,
        ).to_payload()

        assert payload.model_dump(by_alias=True, exclude_none=True) == {
            "sleepRating": 4,
            "stressLevel": 2,
            "focusRating": 5,
            "maxTrades": 3,
            "rulesConfirmed": True,
        }

    def test_post_session_limits(self):
        with pytest.raises(ValidationError):
            PostSessionInput(plan_followed_rating=0, emotional_control_rating=3)
        with pytest.raises(ValidationError):
            PostSessionInput(plan_followed_rating=3, emotional_control_rating=3, tomorrow_focus="x" * 501)

        payload = PostSessionInput(plan_followed_rating=4, emotional_control_rating=2).to_payload()
        assert payload.plan_followed_rating == 4

    def test_trade_requires_pnl_unless_breakeven(self):
        with pytest.raises(ValidationError):
            TradeInput(result=TradeResult.WIN, emotion_tag=EmotionTag.CALM)

        trade = TradeInput(result=TradeResult.BREAKEVEN, emotion_tag=EmotionTag.CALM)
        assert trade.normalized_pnl == 0.0
        assert trade.rules_followed is True

    @pytest.mark.parametrize("pnl", [float("nan"), float("inf"), float("-inf")])
    def test_trade_rejects_non_finite_pnl(self, pnl):
        for result in (TradeResult.WIN, TradeResult.LOSS, TradeResult.BREAKEVEN):
            with pytest.raises(ValidationError):
                TradeInput(result=result, pnl=pnl, emotion_tag=EmotionTag.CALM)

    @pytest.mark.parametrize("max_loss", [float("nan"), float("inf")])
    def test_pre_session_rejects_non_finite_max_loss(self, max_loss):
        with pytest.raises(ValidationError):
            PreSessionInput(
                sleep_rating=3, stress_level=3, focus_rating=3, max_trades=5,
                max_loss=max_loss, rules_confirmed=True,
            )

    def test_trade_rules_followed(self):
        trade = TradeInput(
            result=TradeResult.LOSS, pnl=20, emotion_tag=EmotionTag.FOMO, broken_rule_ids=["r1"],
        )

        assert trade.rules_followed is False
        assert trade.normalized_pnl == -20.0

    def test_journal_limits(self):
        with pytest.raises(ValidationError):
            JournalInput(title="")
        with pytest.raises(ValidationError):
            JournalInput(title="x" * 201)
        assert JournalInput(title="Day one").content == ""
