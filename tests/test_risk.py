"""Property-based tests for risk multiple resolution."""

from datetime import datetime

from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.analytics.risk import matching_rule, resolve_risk_multiple
from tradejournal.models import NoTradeDay, Outcome, TakenTrade

distances = st.one_of(
    st.none(),
    st.floats(min_value=0.01, max_value=1000.0, allow_nan=False, allow_infinity=False),
)
overrides = st.one_of(
    st.none(),
    st.floats(min_value=-50.0, max_value=50.0, allow_nan=False, allow_infinity=False),
)


def trade(**fields) -> TakenTrade:
    fields.setdefault("id", "t1")
    fields.setdefault("date", datetime(2024, 6, 3))
    return TakenTrade(**fields)


class TestStopLossIsAlwaysMinusOne:
    """
    *For any* stop loss record, the risk multiple is exactly -1,
    whatever override or sizing it carries.
    """

    @given(stop=distances, target=distances, override=overrides)
    @settings(max_examples=100)
    def test_stop_loss_resolves_to_minus_one(self, stop, target, override):
        record = trade(
            outcome=Outcome.STOP_LOSS,
            stop_loss_distance=stop,
            take_profit_distance=target,
            realized_risk_multiple=override,
        )

        assert resolve_risk_multiple(record) == -1

    def test_override_ignored_for_stop_loss(self):
        record = trade(outcome=Outcome.STOP_LOSS, realized_risk_multiple=3)

        assert resolve_risk_multiple(record) == -1
        assert matching_rule(record) == "override"


class TestRulePrecedence:
    """Rules apply in order: override, target sizing, stop loss, zero."""

    @given(stop=distances, target=distances, override=st.floats(
        min_value=-50.0, max_value=50.0, allow_nan=False, allow_infinity=False,
    ))
    @settings(max_examples=100)
    def test_override_wins_for_take_profit(self, stop, target, override):
        record = trade(
            outcome=Outcome.TAKE_PROFIT,
            stop_loss_distance=stop,
            take_profit_distance=target,
            realized_risk_multiple=override,
        )

        assert resolve_risk_multiple(record) == override

    def test_override_applies_to_break_even(self):
        record = trade(outcome=Outcome.BREAK_EVEN, realized_risk_multiple=0.25)

        assert resolve_risk_multiple(record) == 0.25

    def test_take_profit_uses_sizing_ratio(self):
        record = trade(
            outcome=Outcome.TAKE_PROFIT, stop_loss_distance=10, take_profit_distance=20,
        )

        assert resolve_risk_multiple(record) == 2.0
        assert matching_rule(record) == "target_sizing"

    def test_take_profit_without_stop_is_zero(self):
        record = trade(outcome=Outcome.TAKE_PROFIT, take_profit_distance=20)

        assert resolve_risk_multiple(record) == 0
        assert matching_rule(record) is None

    def test_take_profit_without_target_is_zero(self):
        record = trade(outcome=Outcome.TAKE_PROFIT, stop_loss_distance=10)

        assert resolve_risk_multiple(record) == 0

    def test_break_even_sizing_ignored(self):
        record = trade(
            outcome=Outcome.BREAK_EVEN, stop_loss_distance=10, take_profit_distance=20,
        )

        assert resolve_risk_multiple(record) == 0

    def test_no_trade_day_is_zero(self):
        record = NoTradeDay(id="n1", date=datetime(2024, 6, 5))

        assert resolve_risk_multiple(record) == 0


class TestResolverIsTotal:
    """*For any* taken trade, the resolver returns a finite number."""

    @given(
        outcome=st.sampled_from([Outcome.TAKE_PROFIT, Outcome.STOP_LOSS, Outcome.BREAK_EVEN]),
        stop=distances,
        target=distances,
        override=overrides,
    )
    @settings(max_examples=100)
    def test_always_a_float(self, outcome, stop, target, override):
        record = trade(
            outcome=outcome,
            stop_loss_distance=stop,
            take_profit_distance=target,
            realized_risk_multiple=override,
        )

        result = resolve_risk_multiple(record)

        assert isinstance(result, float)
        assert result == result  # not NaN
