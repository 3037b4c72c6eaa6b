import numpy as np
import pandas as pd
import pytest

from histvar.config import VarSettings
from histvar.errors import (
    DuplicateTradeError,
    EmptyPortfolioError,
    InsufficientDataError,
    InvalidConfidenceLevelError,
    MisalignedPortfolioError,
    MissingDataError,
    NonFiniteDataError,
)
from histvar.portfolio import Portfolio, Trade, aggregate_pnl
from histvar.var import HistoricalVarEngine
from pnl_samples import SCENARIO_PNL, linear_pnl, mirrored_pnl


def test_aggregate_sums_period_by_period():
    combined = aggregate_pnl([[1.0, 2.0, 3.0], [10.0, -20.0, 30.0], [0.5, 0.5, -0.5]])
    assert combined.tolist() == [11.5, -17.5, 32.5]


def test_aggregate_matches_sequential_summation():
    trades = [[0.1, 0.2, 0.3], [0.2, 0.1, 0.7], [0.3, 0.3, 0.1]]
    expected = []
    for i in range(3):
        total = 0.0
        for trade in trades:
            total += trade[i]
        expected.append(total)
    assert aggregate_pnl(trades).tolist() == expected


def test_aggregate_reads_dataframe_columns():
    frame = pd.DataFrame({"T1": [1.0, 2.0], "T2": [3.0, 4.0]})
    assert aggregate_pnl(frame).tolist() == [4.0, 6.0]


def test_aggregate_does_not_mutate_inputs():
    first = np.array([1.0, 2.0, 3.0])
    second = [4.0, 5.0, 6.0]
    aggregate_pnl([first, second])
    assert first.tolist() == [1.0, 2.0, 3.0]
    assert second == [4.0, 5.0, 6.0]


@pytest.mark.parametrize("trades", [[], None, pd.DataFrame()])
def test_empty_portfolio(engine, trades):
    with pytest.raises(EmptyPortfolioError, match="Portfolio must contain at least one trade"):
        engine.calculate_portfolio_var(trades, 0.95)


def test_misaligned_portfolio(engine):
    with pytest.raises(
        MisalignedPortfolioError,
        match="All trades must have the same number of data points",
    ) as info:
        engine.calculate_portfolio_var([linear_pnl(6), linear_pnl(7)], 0.95)
    assert info.value.expected == 6
    assert info.value.actual == 7
    assert info.value.index == 1


def test_portfolio_errors_precede_confidence_check(engine):
    with pytest.raises(MisalignedPortfolioError):
        engine.calculate_portfolio_var([linear_pnl(6), linear_pnl(7)], 1.5)
    with pytest.raises(EmptyPortfolioError):
        engine.calculate_portfolio_var([], 0.0)


def test_portfolio_checks_confidence_after_aggregation(engine):
    with pytest.raises(InvalidConfidenceLevelError):
        engine.calculate_portfolio_var([linear_pnl(10), linear_pnl(10)], 1.0)


def test_missing_or_malformed_trade(engine):
    with pytest.raises(MissingDataError):
        engine.calculate_portfolio_var([linear_pnl(10), None], 0.95)
    with pytest.raises(NonFiniteDataError):
        engine.calculate_portfolio_var([linear_pnl(10), [[1.0, 2.0]] * 5], 0.95)
    with pytest.raises(NonFiniteDataError):
        engine.calculate_portfolio_var([[1.0, float("nan"), 3.0, 4.0, 5.0]], 0.95)


def test_trades_of_zero_periods_are_missing_data(engine):
    with pytest.raises(MissingDataError):
        engine.calculate_portfolio_var([[], []], 0.95)


def test_only_aggregate_length_checked_against_minimum(engine):
    with pytest.raises(InsufficientDataError, match="Need at least 5 data points"):
        engine.calculate_portfolio_var([[1.0, 2.0, 3.0], [1.0, 2.0, 3.0]], 0.95)
    assert engine.calculate_portfolio_var([linear_pnl(5), linear_pnl(5)], 0.95) >= 0


def test_single_trade_portfolio_equals_trade_var(engine):
    assert engine.calculate_portfolio_var([SCENARIO_PNL], 0.95) == engine.calculate_trade_var(
        SCENARIO_PNL, 0.95
    )


def test_offsetting_trades_fully_diversify(engine):
    trade = linear_pnl(50)
    hedge = [-x for x in trade]
    portfolio_var = engine.calculate_portfolio_var([trade, hedge], 0.95)
    assert portfolio_var == 0.0
    assert portfolio_var <= engine.calculate_trade_var(trade, 0.95) + engine.calculate_trade_var(
        hedge, 0.95
    )


def test_negatively_correlated_trades_diversify(engine):
    trade1 = linear_pnl(50)
    trade2 = mirrored_pnl(50)
    portfolio_var = engine.calculate_portfolio_var([trade1, trade2], 0.95)
    standalone = engine.calculate_trade_var(trade1, 0.95) + engine.calculate_trade_var(trade2, 0.95)
    assert portfolio_var < standalone


def test_identical_trades_scale_linearly(engine):
    trade = linear_pnl(40)
    doubled = engine.calculate_portfolio_var([trade, trade], 0.99)
    assert doubled == pytest.approx(2 * engine.calculate_trade_var(trade, 0.99))


def test_trade_from_series():
    trade = Trade.from_series("T1", np.array([1, -2, 3]))
    assert trade.pnl == (1.0, -2.0, 3.0)
    assert trade.periods == 3


def test_portfolio_pnl_frame_and_aggregate():
    portfolio = Portfolio([Trade.from_series("A", [1.0, 2.0]), Trade.from_series("B", [-1.0, 5.0])])
    portfolio.add(Trade.from_series("C", [0.5, 0.5]))
    frame = portfolio.pnl_frame()
    assert list(frame.columns) == ["A", "B", "C"]
    assert frame["B"].tolist() == [-1.0, 5.0]
    assert portfolio.trade_ids() == ["A", "B", "C"]
    assert portfolio.aggregate().tolist() == [0.5, 7.5]


def test_portfolio_pnl_frame_rejects_misaligned():
    portfolio = Portfolio([Trade.from_series("A", [1.0, 2.0]), Trade.from_series("B", [1.0])])
    with pytest.raises(MisalignedPortfolioError):
        portfolio.pnl_frame()
    assert Portfolio().pnl_frame().empty


def test_var_table_reports_diversification(engine):
    trade = linear_pnl(50)
    portfolio = Portfolio(
        [Trade.from_series("LONG", trade), Trade.from_series("HEDGE", [-x for x in trade])]
    )
    table = portfolio.var_table(engine, 0.95)
    assert table["Trade"].tolist() == ["LONG", "HEDGE", "Sum of standalone", "Portfolio"]
    standalone = table.loc[table["Trade"] == "Sum of standalone", "VaR"].item()
    assert standalone == pytest.approx(table["VaR"].iloc[:2].sum())
    assert table.loc[table["Trade"] == "Portfolio", "VaR"].item() == 0.0
    assert table.attrs["diversification_benefit"] == pytest.approx(standalone)
    assert table.attrs["confidence_level"] == 0.95


def test_var_table_respects_engine_threshold():
    engine = HistoricalVarEngine(VarSettings(min_data_points=20))
    portfolio = Portfolio([Trade.from_series("A", linear_pnl(10))])
    with pytest.raises(InsufficientDataError):
        portfolio.var_table(engine, 0.95)


def test_duplicate_trade_ids_rejected():
    with pytest.raises(DuplicateTradeError, match="'A' appears more than once"):
        Portfolio([Trade.from_series("A", [1.0, 2.0]), Trade.from_series("A", [10.0, 20.0])])

    portfolio = Portfolio([Trade.from_series("A", [1.0, 2.0])])
    with pytest.raises(DuplicateTradeError):
        portfolio.add(Trade.from_series("A", [10.0, 20.0]))
    assert portfolio.trade_ids() == ["A"]


def test_pnl_frame_agrees_with_aggregate():
    portfolio = Portfolio([Trade.from_series("A", [1.0, 2.0]), Trade.from_series("B", [10.0, 20.0])])
    assert portfolio.pnl_frame().sum(axis=1).tolist() == portfolio.aggregate().tolist()


def test_oversized_integers_are_malformed(engine):
    with pytest.raises(NonFiniteDataError):
        engine.calculate_portfolio_var([[10**400] * 5, [1] * 5], 0.95)
