# src/journal/metrics_calculator.py
"""Calculator for trading performance metrics.

All functions are pure and tolerate malformed stored values: anything that
does not parse as a finite number counts as zero.
"""
import math
from collections.abc import Sequence

from src.journal.models import TradingMetrics
from src.models.trade import Amount, Trade


def parse_amount(value: Amount) -> float:
    """Parse a stored decimal value, returning 0.0 for missing or invalid input."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(str(value).strip().replace(",", ""))
    except ValueError:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def calculate_pnl(entry_price: Amount, exit_price: Amount, quantity: int | str) -> float:
    """Profit or loss of a long position closed at exit_price."""
    return (parse_amount(exit_price) - parse_amount(entry_price)) * parse_amount(quantity)


def calculate_percentage(entry_price: Amount, exit_price: Amount) -> float:
    """Percent change from entry to exit price."""
    entry = parse_amount(entry_price)
    if entry == 0:
        return 0.0
    return (parse_amount(exit_price) - entry) / entry * 100


def trade_pnl(trade: Trade) -> float:
    """Realized P&L of a trade; open trades contribute nothing."""
    if trade.is_open:
        return 0.0
    return parse_amount(trade.profit_loss)


def total_pnl(trades: Sequence[Trade]) -> float:
    return sum(trade_pnl(t) for t in trades)


def win_rate(trades: Sequence[Trade]) -> float:
    """Fraction of realized (non-zero P&L) trades that were winners."""
    realized = [p for p in (trade_pnl(t) for t in trades) if p != 0]
    if not realized:
        return 0.0
    return sum(1 for p in realized if p > 0) / len(realized)


def average_win(trades: Sequence[Trade]) -> float:
    wins = [p for p in (trade_pnl(t) for t in trades) if p > 0]
    return sum(wins) / len(wins) if wins else 0.0


def average_loss(trades: Sequence[Trade]) -> float:
    """Mean of the losing trades' P&L. The result is negative or zero."""
    losses = [p for p in (trade_pnl(t) for t in trades) if p < 0]
    return sum(losses) / len(losses) if losses else 0.0


def profit_factor(trades: Sequence[Trade]) -> float:
    """Average win magnitude over average loss magnitude, 0.0 without losses."""
    avg_loss = average_loss(trades)
    if avg_loss == 0:
        return 0.0
    return abs(average_win(trades) / avg_loss)


def max_drawdown(trades: Sequence[Trade], chronological: bool = True) -> float:
    """Largest peak-to-trough decline of cumulative P&L.

    Args:
        trades: Trades to walk through.
        chronological: Sort by trade date (stable) before accumulating. When
            False the input order is used as given.

    Returns:
        The drawdown as a non-negative amount.
    """
    ordered = sorted(trades, key=lambda t: t.trade_date) if chronological else list(trades)

    cumulative = 0.0
    peak = 0.0
    drawdown = 0.0

    for trade in ordered:
        cumulative += trade_pnl(trade)
        if cumulative > peak:
            peak = cumulative
        if peak - cumulative > drawdown:
            drawdown = peak - cumulative

    return drawdown


def best_trade(trades: Sequence[Trade]) -> Trade | None:
    if not trades:
        return None
    return max(trades, key=trade_pnl)


def worst_trade(trades: Sequence[Trade]) -> Trade | None:
    if not trades:
        return None
    return min(trades, key=trade_pnl)


class MetricsCalculator:
    """Calculates trading performance metrics from trades."""

    def __init__(self, chronological_drawdown: bool = True) -> None:
        """Initialize the calculator.

        Args:
            chronological_drawdown: Sort trades by date before computing
                max drawdown.
        """
        self._chronological_drawdown = chronological_drawdown

    def calculate(self, trades: Sequence[Trade]) -> TradingMetrics:
        """Calculate trading metrics from a list of trades.

        Args:
            trades: Trades to analyze, open trades included.

        Returns:
            TradingMetrics with all calculated values.
        """
        if not trades:
            return self._empty_metrics()

        pnls = [trade_pnl(t) for t in trades]

        return TradingMetrics(
            total_trades=len(trades),
            winning_trades=sum(1 for p in pnls if p > 0),
            losing_trades=sum(1 for p in pnls if p < 0),
            total_pnl=total_pnl(trades),
            win_rate=win_rate(trades),
            avg_win=average_win(trades),
            avg_loss=average_loss(trades),
            profit_factor=profit_factor(trades),
            max_drawdown=max_drawdown(trades, chronological=self._chronological_drawdown),
            best_trade=best_trade(trades),
            worst_trade=worst_trade(trades),
        )

    def _empty_metrics(self) -> TradingMetrics:
        """Return metrics with zero values for an empty trade list."""
        return TradingMetrics(
            total_trades=0,
            winning_trades=0,
            losing_trades=0,
            total_pnl=0.0,
            win_rate=0.0,
            avg_win=0.0,
            avg_loss=0.0,
            profit_factor=0.0,
            max_drawdown=0.0,
            best_trade=None,
            worst_trade=None,
        )
