# src/journal/trade_grouper.py
"""Grouping of trades by strategy and by calendar date."""
from collections import defaultdict
from collections.abc import Sequence
from datetime import date, timedelta

from src.journal.metrics_calculator import total_pnl, win_rate
from src.journal.models import DaySummary, StrategyPerformance
from src.models.trade import Trade

UNASSIGNED_STRATEGY = "Unassigned"

CALENDAR_DAYS = 42


def group_by_strategy(
    trades: Sequence[Trade],
    unassigned_label: str = UNASSIGNED_STRATEGY,
) -> dict[str, list[Trade]]:
    """Partition trades by strategy name.

    Trades without a strategy land in the unassigned bucket. Groups appear in
    the order their first trade appears, and members keep input order.
    """
    groups: dict[str, list[Trade]] = defaultdict(list)

    for trade in trades:
        name = (trade.which_setup or "").strip() or unassigned_label
        groups[name].append(trade)

    return dict(groups)


def group_by_date(trades: Sequence[Trade]) -> dict[str, list[Trade]]:
    """Partition trades by ISO trade date, keeping input order within a day."""
    groups: dict[str, list[Trade]] = defaultdict(list)

    for trade in trades:
        groups[trade.trade_date[:10]].append(trade)

    return dict(groups)


def strategy_performance(
    trades: Sequence[Trade],
    unassigned_label: str = UNASSIGNED_STRATEGY,
) -> list[StrategyPerformance]:
    """Summarize trade count, P&L and win rate per strategy."""
    return [
        StrategyPerformance(
            strategy=name,
            trades=len(members),
            pnl=total_pnl(members),
            win_rate=win_rate(members),
        )
        for name, members in group_by_strategy(trades, unassigned_label).items()
    ]


def trades_for_date(trades: Sequence[Trade], day: date) -> list[Trade]:
    key = day.isoformat()
    return [t for t in trades if t.trade_date[:10] == key]


def daily_summary(trades: Sequence[Trade], day: date) -> DaySummary:
    day_trades = trades_for_date(trades, day)
    return DaySummary(day=day, count=len(day_trades), pnl=total_pnl(day_trades))


def calendar_month(trades: Sequence[Trade], year: int, month: int) -> list[DaySummary]:
    """Build the 6-week calendar grid for a month.

    The grid starts on the Sunday on or before the first of the month and
    spans 42 days, so leading and trailing days of neighbouring months are
    included with in_month set to False.

    Args:
        trades: Trades to summarize.
        year: Calendar year.
        month: Calendar month (1-12).

    Returns:
        42 DaySummary cells in date order.
    """
    first = date(year, month, 1)
    # weekday(): Monday=0 ... Sunday=6
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    by_date = group_by_date(trades)

    cells = []
    for offset in range(CALENDAR_DAYS):
        day = start + timedelta(days=offset)
        day_trades = by_date.get(day.isoformat(), [])
        cells.append(
            DaySummary(
                day=day,
                count=len(day_trades),
                pnl=total_pnl(day_trades),
                in_month=day.month == month,
            )
        )
    return cells


def search_trades(trades: Sequence[Trade], term: str) -> list[Trade]:
    """Case-insensitive match on stock name or strategy."""
    needle = term.strip().lower()
    if not needle:
        return list(trades)
    return [
        t
        for t in trades
        if needle in t.stock_name.lower()
        or (t.which_setup and needle in t.which_setup.lower())
    ]
