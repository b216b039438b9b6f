# src/journal/models.py
"""Data models for journal reports."""
from dataclasses import dataclass, field
from datetime import date

from src.models.trade import Trade


@dataclass
class TradingMetrics:
    """Calculated trading performance metrics."""

    total_trades: int
    winning_trades: int
    losing_trades: int

    total_pnl: float
    win_rate: float
    avg_win: float
    avg_loss: float
    profit_factor: float
    max_drawdown: float

    best_trade: Trade | None
    worst_trade: Trade | None


@dataclass
class StrategyPerformance:
    """Aggregate results for one strategy bucket."""

    strategy: str
    trades: int
    pnl: float
    win_rate: float


@dataclass
class DaySummary:
    """Trade count and P&L for one calendar day."""

    day: date
    count: int
    pnl: float
    in_month: bool = True


@dataclass
class AnalyticsReport:
    """Overall metrics plus the per-strategy breakdown."""

    metrics: TradingMetrics
    strategies: list[StrategyPerformance] = field(default_factory=list)
