# src/journal/__init__.py
"""Journal module for trade metrics, grouping and cached queries."""

from .journal_manager import JournalManager
from .metrics_calculator import MetricsCalculator
from .models import AnalyticsReport, DaySummary, StrategyPerformance, TradingMetrics
from .queries import CollectionQuery, PsychologyQueries, StrategyQueries, TradeQueries
from .query_cache import QueryCache
from .settings import JournalSettings
from .trade_exporter import TradeExporter

__all__ = [
    "AnalyticsReport",
    "CollectionQuery",
    "DaySummary",
    "JournalManager",
    "JournalSettings",
    "MetricsCalculator",
    "PsychologyQueries",
    "QueryCache",
    "StrategyPerformance",
    "StrategyQueries",
    "TradeExporter",
    "TradeQueries",
    "TradingMetrics",
]
