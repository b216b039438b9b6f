# src/journal/journal_manager.py
"""Manager for orchestrating all journal components."""
import logging
from datetime import date
from pathlib import Path

from src.journal.metrics_calculator import (
    MetricsCalculator,
    calculate_pnl,
    total_pnl,
    trade_pnl,
)
from src.journal.models import AnalyticsReport, DaySummary
from src.journal.queries import PsychologyQueries, StrategyQueries, TradeQueries
from src.journal.query_cache import QueryCache
from src.journal.settings import ExportFormat, JournalSettings
from src.journal.trade_exporter import TradeExporter
from src.journal.trade_grouper import (
    calendar_month,
    daily_summary,
    search_trades,
    strategy_performance,
    trades_for_date,
)
from src.models.trade import Amount, PsychologyEntry, Trade
from src.sheets.client import GoogleSheetsClient

logger = logging.getLogger(__name__)


def _format_amount(value: float) -> str:
    return f"{value:.2f}"


class JournalManager:
    """Orchestrates all journal components for trade logging and analysis.

    Coordinates the cached queries, MetricsCalculator, grouping functions and
    TradeExporter to provide one interface for the presentation layer.
    """

    def __init__(
        self,
        client: GoogleSheetsClient,
        settings: JournalSettings | None = None,
        cache: QueryCache | None = None,
    ) -> None:
        """Initialize the journal manager with all components.

        Args:
            client: Remote store client.
            settings: Journal configuration settings.
            cache: Shared query cache. A new one is created from settings
                when omitted.
        """
        self._settings = settings or JournalSettings()
        self._client = client
        self._cache = cache or QueryCache(stale_time=self._settings.stale_time_seconds)

        refetch = self._settings.refetch_on_mutation
        self.trades = TradeQueries(client, self._cache, refetch_on_mutation=refetch)
        self.strategies = StrategyQueries(client, self._cache, refetch_on_mutation=refetch)
        self.psychology = PsychologyQueries(client, self._cache, refetch_on_mutation=refetch)

        self._metrics_calculator = MetricsCalculator(
            chronological_drawdown=self._settings.chronological_drawdown
        )
        self._exporter = TradeExporter(self._settings.export_dir)

    @property
    def cache(self) -> QueryCache:
        return self._cache

    async def log_trade(
        self,
        trade_date: date | str,
        stock_name: str,
        quantity: int,
        entry_price: Amount,
        exit_price: Amount = None,
        stop_loss: Amount = None,
        target_price: Amount = None,
        setup_followed: bool = False,
        which_setup: str | None = None,
        emotion: str | None = None,
        notes: str | None = None,
        psychology_reflections: str | None = None,
        screenshot_link: str | None = None,
    ) -> Trade:
        """Record a new trade with its P&L computed at write time.

        Returns:
            The trade as confirmed by the remote store.
        """
        has_exit = exit_price not in (None, "", 0)
        profit_loss = calculate_pnl(entry_price, exit_price, quantity) if has_exit else 0.0

        trade = Trade(
            trade_date=trade_date.isoformat() if isinstance(trade_date, date) else trade_date,
            stock_name=stock_name.strip().upper(),
            quantity=quantity,
            entry_price=str(entry_price),
            exit_price=str(exit_price) if has_exit else None,
            stop_loss=str(stop_loss) if stop_loss else None,
            target_price=str(target_price) if target_price else None,
            profit_loss=_format_amount(profit_loss),
            setup_followed=setup_followed,
            which_setup=which_setup or None,
            emotion=emotion or None,
            notes=notes or None,
            psychology_reflections=psychology_reflections or None,
            screenshot_link=screenshot_link or None,
        )

        return await self.trades.add(trade)

    async def close_trade(self, trade: Trade, exit_price: Amount) -> Trade | None:
        """Set the exit price of a trade and store the recomputed P&L.

        Sends a full-field update, as the store has no partial updates for
        derived columns.
        """
        if trade.id is None:
            raise ValueError("Cannot close a trade that has no id")

        fields = trade.to_record()
        fields["exitPrice"] = str(exit_price)
        fields["profitLoss"] = _format_amount(
            calculate_pnl(trade.entry_price, exit_price, trade.quantity)
        )
        return await self.trades.update(trade.id, fields)

    async def get_analytics(self) -> AnalyticsReport:
        """Overall metrics and per-strategy breakdown for all trades."""
        trades = await self.trades.fetch()
        return AnalyticsReport(
            metrics=self._metrics_calculator.calculate(trades),
            strategies=strategy_performance(trades, self._settings.unassigned_strategy_label),
        )

    async def get_daily_summary(self, query_date: date) -> DaySummary:
        trades = await self.trades.fetch()
        return daily_summary(trades, query_date)

    async def get_calendar(self, year: int, month: int) -> list[DaySummary]:
        """Calendar grid of trade counts and P&L for a month."""
        trades = await self.trades.fetch()
        return calendar_month(trades, year, month)

    async def search_trades(self, term: str) -> list[Trade]:
        trades = await self.trades.fetch()
        return search_trades(trades, term)

    async def record_reflection(
        self,
        entry_date: date,
        mental_reflections: str,
        improvement_areas: str = "",
    ) -> PsychologyEntry:
        """Save a daily psychology entry.

        The day's P&L and best/worst trades are taken from that day's trades.
        """
        day_trades = trades_for_date(await self.trades.fetch(), entry_date)
        closed = [t for t in day_trades if not t.is_open]

        best = max(closed, key=trade_pnl) if closed else None
        worst = min(closed, key=trade_pnl) if closed else None

        entry = PsychologyEntry(
            entry_date=entry_date.isoformat(),
            daily_pnl=_format_amount(total_pnl(day_trades)),
            best_trade_id=best.id if best else None,
            worst_trade_id=worst.id if worst else None,
            mental_reflections=mental_reflections.strip(),
            improvement_areas=improvement_areas.strip(),
        )
        return await self.psychology.add(entry)

    async def export_trades(
        self,
        filename: str,
        fmt: ExportFormat | None = None,
    ) -> Path:
        """Export all trades to a file in the export directory."""
        trades = await self.trades.fetch()
        path = await self._exporter.export(trades, filename, fmt or self._settings.export_format)
        logger.info(f"Exported {len(trades)} trades to {path}")
        return path
