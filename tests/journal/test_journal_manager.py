# tests/journal/test_journal_manager.py
"""Tests for JournalManager."""
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.journal.journal_manager import JournalManager
from src.journal.settings import JournalSettings
from src.models.trade import Trade
from src.sheets.client import GoogleSheetsClient


def make_trade(
    trade_id: int,
    profit_loss: str,
    trade_date: str = "2026-01-17",
    exit_price: str | None = "110",
    which_setup: str | None = "Breakout",
) -> Trade:
    """Create a stored trade for testing."""
    return Trade(
        id=trade_id,
        trade_date=trade_date,
        stock_name="RELIANCE",
        quantity=10,
        entry_price="100",
        exit_price=exit_price,
        profit_loss=profit_loss,
        which_setup=which_setup,
    )


@pytest.fixture
def stored_trades() -> list[Trade]:
    return [
        make_trade(1, "100.00"),
        make_trade(2, "-40.00", which_setup=None),
        make_trade(3, "250.00", trade_date="2026-01-18"),
        make_trade(4, "0", exit_price=None),
    ]


@pytest.fixture
def client(stored_trades) -> MagicMock:
    mock = MagicMock(spec=GoogleSheetsClient)
    mock.is_configured = True
    mock.get_trades = AsyncMock(return_value=stored_trades)
    mock.add_trade = AsyncMock(side_effect=lambda t: t)
    mock.update_trade = AsyncMock(return_value=None)
    mock.get_psychology_entries = AsyncMock(return_value=[])
    mock.add_psychology_entry = AsyncMock(side_effect=lambda e: e)
    return mock


@pytest.fixture
def manager(client, tmp_path: Path) -> JournalManager:
    settings = JournalSettings(export_dir=str(tmp_path / "exports"))
    return JournalManager(client=client, settings=settings)


class TestLogTrade:
    """Tests for log_trade."""

    @pytest.mark.asyncio
    async def test_computes_pnl_for_closed_trade(self, manager, client) -> None:
        trade = await manager.log_trade(
            trade_date=date(2026, 1, 17),
            stock_name=" reliance ",
            quantity=10,
            entry_price=100,
            exit_price=110,
            which_setup="Breakout",
        )

        assert trade.stock_name == "RELIANCE"
        assert trade.trade_date == "2026-01-17"
        assert trade.profit_loss == "100.00"
        client.add_trade.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_open_trade_has_zero_pnl(self, manager) -> None:
        trade = await manager.log_trade(
            trade_date="2026-01-17",
            stock_name="TCS",
            quantity=5,
            entry_price="3500",
        )

        assert trade.exit_price is None
        assert trade.is_open is True
        assert trade.profit_loss == "0.00"

    @pytest.mark.asyncio
    async def test_refetches_after_add(self, manager, client) -> None:
        await manager.log_trade("2026-01-17", "TCS", 5, "3500", "3400")

        client.get_trades.assert_awaited_once()


class TestCloseTrade:
    """Tests for close_trade."""

    @pytest.mark.asyncio
    async def test_sends_full_update_with_new_pnl(self, manager, client) -> None:
        trade = make_trade(9, "0", exit_price=None)

        await manager.close_trade(trade, "95")

        trade_id, fields = client.update_trade.await_args.args
        assert trade_id == 9
        assert fields["exitPrice"] == "95"
        assert fields["profitLoss"] == "-50.00"
        assert fields["stockName"] == "RELIANCE"

    @pytest.mark.asyncio
    async def test_requires_id(self, manager) -> None:
        with pytest.raises(ValueError):
            await manager.close_trade(make_trade(None, "0", exit_price=None), "95")


class TestAnalytics:
    """Tests for read-side reports."""

    @pytest.mark.asyncio
    async def test_get_analytics(self, manager) -> None:
        report = await manager.get_analytics()

        assert report.metrics.total_trades == 4
        assert report.metrics.total_pnl == 310.0
        assert report.metrics.win_rate == pytest.approx(2 / 3)
        assert {s.strategy for s in report.strategies} == {"Breakout", "Unassigned"}

    @pytest.mark.asyncio
    async def test_unassigned_label_from_settings(self, client, tmp_path) -> None:
        manager = JournalManager(
            client=client,
            settings=JournalSettings(unassigned_strategy_label="No Setup", export_dir=str(tmp_path)),
        )

        report = await manager.get_analytics()

        assert "No Setup" in {s.strategy for s in report.strategies}

    @pytest.mark.asyncio
    async def test_daily_summary(self, manager) -> None:
        summary = await manager.get_daily_summary(date(2026, 1, 17))

        assert summary.count == 3
        assert summary.pnl == 60.0

    @pytest.mark.asyncio
    async def test_calendar(self, manager) -> None:
        cells = {c.day: c for c in await manager.get_calendar(2026, 1)}

        assert cells[date(2026, 1, 18)].pnl == 250.0

    @pytest.mark.asyncio
    async def test_search(self, manager) -> None:
        results = await manager.search_trades("break")

        assert [t.id for t in results] == [1, 3, 4]

    @pytest.mark.asyncio
    async def test_reads_share_one_fetch(self, manager, client) -> None:
        await manager.get_analytics()
        await manager.get_daily_summary(date(2026, 1, 17))

        client.get_trades.assert_awaited_once()


class TestRecordReflection:
    """Tests for record_reflection."""

    @pytest.mark.asyncio
    async def test_fills_daily_figures(self, manager, client) -> None:
        entry = await manager.record_reflection(
            date(2026, 1, 17),
            mental_reflections=" Stayed patient ",
            improvement_areas="Cut losers faster",
        )

        assert entry.entry_date == "2026-01-17"
        assert entry.daily_pnl == "60.00"
        assert entry.best_trade_id == 1
        assert entry.worst_trade_id == 2
        assert entry.mental_reflections == "Stayed patient"
        client.add_psychology_entry.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_day_without_trades(self, manager) -> None:
        entry = await manager.record_reflection(date(2026, 2, 1), "Rest day")

        assert entry.daily_pnl == "0.00"
        assert entry.best_trade_id is None
        assert entry.worst_trade_id is None


class TestExport:
    """Tests for export_trades."""

    @pytest.mark.asyncio
    async def test_uses_default_format(self, manager, tmp_path) -> None:
        path = await manager.export_trades("trades.csv")

        assert path == tmp_path / "exports" / "trades.csv"
        assert path.read_text().splitlines()[0].startswith("id,tradeDate")

    @pytest.mark.asyncio
    async def test_explicit_format(self, manager) -> None:
        path = await manager.export_trades("trades.json", fmt="json")

        assert path.read_text().lstrip().startswith("[")
