# src/journal/trade_exporter.py
"""Exporter writing trade snapshots to CSV or JSON files."""
import csv
import io
import json
from collections.abc import Sequence
from pathlib import Path

import aiofiles

from src.journal.metrics_calculator import calculate_percentage, trade_pnl
from src.journal.settings import ExportFormat
from src.models.trade import Trade

CSV_COLUMNS = [
    "id",
    "tradeDate",
    "stockName",
    "quantity",
    "entryPrice",
    "exitPrice",
    "stopLoss",
    "targetPrice",
    "profitLoss",
    "returnPercent",
    "whichSetup",
    "emotion",
    "notes",
]


class TradeExporter:
    """Writes trades to a file in the chosen format."""

    def __init__(self, export_dir: str) -> None:
        self._export_dir = Path(export_dir)

    def _resolve(self, filename: str) -> Path:
        path = Path(filename)
        if not path.is_absolute():
            path = self._export_dir / path
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def _row(self, trade: Trade) -> dict:
        record = trade.to_record()
        record["id"] = trade.id
        record["profitLoss"] = trade_pnl(trade)
        record["returnPercent"] = (
            round(calculate_percentage(trade.entry_price, trade.exit_price), 2)
            if not trade.is_open
            else None
        )
        return {column: record.get(column) for column in CSV_COLUMNS}

    def render_csv(self, trades: Sequence[Trade]) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for trade in trades:
            writer.writerow(self._row(trade))
        return buffer.getvalue()

    def render_json(self, trades: Sequence[Trade]) -> str:
        return json.dumps([self._row(t) for t in trades], indent=2, default=str)

    async def export(
        self,
        trades: Sequence[Trade],
        filename: str,
        fmt: ExportFormat = "csv",
    ) -> Path:
        """Write trades to a file.

        Args:
            trades: Trades to export.
            filename: Target file, relative to the export directory unless
                absolute.
            fmt: ``csv`` or ``json``.

        Returns:
            Path of the written file.
        """
        if fmt == "csv":
            content = self.render_csv(trades)
        elif fmt == "json":
            content = self.render_json(trades)
        else:
            raise ValueError(f"Unsupported export format: {fmt}")

        path = self._resolve(filename)
        async with aiofiles.open(path, "w", newline="") as f:
            await f.write(content)

        return path
