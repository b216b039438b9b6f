# src/models/trade.py
"""Journal entities stored in the Google Sheets remote store."""
from dataclasses import dataclass
from datetime import date

Amount = str | float | int | None


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _optional_int(value: object) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_bool(value: object) -> bool:
    """Read a checkbox cell, which the sheet may return as text."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "y", "1")
    return bool(value)


@dataclass
class Trade:
    """A single trade row as held by the remote store.

    Monetary values keep the decimal-string form they are stored in; numeric
    parsing happens in the metrics layer.
    """

    trade_date: str
    stock_name: str
    quantity: int
    entry_price: Amount

    exit_price: Amount = None
    stop_loss: Amount = None
    target_price: Amount = None
    profit_loss: Amount = "0"

    setup_followed: bool = False
    which_setup: str | None = None
    emotion: str | None = None
    notes: str | None = None
    psychology_reflections: str | None = None
    screenshot_link: str | None = None

    id: int | None = None
    created_at: str | None = None

    @property
    def is_open(self) -> bool:
        """Check if the trade has no exit yet."""
        return self.exit_price in (None, "")

    @property
    def day(self) -> date:
        """The trade date as a date object."""
        return date.fromisoformat(self.trade_date[:10])

    def to_record(self) -> dict:
        """Convert to the camelCase record sent to the remote store.

        The identifier and creation timestamp are owned by the store and
        only included once assigned.
        """
        record = {
            "tradeDate": self.trade_date,
            "stockName": self.stock_name,
            "quantity": self.quantity,
            "entryPrice": self.entry_price,
            "exitPrice": self.exit_price,
            "stopLoss": self.stop_loss,
            "targetPrice": self.target_price,
            "profitLoss": self.profit_loss,
            "setupFollowed": self.setup_followed,
            "whichSetup": self.which_setup,
            "emotion": self.emotion,
            "notes": self.notes,
            "psychologyReflections": self.psychology_reflections,
            "screenshotLink": self.screenshot_link,
        }
        if self.id is not None:
            record["id"] = self.id
        if self.created_at is not None:
            record["createdAt"] = self.created_at
        return record

    @classmethod
    def from_record(cls, data: dict) -> "Trade":
        """Build a Trade from a remote store record."""
        return cls(
            id=_optional_int(data.get("id")),
            trade_date=str(data.get("tradeDate") or "")[:10],
            stock_name=str(data.get("stockName") or ""),
            quantity=_optional_int(data.get("quantity")) or 0,
            entry_price=data.get("entryPrice"),
            exit_price=data.get("exitPrice"),
            stop_loss=data.get("stopLoss"),
            target_price=data.get("targetPrice"),
            profit_loss=data.get("profitLoss"),
            setup_followed=_parse_bool(data.get("setupFollowed", False)),
            which_setup=_optional_str(data.get("whichSetup")),
            emotion=_optional_str(data.get("emotion")),
            notes=_optional_str(data.get("notes")),
            psychology_reflections=_optional_str(data.get("psychologyReflections")),
            screenshot_link=_optional_str(data.get("screenshotLink")),
            created_at=_optional_str(data.get("createdAt")),
        )


@dataclass
class Strategy:
    """A named trading setup that trades reference by name."""

    name: str
    description: str | None = None
    id: int | None = None
    created_at: str | None = None

    def to_record(self) -> dict:
        record: dict = {"name": self.name, "description": self.description}
        if self.id is not None:
            record["id"] = self.id
        if self.created_at is not None:
            record["createdAt"] = self.created_at
        return record

    @classmethod
    def from_record(cls, data: dict) -> "Strategy":
        return cls(
            id=_optional_int(data.get("id")),
            name=str(data.get("name") or ""),
            description=_optional_str(data.get("description")),
            created_at=_optional_str(data.get("createdAt")),
        )


@dataclass
class PsychologyEntry:
    """A daily psychology journal entry.

    Best and worst trade ids are weak references and are never checked
    against existing trades.
    """

    entry_date: str
    mental_reflections: str
    improvement_areas: str = ""
    daily_pnl: Amount = None
    best_trade_id: int | None = None
    worst_trade_id: int | None = None
    id: int | None = None
    created_at: str | None = None

    def to_record(self) -> dict:
        record = {
            "entryDate": self.entry_date,
            "dailyPnL": self.daily_pnl,
            "bestTradeId": self.best_trade_id,
            "worstTradeId": self.worst_trade_id,
            "mentalReflections": self.mental_reflections,
            "improvementAreas": self.improvement_areas,
        }
        if self.id is not None:
            record["id"] = self.id
        if self.created_at is not None:
            record["createdAt"] = self.created_at
        return record

    @classmethod
    def from_record(cls, data: dict) -> "PsychologyEntry":
        return cls(
            id=_optional_int(data.get("id")),
            entry_date=str(data.get("entryDate") or "")[:10],
            daily_pnl=data.get("dailyPnL"),
            best_trade_id=_optional_int(data.get("bestTradeId")),
            worst_trade_id=_optional_int(data.get("worstTradeId")),
            mental_reflections=str(data.get("mentalReflections") or ""),
            improvement_areas=str(data.get("improvementAreas") or ""),
            created_at=_optional_str(data.get("createdAt")),
        )
