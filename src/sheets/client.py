# src/sheets/client.py
"""Client for the Google Sheets journal store."""
import logging
from typing import Any

from src.models.trade import PsychologyEntry, Strategy, Trade
from src.sheets.errors import ConfigurationError, RemoteError, SheetsError
from src.sheets.settings import SheetsSettings
from src.sheets.transports import BaseTransport, create_transport

logger = logging.getLogger(__name__)


class GoogleSheetsClient:
    """Single point of contact with the Apps Script endpoint.

    Every operation is an ``{action, data}`` envelope sent through one
    transport. Replies of the form ``{"data": ...}`` resolve with the payload;
    ``{"error": ...}`` raises RemoteError with the server message.
    """

    def __init__(
        self,
        settings: SheetsSettings,
        transport: BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            settings: Connection settings.
            transport: Transport to use. Defaults to the one selected by
                ``settings.mode``.
        """
        self._settings = settings
        self._transport = transport or create_transport(settings)

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    async def request(self, action: str, data: dict | None = None) -> Any:
        """Dispatch one action and return the unwrapped ``data`` payload.

        Raises:
            ConfigurationError: Script URL or sheet id is missing.
            TransportError: Network failure or non-2xx status.
            RemoteError: The endpoint returned an error body.
            RequestTimeoutError: The callback transport timed out.
        """
        if not self.is_configured:
            raise ConfigurationError()

        envelope = {"action": action, "data": data or {}}

        try:
            result = await self._transport.send(envelope)
        except SheetsError as e:
            logger.error(f"Google Sheets API error ({action}): {e}")
            raise

        if isinstance(result, dict) and result.get("error"):
            logger.error(f"Google Sheets API error ({action}): {result['error']}")
            raise RemoteError(str(result["error"]))

        if isinstance(result, dict) and "data" in result:
            return result["data"]
        return result

    # Trades

    async def get_trades(self) -> list[Trade]:
        records = await self.request("getTrades")
        return [Trade.from_record(r) for r in records or []]

    async def add_trade(self, trade: Trade) -> Trade:
        result = await self.request("addTrade", trade.to_record())
        return Trade.from_record(result) if isinstance(result, dict) else trade

    async def update_trade(self, trade_id: int, fields: dict | Trade) -> Trade | None:
        changes = fields.to_record() if isinstance(fields, Trade) else fields
        result = await self.request("updateTrade", {**changes, "id": trade_id})
        return Trade.from_record(result) if isinstance(result, dict) else None

    async def delete_trade(self, trade_id: int) -> None:
        await self.request("deleteTrade", {"id": trade_id})

    async def get_trades_by_date(self, trade_date: str) -> list[Trade]:
        records = await self.request("getTradesByDate", {"date": trade_date})
        return [Trade.from_record(r) for r in records or []]

    # Strategies

    async def get_strategies(self) -> list[Strategy]:
        records = await self.request("getStrategies")
        return [Strategy.from_record(r) for r in records or []]

    async def add_strategy(self, strategy: Strategy) -> Strategy:
        result = await self.request("addStrategy", strategy.to_record())
        return Strategy.from_record(result) if isinstance(result, dict) else strategy

    async def update_strategy(self, strategy_id: int, fields: dict | Strategy) -> Strategy | None:
        changes = fields.to_record() if isinstance(fields, Strategy) else fields
        result = await self.request("updateStrategy", {**changes, "id": strategy_id})
        return Strategy.from_record(result) if isinstance(result, dict) else None

    async def delete_strategy(self, strategy_id: int) -> None:
        await self.request("deleteStrategy", {"id": strategy_id})

    # Psychology entries

    async def get_psychology_entries(self) -> list[PsychologyEntry]:
        records = await self.request("getPsychologyEntries")
        return [PsychologyEntry.from_record(r) for r in records or []]

    async def add_psychology_entry(self, entry: PsychologyEntry) -> PsychologyEntry:
        result = await self.request("addPsychologyEntry", entry.to_record())
        return PsychologyEntry.from_record(result) if isinstance(result, dict) else entry

    async def update_psychology_entry(
        self, entry_id: int, fields: dict | PsychologyEntry
    ) -> PsychologyEntry | None:
        changes = fields.to_record() if isinstance(fields, PsychologyEntry) else fields
        result = await self.request("updatePsychologyEntry", {**changes, "id": entry_id})
        return PsychologyEntry.from_record(result) if isinstance(result, dict) else None

    async def delete_psychology_entry(self, entry_id: int) -> None:
        await self.request("deletePsychologyEntry", {"id": entry_id})
