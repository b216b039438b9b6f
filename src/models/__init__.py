"""Models package for the trading journal."""

from src.models.trade import Amount, PsychologyEntry, Strategy, Trade

__all__ = ["Amount", "PsychologyEntry", "Strategy", "Trade"]
