# src/journal/settings.py
"""Settings for the journal module."""
from typing import Literal

from pydantic import BaseModel, Field, field_validator


ExportFormat = Literal["csv", "json"]


class JournalSettings(BaseModel):
    """Configuration settings for the trading journal.

    Attributes:
        stale_time_seconds: How long a fetched collection stays fresh.
        refetch_on_mutation: Refetch a collection right after a confirmed write.
        chronological_drawdown: Sort trades by date before computing drawdown.
        unassigned_strategy_label: Bucket name for trades without a strategy.
        export_dir: Directory trade exports are written to.
        export_format: Default export file format.
    """

    stale_time_seconds: float = Field(default=300.0, ge=0)
    refetch_on_mutation: bool = True

    chronological_drawdown: bool = True
    unassigned_strategy_label: str = "Unassigned"

    export_dir: str = "data/exports"
    export_format: ExportFormat = "csv"

    @field_validator("unassigned_strategy_label")
    @classmethod
    def validate_label(cls, v: str) -> str:
        """Validate that the unassigned bucket has a usable name."""
        if not v.strip():
            raise ValueError("unassigned_strategy_label must not be blank")
        return v.strip()
