from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from src.journal.settings import JournalSettings
from src.sheets.settings import SheetsSettings


class SystemConfig(BaseModel):
    name: str = "Trading Journal"
    version: str = "1.0.0"
    log_level: str = "INFO"


class ProxyConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=5000, gt=0, le=65535)


class Settings(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    journal: JournalSettings = Field(default_factory=JournalSettings)
    sheets: SheetsSettings = Field(default_factory=SheetsSettings)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file with env var overrides.

        ``GOOGLE_*`` environment variables take precedence over the
        ``sheets`` section of the file.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        sheets = SheetsSettings(**data.pop("sheets", None) or {})
        env_sheets = SheetsSettings()
        overrides = env_sheets.model_dump(exclude_unset=True, exclude={"is_configured"})
        sheets = sheets.model_copy(update=overrides)

        return cls(**data, sheets=sheets)
