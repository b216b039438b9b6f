# src/sheets/settings.py
"""Settings for the Google Sheets remote store."""
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

TransportMode = Literal["direct", "callback", "proxy"]


class SheetsSettings(BaseSettings):
    """Connection settings for the Apps Script endpoint.

    Attributes:
        script_url: Deployed Apps Script web app URL.
        sheet_id: Spreadsheet identifier backing the journal.
        mode: Transport used to reach the endpoint. ``direct`` posts to the
            script, ``callback`` uses a GET with a callback wrapper, and
            ``proxy`` posts to the local development proxy.
        proxy_url: Endpoint of the development proxy.
        request_timeout_seconds: Socket timeout for direct and proxy calls.
        callback_timeout_seconds: Deadline for a callback response.
    """

    model_config = SettingsConfigDict(env_prefix="GOOGLE_")

    script_url: str = ""
    sheet_id: str = ""
    mode: TransportMode = "direct"
    proxy_url: str = "http://localhost:5000/api/google-sheets"
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    callback_timeout_seconds: float = Field(default=30.0, gt=0)

    @computed_field
    @property
    def is_configured(self) -> bool:
        """Check if both the script URL and the sheet id are set."""
        return bool(self.script_url and self.sheet_id)
