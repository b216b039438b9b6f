# src/sheets/proxy.py
"""Development proxy forwarding envelopes to the Apps Script endpoint."""
import logging

from fastapi import APIRouter, Body, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.sheets.errors import ConfigurationError, SheetsError
from src.sheets.settings import SheetsSettings
from src.sheets.transports import BaseTransport, DirectTransport

logger = logging.getLogger(__name__)


def create_router(settings: SheetsSettings, transport: BaseTransport | None = None) -> APIRouter:
    """Build the router exposing ``POST /google-sheets``.

    Args:
        settings: Connection settings for the upstream script.
        transport: Upstream transport. Defaults to a direct POST.
    """
    router = APIRouter()
    upstream = transport or DirectTransport(
        settings.script_url, timeout=settings.request_timeout_seconds
    )

    @router.post("/google-sheets")
    async def forward(envelope: dict = Body(...)):
        if not settings.is_configured:
            error = ConfigurationError()
            logger.error(f"Proxy rejected {envelope.get('action')}: {error}")
            return JSONResponse(status_code=500, content={"error": str(error)})

        payload = {"action": envelope.get("action"), "data": envelope.get("data") or {}}
        try:
            result = await upstream.send(payload)
        except SheetsError as e:
            logger.exception(f"Proxy failed to forward {payload['action']}")
            return JSONResponse(status_code=502, content={"error": str(e)})

        logger.info(f"Forwarded {payload['action']}")
        return result

    return router


def create_app(settings: SheetsSettings, transport: BaseTransport | None = None) -> FastAPI:
    """Create the proxy application mounted under ``/api``."""
    app = FastAPI(title="Trade Journal Sheets Proxy", version="1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_router(settings, transport), prefix="/api")
    return app
