# src/sheets/__init__.py
"""Google Sheets remote store client and transports."""

from .client import GoogleSheetsClient
from .errors import (
    ConfigurationError,
    RemoteError,
    RequestTimeoutError,
    SheetsError,
    TransportError,
)
from .settings import SheetsSettings
from .transports import (
    BaseTransport,
    CallbackTransport,
    DirectTransport,
    PendingRequests,
    ProxyTransport,
    create_transport,
)

__all__ = [
    "BaseTransport",
    "CallbackTransport",
    "ConfigurationError",
    "DirectTransport",
    "GoogleSheetsClient",
    "PendingRequests",
    "ProxyTransport",
    "RemoteError",
    "RequestTimeoutError",
    "SheetsError",
    "SheetsSettings",
    "TransportError",
    "create_transport",
]
