# src/sheets/transports.py
"""Transports carrying the ``{action, data}`` envelope to the Apps Script endpoint."""
import asyncio
import json
import logging
import re
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import requests

from src.sheets.errors import RequestTimeoutError, TransportError
from src.sheets.settings import SheetsSettings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class BaseTransport(ABC):
    """Abstract base class for envelope transports."""

    def __init__(self, name: str):
        """Initialize the transport.

        Args:
            name: Identifier for this transport.
        """
        self.name = name

    @abstractmethod
    async def send(self, envelope: dict) -> Any:
        """Send one envelope and return the decoded response body.

        Raises:
            TransportError: On network failure or a non-2xx status.
        """
        pass


class HttpPostTransport(BaseTransport):
    """Posts the envelope as JSON and decodes the JSON reply."""

    def __init__(
        self,
        url: str,
        name: str = "direct",
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        super().__init__(name)
        self._url = url
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return self._url

    async def send(self, envelope: dict) -> Any:
        try:
            response = await asyncio.to_thread(
                self._session.post,
                self._url,
                json=envelope,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Network error: {e}") from e

        if not response.ok:
            raise TransportError.from_status(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Invalid JSON response") from e


class DirectTransport(HttpPostTransport):
    """Same-origin POST straight to the Apps Script URL."""

    def __init__(self, script_url: str, timeout: float = DEFAULT_TIMEOUT, session=None):
        super().__init__(script_url, name="direct", timeout=timeout, session=session)


class ProxyTransport(HttpPostTransport):
    """POST to the local development proxy, which forwards to the script."""

    def __init__(self, proxy_url: str, timeout: float = DEFAULT_TIMEOUT, session=None):
        super().__init__(proxy_url, name="proxy", timeout=timeout, session=session)


class PendingRequests:
    """Table of in-flight callback requests keyed by request id.

    Each entry is a one-shot future. The first settle or fail wins; later
    attempts are ignored.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._handlers

    def register(self, request_id: str) -> asyncio.Future:
        if request_id in self._handlers:
            raise ValueError(f"Request id already registered: {request_id}")
        future = asyncio.get_running_loop().create_future()
        self._handlers[request_id] = future
        return future

    def settle(self, request_id: str, payload: Any) -> bool:
        """Resolve a pending request. Returns False if it already settled."""
        future = self._handlers.get(request_id)
        if future is None or future.done():
            return False
        future.set_result(payload)
        return True

    def fail(self, request_id: str, error: Exception) -> bool:
        """Reject a pending request. Returns False if it already settled."""
        future = self._handlers.get(request_id)
        if future is None or future.done():
            return False
        future.set_exception(error)
        return True

    def discard(self, request_id: str) -> None:
        future = self._handlers.pop(request_id, None)
        if future is not None and not future.done():
            future.cancel()

    @contextmanager
    def track(self, request_id: str) -> Iterator[asyncio.Future]:
        """Register a request for the duration of the block."""
        future = self.register(request_id)
        try:
            yield future
        finally:
            self.discard(request_id)


class CallbackTransport(BaseTransport):
    """Cross-origin GET where the reply is wrapped in a named callback.

    The envelope travels as query parameters together with a unique callback
    name, and the endpoint answers ``<callback>(<json>)``. Every call is
    tracked in a PendingRequests table and removed again on success, error or
    timeout.
    """

    CALLBACK_PREFIX = "jsonp_callback_"

    def __init__(
        self,
        script_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        pending: PendingRequests | None = None,
    ):
        super().__init__("callback")
        self._url = script_url
        self._timeout = timeout
        self._session = session or requests.Session()
        self._pending = pending if pending is not None else PendingRequests()

    @property
    def pending(self) -> PendingRequests:
        return self._pending

    @property
    def timeout(self) -> float:
        return self._timeout

    def _new_request_id(self) -> str:
        return f"{self.CALLBACK_PREFIX}{uuid.uuid4().hex}"

    def _build_params(self, request_id: str, envelope: dict) -> dict:
        try:
            data = json.dumps(envelope.get("data") or {})
        except (TypeError, ValueError) as e:
            raise TransportError(f"Invalid request data: {e}") from e
        return {
            "action": envelope.get("action", ""),
            "data": data,
            "callback": request_id,
        }

    def _settle_crashed(self, request_id: str, task: asyncio.Task) -> None:
        """Fail the pending entry when the request task dies unexpectedly."""
        if task.cancelled() or task.exception() is None:
            return
        self._pending.fail(request_id, TransportError(f"Request failed: {task.exception()}"))

    async def send(self, envelope: dict) -> Any:
        request_id = self._new_request_id()
        params = self._build_params(request_id, envelope)

        with self._pending.track(request_id) as future:
            request = asyncio.create_task(self._dispatch(request_id, params))
            request.add_done_callback(lambda task: self._settle_crashed(request_id, task))
            try:
                return await asyncio.wait_for(future, timeout=self._timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Callback request {request_id} timed out")
                raise RequestTimeoutError(self._timeout) from None
            finally:
                request.cancel()

    async def _dispatch(self, request_id: str, params: dict) -> None:
        """Perform the GET and settle the pending entry with its outcome."""
        try:
            response = await asyncio.to_thread(
                self._session.get,
                self._url,
                params=params,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            self._pending.fail(request_id, TransportError(f"Network error: {e}"))
            return

        if not response.ok:
            self._pending.fail(request_id, TransportError.from_status(response.status_code))
            return

        try:
            payload = self._unwrap(request_id, response.text)
        except TransportError as e:
            self._pending.fail(request_id, e)
            return

        self._pending.settle(request_id, payload)

    @staticmethod
    def _unwrap(request_id: str, body: str) -> Any:
        """Extract the JSON payload from ``<request_id>(<json>)``."""
        pattern = rf"^\s*(?:/\*\*/\s*)?{re.escape(request_id)}\((?P<payload>.*)\)\s*;?\s*$"
        match = re.match(pattern, body, re.DOTALL)
        if match is None:
            raise TransportError("Malformed callback response")
        try:
            return json.loads(match.group("payload"))
        except ValueError as e:
            raise TransportError("Malformed callback response") from e


def create_transport(
    settings: SheetsSettings,
    session: requests.Session | None = None,
) -> BaseTransport:
    """Build the transport selected by ``settings.mode``."""
    if settings.mode == "callback":
        return CallbackTransport(
            settings.script_url,
            timeout=settings.callback_timeout_seconds,
            session=session,
        )
    if settings.mode == "proxy":
        return ProxyTransport(
            settings.proxy_url,
            timeout=settings.request_timeout_seconds,
            session=session,
        )
    return DirectTransport(
        settings.script_url,
        timeout=settings.request_timeout_seconds,
        session=session,
    )
