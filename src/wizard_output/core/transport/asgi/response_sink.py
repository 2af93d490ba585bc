"""
ASGI response sink.

Maps the sink interface onto raw ASGI ``send`` calls so that wizard output
reaches the client incrementally instead of being collected into a single
response body.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

from wizard_output.core.common.exceptions import (
    EnvelopeFrozenError,
    TransportWriteError,
)
from wizard_output.core.interfaces.response_sink_interface import IResponseSink

logger = logging.getLogger(__name__)

Message = MutableMapping[str, Any]
Send = Callable[[Message], Awaitable[None]]


class ASGIResponseSink(IResponseSink):
    """Streams one HTTP response through an ASGI ``send`` callable.

    A ``Location`` header without an explicit status turns the response into
    a ``302 Found``.
    """

    def __init__(self, send: Send, status_code: int = 200) -> None:
        self._send = send
        self._status_code = status_code
        self._status_explicit = status_code != 200
        self._headers: list[tuple[bytes, bytes]] = []
        self._chunks: list[bytes] = []
        self._headers_sent = False
        self._closed = False
        self._broken = False
        self._bytes_sent = 0

    @property
    def headers_sent(self) -> bool:
        return self._headers_sent

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def bytes_sent(self) -> int:
        return self._bytes_sent

    @property
    def closed(self) -> bool:
        return self._closed

    def write_header(self, name: str, value: str) -> None:
        if self._headers_sent:
            raise EnvelopeFrozenError(
                "Cannot write header after headers were sent",
                details={"header": name},
            )
        if name.lower() == "location" and not self._status_explicit:
            self._status_code = 302
        self._headers.append(
            (name.lower().encode("latin-1"), value.encode("latin-1"))
        )

    async def write_body(self, data: bytes) -> None:
        self._ensure_writable()
        if data:
            self._chunks.append(data)

    async def flush_network(self) -> None:
        self._ensure_writable()
        if not self._headers_sent:
            await self._safe_send(
                {
                    "type": "http.response.start",
                    "status": self._status_code,
                    "headers": self._headers,
                }
            )
            self._headers_sent = True
        if not self._chunks:
            return
        body = b"".join(self._chunks)
        self._chunks.clear()
        await self._safe_send(
            {"type": "http.response.body", "body": body, "more_body": True}
        )
        self._bytes_sent += len(body)

    async def close(self) -> None:
        if self._closed:
            return
        await self.flush_network()
        await self._safe_send(
            {"type": "http.response.body", "body": b"", "more_body": False}
        )
        self._closed = True
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Response closed: status=%d bytes=%d",
                self._status_code,
                self._bytes_sent,
            )

    def _ensure_writable(self) -> None:
        if self._broken:
            raise TransportWriteError("Client connection already failed")
        if self._closed:
            raise TransportWriteError("Response already closed")

    async def _safe_send(self, message: Message) -> None:
        try:
            await self._send(message)
        except OSError as exc:
            self._broken = True
            logger.warning("Client write failed: %s", exc)
            raise TransportWriteError(
                f"Failed to write response to client: {exc}",
                details={"message_type": message["type"]},
            ) from exc
