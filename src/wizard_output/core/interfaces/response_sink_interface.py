from __future__ import annotations

from abc import ABC, abstractmethod


class IResponseSink(ABC):
    """Interface for the transport that carries one HTTP response.

    The sink is exclusively owned by the response buffer for the duration of
    a request. Headers can only be written until the first network flush;
    body bytes are queued by ``write_body`` and delivered by
    ``flush_network``.
    """

    @property
    @abstractmethod
    def headers_sent(self) -> bool:
        """Whether the status line and headers have reached the network."""

    @abstractmethod
    def write_header(self, name: str, value: str) -> None:
        """Record a response header.

        Raises:
            EnvelopeFrozenError: If headers were already sent
        """

    @abstractmethod
    async def write_body(self, data: bytes) -> None:
        """Queue body bytes for the next network flush."""

    @abstractmethod
    async def flush_network(self) -> None:
        """Push headers (if not yet sent) and queued body bytes to the client.

        Raises:
            TransportWriteError: If the client connection failed
        """

    @abstractmethod
    async def close(self) -> None:
        """Flush anything pending and end the response body."""
