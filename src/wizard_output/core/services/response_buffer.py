"""
Buffered output for wizard steps.

Wizard steps append markup to a :class:`ResponseBuffer`. The first flush
commits the envelope (headers plus opening frame) and every later flush
pushes the pending fragments to the client in the order they were added.
"""

from __future__ import annotations

import logging

from wizard_output.core.common.exceptions import (
    LateRedirectError,
    ResponseFinalizedError,
)
from wizard_output.core.common.logging_utils import preview
from wizard_output.core.domain.envelope import EnvelopeController
from wizard_output.core.domain.envelope_mode import EnvelopeMode
from wizard_output.core.domain.page_frame import FrameContext, PageFrame
from wizard_output.core.interfaces.response_sink_interface import IResponseSink

logger = logging.getLogger(__name__)


class ResponseBuffer:
    """Accumulates body markup and controls when it reaches the client."""

    def __init__(self, sink: IResponseSink, envelope: EnvelopeController) -> None:
        self._sink = sink
        self._envelope = envelope
        self._pending: list[str] = []
        self._finalized = False

    @property
    def envelope(self) -> EnvelopeController:
        return self._envelope

    @property
    def header_done(self) -> bool:
        """Whether the headers (or the redirect) have been committed."""
        return self._envelope.committed

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    async def append(self, fragment: str) -> None:
        """Add markup and send it to the client right away."""
        self.append_no_flush(fragment)
        await self.flush()

    def append_no_flush(self, fragment: str) -> None:
        """Add markup to be sent with the next flush."""
        if self._finalized:
            raise ResponseFinalizedError(
                "Cannot add content after the response was finalized",
                details={"fragment": preview(fragment)},
            )
        if self._envelope.committed and self._envelope.mode is EnvelopeMode.REDIRECT:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Dropping fragment after redirect to %s: %s",
                    self._envelope.redirect_target,
                    preview(fragment),
                )
            return
        self._pending.append(fragment)

    def request_redirect(self, url: str) -> None:
        """Answer this request with a redirect instead of a rendered page.

        Raises:
            LateRedirectError: If headers were already sent
        """
        if self._envelope.committed:
            raise LateRedirectError(target=url)
        self._envelope.set_redirect(url)

    def use_short_header(self, use: bool = True) -> None:
        self._envelope.set_short_header(use)

    def allow_frames(self, allow: bool = True) -> None:
        self._envelope.set_allow_frames(allow)

    async def flush(self) -> None:
        """Commit the envelope if needed, then send pending fragments."""
        await self._envelope.commit()

        if self._envelope.mode is EnvelopeMode.REDIRECT:
            if self._pending:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "Discarding %d buffered fragment(s): redirect to %s carries no body",
                        len(self._pending),
                        self._envelope.redirect_target,
                    )
                self._pending.clear()
            await self._sink.flush_network()
            return

        fragments, self._pending = self._pending, []
        for fragment in fragments:
            await self._sink.write_body(fragment.encode("utf-8"))
        await self._sink.flush_network()

        if fragments and logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Flushed %d fragment(s), first: %s",
                len(fragments),
                preview(fragments[0]),
            )

    async def finalize(self) -> None:
        """Flush remaining content and close the page frame.

        Calling this more than once has no further effect.
        """
        if self._finalized:
            return
        await self.flush()
        self._finalized = True
        if self._envelope.mode.renders_frame:
            await self._envelope.write_closing_frame()
            await self._sink.flush_network()


def create_response_buffer(
    sink: IResponseSink, frame: PageFrame, context: FrameContext
) -> ResponseBuffer:
    """Create the envelope/buffer pair serving a single request."""
    return ResponseBuffer(sink, EnvelopeController(sink, frame, context))
