"""
Envelope state for a single wizard response.

The envelope is the header-phase decision: redirect or rendered page, and
whether the page may be framed. It is committed exactly once, after which
every setting is frozen.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from wizard_output.core.common.exceptions import (
    EnvelopeFrozenError,
    InvalidRedirectTargetError,
    WizardOutputError,
)
from wizard_output.core.constants import (
    FRAME_OPTIONS_DENY,
    FRAME_OPTIONS_HEADER,
    HTML_CONTENT_TYPE,
)
from wizard_output.core.domain.envelope_mode import EnvelopeMode
from wizard_output.core.domain.page_frame import FrameContext, PageFrame
from wizard_output.core.interfaces.response_sink_interface import IResponseSink

logger = logging.getLogger(__name__)

# Reserved and unreserved URL characters plus "%" so existing escapes survive.
REDIRECT_SAFE_CHARS = ":/?#[]@!$&'()*+,;=%"


class EnvelopeController:
    """Owns the one-shot redirect-vs-render decision for a response."""

    def __init__(
        self, sink: IResponseSink, frame: PageFrame, context: FrameContext
    ) -> None:
        self._sink = sink
        self._frame = frame
        self._context = context
        self._committed = False
        self._committed_mode: EnvelopeMode | None = None
        self._redirect_target: str | None = None
        self._short_header: bool | None = None
        self._allow_frames = False
        self._frames_closed = False

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def mode(self) -> EnvelopeMode:
        """The current mode; never ``UNDECIDED`` once committed."""
        if self._committed_mode is not None:
            return self._committed_mode
        if self._redirect_target is not None:
            return EnvelopeMode.REDIRECT
        if self._short_header is True:
            return EnvelopeMode.RENDER_SHORT
        if self._short_header is False:
            return EnvelopeMode.RENDER_FULL
        return EnvelopeMode.UNDECIDED

    @property
    def redirect_target(self) -> str | None:
        return self._redirect_target

    @property
    def allow_frames(self) -> bool:
        return self._allow_frames

    @property
    def frames_closed(self) -> bool:
        return self._frames_closed

    def set_redirect(self, url: str) -> None:
        """Answer this request with a redirect to ``url`` instead of a page.

        Characters that cannot appear in a header, such as non-ASCII text,
        are percent-encoded.

        Raises:
            EnvelopeFrozenError: If the envelope is already committed
            InvalidRedirectTargetError: If ``url`` cannot be sent as a header
        """
        self._ensure_mutable("set_redirect")
        if not url or not url.strip():
            raise InvalidRedirectTargetError("Redirect target must not be empty")
        if "\r" in url or "\n" in url:
            raise InvalidRedirectTargetError(
                "Redirect target must not contain line breaks",
                details={"target": url},
            )
        self._redirect_target = quote(url, safe=REDIRECT_SAFE_CHARS)

    def set_allow_frames(self, allow: bool = True) -> None:
        self._ensure_mutable("set_allow_frames")
        self._allow_frames = allow

    def set_short_header(self, use: bool = True) -> None:
        self._ensure_mutable("set_short_header")
        self._short_header = use

    async def commit(self) -> None:
        """Write the headers and, when rendering, the opening frame.

        Only the first call has side effects.
        """
        if self._committed:
            return

        mode = self.mode
        if mode is EnvelopeMode.UNDECIDED:
            mode = EnvelopeMode.RENDER_FULL
        self._committed = True
        self._committed_mode = mode

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Committing envelope: mode=%s allow_frames=%s",
                mode.value,
                self._allow_frames,
            )

        self._sink.write_header("Content-Type", HTML_CONTENT_TYPE)
        if not self._allow_frames:
            self._sink.write_header(FRAME_OPTIONS_HEADER, FRAME_OPTIONS_DENY)

        if self._redirect_target is not None:
            self._sink.write_header("Location", self._redirect_target)
            return

        opening = self._frame.render_opening(mode, self._context)
        await self._sink.write_body(opening.encode("utf-8"))

    async def write_closing_frame(self) -> None:
        """Write the closing frame matching the opening one, at most once."""
        if not self._committed:
            raise WizardOutputError(
                "Closing frame requested before the envelope was committed"
            )
        if self._frames_closed or not self.mode.renders_frame:
            return
        self._frames_closed = True
        closing = self._frame.render_closing(self.mode, self._context)
        await self._sink.write_body(closing.encode("utf-8"))

    def _ensure_mutable(self, operation: str) -> None:
        if self._committed:
            raise EnvelopeFrozenError(
                f"{operation} called after sending headers",
                details={"operation": operation, "mode": self.mode.value},
            )
