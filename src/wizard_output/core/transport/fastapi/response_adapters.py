"""
FastAPI response adapters.

This module contains the Starlette response type that runs a wizard step
against a streaming ASGI sink.
"""

from __future__ import annotations

from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from wizard_output.core.common.logging_utils import get_logger
from wizard_output.core.domain.page_frame import FrameContext, PageFrame
from wizard_output.core.interfaces.wizard_step_interface import IWizardStep
from wizard_output.core.services.response_buffer import create_response_buffer
from wizard_output.core.transport.asgi.response_sink import ASGIResponseSink


class WizardPageResponse(Response):
    """Response that streams a wizard step's output as it is produced.

    Headers are decided by the step's envelope, not by this object: the
    ``status_code`` and ``headers`` attributes are not used when sending.
    """

    media_type = "text/html"

    def __init__(
        self,
        step: IWizardStep,
        request: Request,
        frame: PageFrame,
        context: FrameContext,
        background: BackgroundTask | None = None,
    ) -> None:
        super().__init__(background=background)
        self.step = step
        self.request = request
        self.frame = frame
        self.context = context

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        sink = ASGIResponseSink(send)
        output = create_response_buffer(sink, self.frame, self.context)
        log = get_logger(__name__).bind(step=self.step.name, path=scope.get("path"))

        try:
            await self.step.execute(output, self.request)
            await output.finalize()
            await sink.close()
        except Exception as exc:
            if sink.headers_sent:
                # Nothing can be sent to the client any more; the server
                # drops the connection when the exception reaches it.
                log.error(
                    "wizard_response_aborted",
                    error=type(exc).__name__,
                    detail=str(exc),
                    bytes_sent=sink.bytes_sent,
                )
            raise

        log.debug(
            "wizard_response_sent",
            mode=output.envelope.mode.value,
            status=sink.status_code,
            bytes_sent=sink.bytes_sent,
        )

        if self.background is not None:
            await self.background()
