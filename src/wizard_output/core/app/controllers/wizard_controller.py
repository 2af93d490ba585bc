"""
Wizard Controller

Handles the wizard page endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse, Response

from wizard_output.core.domain.page_frame import FrameContext, PageFrame
from wizard_output.core.services.builtin_steps import STEPS_PREFIX
from wizard_output.core.services.wizard_step_registry import WizardStepRegistry
from wizard_output.core.transport.fastapi.response_adapters import WizardPageResponse

logger = logging.getLogger(__name__)


class WizardController:
    """Controller for wizard page endpoints."""

    def __init__(
        self,
        registry: WizardStepRegistry,
        frame_context: FrameContext,
        frame: PageFrame | None = None,
    ) -> None:
        """Initialize the wizard controller.

        Args:
            registry: The registered wizard steps
            frame_context: Resolved strings for the page chrome
            frame: Optional page frame renderer
        """
        self._registry = registry
        self._frame_context = frame_context
        self._frame = frame or PageFrame()

    async def start(self) -> Response:
        """Send the client to the first wizard step."""
        return RedirectResponse(url=f"{STEPS_PREFIX}/{self._registry.first_step}")

    async def show_step(self, name: str, request: Request) -> Response:
        """Render the named step.

        Raises:
            StepNotFoundError: If no step is registered under ``name``
        """
        step = self._registry.get_step(name)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Rendering wizard step '%s' (%s)", name, request.method)
        return WizardPageResponse(step, request, self._frame, self._frame_context)


def create_wizard_router(controller: WizardController) -> APIRouter:
    """Create the router exposing ``controller``'s endpoints."""
    router = APIRouter(tags=["wizard"])

    @router.get("/", include_in_schema=False)
    async def start() -> Response:
        return await controller.start()

    @router.api_route(f"{STEPS_PREFIX}/{{name}}", methods=["GET", "POST"])
    async def show_step(name: str, request: Request) -> Response:
        return await controller.show_step(name, request)

    @router.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return router
