"""
Built-in wizard steps.

These steps cover each way a response can begin: a full page, a page fed
incrementally while work is in progress, a short page for embedded
callbacks, and a redirect.
"""

from __future__ import annotations

import asyncio
from html import escape

from starlette.requests import Request

from wizard_output.core.interfaces.wizard_step_interface import IWizardStep
from wizard_output.core.services.response_buffer import ResponseBuffer
from wizard_output.core.services.wizard_step_registry import WizardStepRegistry

STEPS_PREFIX = "/steps"


class WelcomeStep(IWizardStep):
    """Introductory page rendered inside the full frame."""

    def __init__(self, next_step: str = "install") -> None:
        self._next_step = next_step

    @property
    def name(self) -> str:
        return "welcome"

    async def execute(self, output: ResponseBuffer, request: Request) -> None:
        output.append_no_flush("<p>Welcome to the configuration wizard.</p>\n")
        output.append_no_flush(
            f'<p><a href="{STEPS_PREFIX}/{escape(self._next_step)}">Continue</a></p>\n'
        )
        await output.flush()


class InstallStep(IWizardStep):
    """Runs the installation tasks and reports progress as each one completes."""

    def __init__(
        self, tasks: tuple[str, ...] | None = None, delay: float = 0.0
    ) -> None:
        self._tasks = tasks or (
            "Creating tables",
            "Populating default data",
            "Writing settings",
        )
        self._delay = delay

    @property
    def name(self) -> str:
        return "install"

    async def execute(self, output: ResponseBuffer, request: Request) -> None:
        await output.append('<ul class="install-progress">\n')
        for task in self._tasks:
            if self._delay:
                await asyncio.sleep(self._delay)
            await output.append(f"<li>{escape(task)}... done</li>\n")
        await output.append("</ul>\n<p>Installation complete.</p>\n")


class LicenseCallbackStep(IWizardStep):
    """Lightweight page loaded inside a license chooser frame."""

    @property
    def name(self) -> str:
        return "license-callback"

    async def execute(self, output: ResponseBuffer, request: Request) -> None:
        output.use_short_header()
        output.allow_frames()
        license_name = request.query_params.get("license", "")
        output.append_no_flush(
            f'<p class="license-result">{escape(license_name)}</p>\n'
        )


class RestartStep(IWizardStep):
    """Sends the client back to the start of the wizard."""

    def __init__(self, target_step: str = "welcome") -> None:
        self._target_step = target_step

    @property
    def name(self) -> str:
        return "restart"

    async def execute(self, output: ResponseBuffer, request: Request) -> None:
        output.request_redirect(f"{STEPS_PREFIX}/{self._target_step}")


def build_default_registry(install_delay: float = 0.0) -> WizardStepRegistry:
    """Create a registry holding the built-in steps, ``welcome`` first."""
    registry = WizardStepRegistry()
    registry.register_step(WelcomeStep())
    registry.register_step(InstallStep(delay=install_delay))
    registry.register_step(LicenseCallbackStep())
    registry.register_step(RestartStep())
    return registry
