from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from starlette.requests import Request

if TYPE_CHECKING:
    from wizard_output.core.services.response_buffer import ResponseBuffer


class IWizardStep(ABC):
    """Interface for a page of the configuration wizard.

    A step produces markup through the output buffer it is handed. It may
    choose a redirect, the short header or framing before its first
    ``append`` call; afterwards the envelope is frozen.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The step name used in URLs."""

    @abstractmethod
    async def execute(self, output: ResponseBuffer, request: Request) -> None:
        """Write this step's content to ``output``.

        Args:
            output: The response buffer for the current request
            request: The incoming HTTP request
        """
