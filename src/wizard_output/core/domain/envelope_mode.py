from __future__ import annotations

from enum import Enum


class EnvelopeMode(str, Enum):
    """How a wizard response begins.

    Only ``UNDECIDED`` is ever left: the other modes are terminal once the
    envelope has been committed.
    """

    UNDECIDED = "undecided"
    REDIRECT = "redirect"
    RENDER_FULL = "render_full"
    RENDER_SHORT = "render_short"

    @property
    def renders_frame(self) -> bool:
        return self in (EnvelopeMode.RENDER_FULL, EnvelopeMode.RENDER_SHORT)
