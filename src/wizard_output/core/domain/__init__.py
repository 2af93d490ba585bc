# Domain package

from .envelope import EnvelopeController
from .envelope_mode import EnvelopeMode
from .page_frame import DocLink, FrameContext, HeadAttributes, PageFrame

__all__ = [
    "DocLink",
    "EnvelopeController",
    "EnvelopeMode",
    "FrameContext",
    "HeadAttributes",
    "PageFrame",
]
