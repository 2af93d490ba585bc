"""Response-rendering gateway for a multi-step configuration wizard."""

__version__ = "0.1.0"
