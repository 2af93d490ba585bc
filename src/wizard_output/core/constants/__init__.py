"""Constants module for the wizard output gateway.

This module contains constants used throughout the application and tests
to make the codebase more maintainable and the tests less fragile.
"""

from .http_status_constants import *  # noqa: F403
