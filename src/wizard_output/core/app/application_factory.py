"""
Application factory for creating the FastAPI application.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from wizard_output.core.app.controllers.wizard_controller import (
    WizardController,
    create_wizard_router,
)
from wizard_output.core.app.error_handlers import configure_exception_handlers
from wizard_output.core.config.app_config import AppConfig
from wizard_output.core.services.builtin_steps import build_default_registry
from wizard_output.core.services.wizard_step_registry import WizardStepRegistry


def build_app(
    config: AppConfig | dict[str, Any] | None = None,
    registry: WizardStepRegistry | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: The application configuration (AppConfig object or dict)
        registry: Wizard steps to serve; the built-in steps when omitted

    Returns:
        The FastAPI ASGI application instance.
    """
    if config is None:
        config = AppConfig.from_env()
    elif isinstance(config, dict):
        config = AppConfig(**config)

    if registry is None:
        registry = build_default_registry(install_delay=config.install_step_delay)

    app = FastAPI(title=config.frame.title, docs_url=None, redoc_url=None)
    app.state.app_config = config
    app.state.step_registry = registry

    controller = WizardController(registry, config.frame.to_frame_context())
    app.include_router(create_wizard_router(controller))
    configure_exception_handlers(app)
    return app
