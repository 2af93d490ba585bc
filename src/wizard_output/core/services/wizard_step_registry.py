from __future__ import annotations

import logging

from wizard_output.core.common.exceptions import ConfigurationError, StepNotFoundError
from wizard_output.core.interfaces.wizard_step_interface import IWizardStep

logger = logging.getLogger(__name__)


class WizardStepRegistry:
    """An ordered registry of wizard steps, looked up by name."""

    def __init__(self) -> None:
        self._steps: dict[str, IWizardStep] = {}

    def register_step(self, step: IWizardStep) -> None:
        """Registers a step under its name.

        Args:
            step: The wizard step to register.

        Raises:
            ConfigurationError: If the name is empty or already registered.
        """
        name = step.name
        if not isinstance(name, str) or not name:
            raise ConfigurationError("Wizard step name must be a non-empty string.")
        if name in self._steps:
            raise ConfigurationError(
                f"Wizard step '{name}' is already registered.",
                details={"step_name": name},
            )
        self._steps[name] = step
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Registered wizard step '%s'", name)

    def get_step(self, name: str) -> IWizardStep:
        """Retrieves a registered step.

        Raises:
            StepNotFoundError: If no step is registered under ``name``.
        """
        step = self._steps.get(name)
        if step is None:
            raise StepNotFoundError(
                f"Wizard step '{name}' is not registered.", step_name=name
            )
        return step

    def get_registered_steps(self) -> list[str]:
        """Returns step names in registration order."""
        return list(self._steps.keys())

    @property
    def first_step(self) -> str:
        if not self._steps:
            raise ConfigurationError("No wizard steps are registered.")
        return next(iter(self._steps))
