"""Base model gateway interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from contracts import ProviderName, TaskKind


# Task kinds that may run on the cheaper "simple" model when one is configured
SIMPLE_TASK_KINDS = (TaskKind.RULES, TaskKind.CHECKLIST)


@dataclass(frozen=True)
class ModelHandle:
    """A configured, callable model for one provider."""
    provider: str
    model: str
    api_key: str = field(repr=False)
    simple_model: Optional[str] = None

    def model_for(self, task_kind: TaskKind) -> str:
        """Model identity used for a task kind.

        Rules and checklist use the simple model when one is configured and it
        differs from the primary; everything else uses the primary.
        """
        if task_kind in SIMPLE_TASK_KINDS and self.simple_model and self.simple_model != self.model:
            return self.simple_model
        return self.model


class ModelGateway(ABC):
    """Abstract gateway: configure a provider, then invoke templates on it."""

    def __init__(self, settings=None):
        """Initialize the gateway.

        Args:
            settings: Settings instance with credentials and model names.
                      Defaults to the global settings.
        """
        if settings is None:
            from config import settings as global_settings
            settings = global_settings
        self.settings = settings

    def configure(self, provider: ProviderName) -> ModelHandle:
        """Build a handle for ``provider``.

        Raises:
            ConfigurationError: If the provider's credential is not set.
        """
        from .factory import configure_model
        return configure_model(provider, self.settings)

    @staticmethod
    def render(template: str, variables: Dict[str, str]) -> str:
        """Substitute variables into a template.

        Raises:
            KeyError: If the template names a variable that was not supplied.
        """
        return template.format(**variables)

    @abstractmethod
    async def invoke(
        self,
        handle: ModelHandle,
        template: str,
        variables: Dict[str, str],
        model: Optional[str] = None,
    ) -> str:
        """Render the template and make one remote call.

        Args:
            handle: Configured model handle
            template: Prompt template with ``{name}`` placeholders
            variables: Values for every placeholder
            model: Model override (e.g. the handle's simple model)

        Returns:
            The generated text

        Raises:
            AuthError, QuotaError, TransportError: Classified provider failures
        """
        pass
