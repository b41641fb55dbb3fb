"""LiteLLM-backed gateway. Single implementation for all provider calls."""

import logging
import re
from typing import Dict, Optional

from errors import AuthError, GatewayError, QuotaError, TransportError
from .base import ModelGateway, ModelHandle

logger = logging.getLogger(__name__)


# Fallback patterns for exceptions that are not LiteLLM's own classes. Status
# codes must stand alone so token counts or request IDs do not match.
_AUTH_PATTERN = re.compile(
    r"\b40[13]\b|api[ _]key|unauthorized|authentication|permission denied",
    re.IGNORECASE,
)
_QUOTA_PATTERN = re.compile(
    r"\b429\b|quota|rate[ _]limit|too many requests|resource_exhausted",
    re.IGNORECASE,
)


def _scrub(message: str, api_key: Optional[str]) -> str:
    """Remove the credential from a provider message before it is logged or wrapped."""
    if api_key:
        message = message.replace(api_key, "***")
    return message


def classify_error(provider: str, error: Exception, api_key: Optional[str] = None) -> GatewayError:
    """Normalize a provider exception into AuthError, QuotaError or TransportError."""
    if isinstance(error, GatewayError):
        return error

    import litellm

    message = _scrub(str(error) or error.__class__.__name__, api_key)

    if isinstance(error, (litellm.AuthenticationError, litellm.PermissionDeniedError)):
        return AuthError(provider, message)
    if isinstance(error, (litellm.RateLimitError, litellm.BudgetExceededError)):
        return QuotaError(provider, message)
    if isinstance(error, (
        litellm.APIConnectionError,
        litellm.Timeout,
        litellm.ServiceUnavailableError,
        litellm.InternalServerError,
    )):
        return TransportError(provider, message)

    if _AUTH_PATTERN.search(message):
        return AuthError(provider, message)
    if _QUOTA_PATTERN.search(message):
        return QuotaError(provider, message)
    return TransportError(provider, message)


class LiteLLMGateway(ModelGateway):
    """Gateway that delegates to ``litellm.acompletion``.

    One call per invocation; no retries. A failure is terminal for the task
    that made it.
    """

    def __init__(self, settings=None, max_tokens: Optional[int] = None):
        """Initialize the gateway.

        Args:
            settings: Settings instance. Defaults to the global settings.
            max_tokens: Maximum tokens in each response. Defaults to
                        settings.max_tokens_per_call.
        """
        super().__init__(settings)
        self.max_tokens = max_tokens or self.settings.max_tokens_per_call

    async def invoke(
        self,
        handle: ModelHandle,
        template: str,
        variables: Dict[str, str],
        model: Optional[str] = None,
    ) -> str:
        import litellm

        prompt = self.render(template, variables)
        resolved_model = model or handle.model
        logger.debug("Calling %s model %s (%d prompt chars)", handle.provider, resolved_model, len(prompt))

        try:
            response = await litellm.acompletion(
                model=resolved_model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                api_key=handle.api_key,
            )
        except Exception as e:
            raise classify_error(handle.provider, e, handle.api_key) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError):
            content = None
        if not content or not content.strip():
            raise TransportError(handle.provider, "response did not contain any generated text")
        return content.strip()
