"""Provider registry and model handle construction."""

import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from contracts import ProviderName
from errors import ConfigurationError
from .base import ModelHandle


@dataclass(frozen=True)
class ProviderSpec:
    """How to find credentials and models for one provider in settings."""
    name: str
    credential_envs: Tuple[str, ...]
    key_field: str
    model_field: str
    simple_model_field: str
    litellm_prefix: str = ""


# Registry of supported providers
PROVIDERS: Dict[ProviderName, ProviderSpec] = {
    ProviderName.OPENAI: ProviderSpec(
        name="openai",
        credential_envs=("OPENAI_API_KEY",),
        key_field="openai_api_key",
        model_field="openai_model",
        simple_model_field="openai_simple_model",
    ),
    ProviderName.ANTHROPIC: ProviderSpec(
        name="anthropic",
        credential_envs=("ANTHROPIC_API_KEY",),
        key_field="anthropic_api_key",
        model_field="anthropic_model",
        simple_model_field="anthropic_simple_model",
        litellm_prefix="anthropic/",
    ),
    ProviderName.GEMINI: ProviderSpec(
        name="gemini",
        credential_envs=("GOOGLE_API_KEY", "GEMINI_API_KEY"),
        key_field="google_api_key",
        model_field="gemini_model",
        simple_model_field="gemini_simple_model",
        litellm_prefix="gemini/",
    ),
}


def get_provider_spec(provider) -> ProviderSpec:
    """Look up a provider by enum member or name."""
    try:
        return PROVIDERS[ProviderName(provider)]
    except ValueError:
        raise ValueError(
            f"Unknown provider: {provider}. "
            f"Available: {[p.value for p in PROVIDERS]}"
        )


def to_litellm_model(spec: ProviderSpec, model: str) -> str:
    """Map a bare model name to a LiteLLM model string (OpenAI needs no prefix)."""
    if not model or "/" in model or not spec.litellm_prefix:
        return model
    return f"{spec.litellm_prefix}{model}"


def resolve_credential(spec: ProviderSpec, settings) -> Optional[str]:
    """Settings value first, then the provider's standard env vars."""
    value = (getattr(settings, spec.key_field, "") or "").strip()
    if value:
        return value
    for env_var in spec.credential_envs:
        value = os.environ.get(env_var, "").strip()
        if value:
            return value
    return None


def configure_model(provider, settings) -> ModelHandle:
    """Build a ModelHandle for ``provider`` from settings.

    Raises:
        ConfigurationError: If no credential is configured for the provider.
    """
    spec = get_provider_spec(provider)
    api_key = resolve_credential(spec, settings)
    if not api_key:
        raise ConfigurationError(spec.name, spec.credential_envs[0])

    model = to_litellm_model(spec, getattr(settings, spec.model_field))
    simple = (getattr(settings, spec.simple_model_field, "") or "").strip()
    simple_model = to_litellm_model(spec, simple) if simple else None
    if simple_model == model:
        simple_model = None

    return ModelHandle(
        provider=spec.name,
        model=model,
        api_key=api_key,
        simple_model=simple_model,
    )


def list_providers(settings) -> Dict[str, bool]:
    """List all providers and whether a credential is configured.

    Returns:
        Dict mapping provider name to availability status
    """
    return {
        spec.name: resolve_credential(spec, settings) is not None
        for spec in PROVIDERS.values()
    }
