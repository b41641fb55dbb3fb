"""Model gateway abstraction for multi-provider support."""

from .base import ModelGateway, ModelHandle
from .factory import PROVIDERS, configure_model, list_providers
from .litellm_provider import LiteLLMGateway, classify_error

__all__ = [
    "ModelGateway",
    "ModelHandle",
    "PROVIDERS",
    "configure_model",
    "list_providers",
    "LiteLLMGateway",
    "classify_error",
]
