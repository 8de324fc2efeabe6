"""External model gateway - provider resolution and single-attempt calls."""
from .client import ModelGateway, FALLBACK_ONLY
from .providers import (
    GenerationOptions,
    ModelProvider,
    OpenAICompatibleProvider,
    ProviderConfig,
    resolve_provider,
    build_request_kwargs,
    uses_completion_token_limit,
)

__all__ = [
    "ModelGateway",
    "FALLBACK_ONLY",
    "GenerationOptions",
    "ModelProvider",
    "OpenAICompatibleProvider",
    "ProviderConfig",
    "resolve_provider",
    "build_request_kwargs",
    "uses_completion_token_limit",
]
