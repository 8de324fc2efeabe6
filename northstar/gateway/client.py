"""External model gateway.

One attempt per call under a hard timeout. Whether to retry or fall back
is the orchestrator's decision, never the gateway's.
"""
import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from northstar.config import Settings
from northstar.errors import FailureReason, GatewayError
from northstar.gateway.providers import (
    GenerationOptions,
    ModelProvider,
    OpenAICompatibleProvider,
    resolve_provider,
)

logger = logging.getLogger(__name__)

FALLBACK_ONLY = "fallback-only"


class ModelGateway:
    """
    Calls the configured generative-text provider.

    The settings object is read once at construction; the resolved provider
    does not change for the lifetime of the gateway.
    """

    def __init__(
        self,
        settings: Settings,
        provider: Optional[ModelProvider] = None,
        client_factory: Optional[Callable[..., Any]] = None,
    ):
        self._settings = settings

        if provider is None:
            config = resolve_provider(settings)
            if config is not None:
                provider = OpenAICompatibleProvider(config, client_factory)

        self._provider = provider

    @property
    def is_configured(self) -> bool:
        return self._provider is not None

    @property
    def tier(self) -> str:
        """'primary', 'secondary' or 'fallback-only'."""
        if self._provider is None:
            return FALLBACK_ONLY
        return self._provider.config.tier

    @property
    def model(self) -> Optional[str]:
        return self._provider.config.model if self._provider else None

    def options(self, **overrides) -> GenerationOptions:
        """Generation options with the configured timeout applied."""
        base = GenerationOptions(timeout_ms=self._settings.MODEL_TIMEOUT_MS)
        return replace(base, **overrides)

    async def generate(
        self,
        system: str,
        user: str,
        options: Optional[GenerationOptions] = None,
    ) -> str:
        """
        Send a system + user instruction pair and return the raw reply text.

        Raises:
            GatewayError: NO_CREDENTIALS, TIMEOUT, HTTP_ERROR or EMPTY_RESPONSE
        """
        if self._provider is None:
            raise GatewayError(
                FailureReason.NO_CREDENTIALS,
                "No API keys available - need either OPENAI_API_KEY or "
                "AIML_API_BASE, AIML_API_KEY and GPT5_MODEL",
            )

        options = options or self.options()
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]

        logger.info(f"Calling {self.tier} provider with model {self.model}")
        content = await self._provider.complete(messages, options)

        if not content.strip():
            raise GatewayError(FailureReason.EMPTY_RESPONSE, "Model returned no content")

        logger.debug(f"Model response received, content length: {len(content)}")
        return content
