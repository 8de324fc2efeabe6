"""Model providers and their resolution order.

Both supported vendors speak the OpenAI chat-completions protocol, so a
provider is one ``OpenAICompatibleProvider`` with its own base URL, key
and model. The primary (AIML) provider wins over the secondary (OpenAI)
one whenever it is fully configured.
"""
import asyncio
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from openai import (
    AsyncOpenAI,
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    OpenAIError,
)

from northstar.config import Settings
from northstar.errors import FailureReason, GatewayError


PRIMARY = "primary"
SECONDARY = "secondary"

# Model families that reject `temperature` and expect `max_completion_tokens`
COMPLETION_TOKEN_MODELS = re.compile(r"(gpt-5|o3|o4|gpt-4\.1)")


@dataclass
class GenerationOptions:
    """Per-call generation settings."""
    max_tokens: int = 1200
    temperature: float = 0.4
    response_as_json: bool = False
    timeout_ms: int = 20000

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


@dataclass(frozen=True)
class ProviderConfig:
    """Connection details for one provider."""
    tier: str
    api_key: str
    model: str
    base_url: str


def resolve_provider(settings: Settings) -> Optional[ProviderConfig]:
    """
    Pick the provider to call, or None if no credentials are configured.

    Primary needs base URL, key and model name. Secondary needs only the
    OpenAI key and uses GPT5_MODEL when set, otherwise OPENAI_MODEL.
    """
    if settings.AIML_API_BASE and settings.AIML_API_KEY and settings.GPT5_MODEL:
        return ProviderConfig(
            tier=PRIMARY,
            api_key=settings.AIML_API_KEY,
            model=settings.GPT5_MODEL,
            base_url=settings.AIML_API_BASE.rstrip("/"),
        )

    if settings.OPENAI_API_KEY:
        return ProviderConfig(
            tier=SECONDARY,
            api_key=settings.OPENAI_API_KEY,
            model=settings.GPT5_MODEL or settings.OPENAI_MODEL,
            base_url=settings.OPENAI_BASE_URL,
        )

    return None


def uses_completion_token_limit(model: str) -> bool:
    """True for model families that take `max_completion_tokens` and no temperature."""
    return bool(COMPLETION_TOKEN_MODELS.search(model or ""))


def build_request_kwargs(
    model: str,
    messages: List[Dict[str, str]],
    options: GenerationOptions,
) -> Dict[str, Any]:
    """Shape the chat-completions payload for the given model family."""
    kwargs: Dict[str, Any] = {
        "model": model,
        "messages": messages,
    }

    if options.response_as_json:
        kwargs["response_format"] = {"type": "json_object"}

    if uses_completion_token_limit(model):
        kwargs["max_completion_tokens"] = options.max_tokens
    else:
        kwargs["max_tokens"] = options.max_tokens
        kwargs["temperature"] = options.temperature

    return kwargs


class ModelProvider(ABC):
    """A generative-text backend."""

    def __init__(self, config: ProviderConfig):
        self.config = config

    @abstractmethod
    async def complete(
        self,
        messages: List[Dict[str, str]],
        options: GenerationOptions,
    ) -> str:
        """
        Run one completion and return the raw message text.

        Raises GatewayError on timeout or transport failure. Never retries.
        """
        pass


class OpenAICompatibleProvider(ModelProvider):
    """Provider for any endpoint implementing OpenAI chat completions."""

    def __init__(
        self,
        config: ProviderConfig,
        client_factory: Optional[Callable[..., Any]] = None,
    ):
        super().__init__(config)
        self._client_factory = client_factory or AsyncOpenAI

    async def complete(
        self,
        messages: List[Dict[str, str]],
        options: GenerationOptions,
    ) -> str:
        kwargs = build_request_kwargs(self.config.model, messages, options)

        client = self._client_factory(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=options.timeout_seconds,
            max_retries=0,
        )

        try:
            response = await asyncio.wait_for(
                client.chat.completions.create(**kwargs),
                timeout=options.timeout_seconds,
            )
        except (asyncio.TimeoutError, APITimeoutError):
            raise GatewayError(
                FailureReason.TIMEOUT,
                f"{self.config.tier} provider timed out after {options.timeout_ms}ms",
            )
        except APIStatusError as e:
            raise GatewayError(
                FailureReason.HTTP_ERROR,
                f"API HTTP {e.status_code}: {e.message}",
                status_code=e.status_code,
            )
        except APIConnectionError as e:
            raise GatewayError(FailureReason.HTTP_ERROR, f"API connection failed: {e}")
        except OpenAIError as e:
            raise GatewayError(FailureReason.HTTP_ERROR, f"API error: {e}")
        finally:
            await client.close()

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
