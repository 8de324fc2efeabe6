"""
Tests for the Model Gateway.

Tests cover provider resolution, request shaping per model family and
the error mapping of a single completion attempt.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import (
    APIConnectionError,
    APIError,
    APIResponseValidationError,
    APIStatusError,
    APITimeoutError,
)

from northstar.errors import FailureReason, GatewayError
from northstar.gateway import (
    FALLBACK_ONLY,
    GenerationOptions,
    ModelGateway,
    OpenAICompatibleProvider,
    ProviderConfig,
    build_request_kwargs,
    resolve_provider,
    uses_completion_token_limit,
)

from tests.helpers import FakeProvider, make_settings


MESSAGES = [
    {"role": "system", "content": "sys"},
    {"role": "user", "content": "usr"},
]

OPENAI_CONFIG = ProviderConfig(
    tier="secondary",
    api_key="sk-test",
    model="gpt-4o",
    base_url="https://api.openai.com/v1",
)

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def completion(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


def mock_client(create):
    client = MagicMock()
    client.chat.completions.create = create
    client.close = AsyncMock()
    return client


# =============================================================================
# Provider resolution
# =============================================================================

class TestResolveProvider:

    def test_no_credentials(self):
        assert resolve_provider(make_settings()) is None

    def test_primary_requires_all_three(self):
        settings = make_settings(AIML_API_BASE="https://aiml.example/v1", AIML_API_KEY="k")

        assert resolve_provider(settings) is None

    def test_primary_wins_over_secondary(self):
        settings = make_settings(
            AIML_API_BASE="https://aiml.example/v1/",
            AIML_API_KEY="aiml-key",
            GPT5_MODEL="gpt-5",
            OPENAI_API_KEY="sk-test",
        )

        config = resolve_provider(settings)

        assert config.tier == "primary"
        assert config.api_key == "aiml-key"
        assert config.model == "gpt-5"
        assert config.base_url == "https://aiml.example/v1"

    def test_secondary_uses_openai_model(self):
        config = resolve_provider(make_settings(OPENAI_API_KEY="sk-test"))

        assert config.tier == "secondary"
        assert config.model == "gpt-4o"
        assert config.base_url == "https://api.openai.com/v1"

    def test_secondary_prefers_gpt5_model_name(self):
        config = resolve_provider(make_settings(OPENAI_API_KEY="sk-test", GPT5_MODEL="gpt-5-mini"))

        assert config.tier == "secondary"
        assert config.model == "gpt-5-mini"


# =============================================================================
# Request shaping
# =============================================================================

class TestRequestShaping:

    @pytest.mark.parametrize("model,expected", [
        ("gpt-5", True),
        ("openai/gpt-5-chat", True),
        ("o3-mini", True),
        ("o4-mini", True),
        ("gpt-4.1", True),
        ("gpt-4o", False),
        ("gpt-4o-mini", False),
        ("", False),
    ])
    def test_model_family(self, model, expected):
        assert uses_completion_token_limit(model) is expected

    def test_newer_family_omits_temperature(self):
        kwargs = build_request_kwargs("gpt-5", MESSAGES, GenerationOptions(max_tokens=900))

        assert kwargs["max_completion_tokens"] == 900
        assert "max_tokens" not in kwargs
        assert "temperature" not in kwargs

    def test_classic_family_sends_temperature(self):
        options = GenerationOptions(max_tokens=800, temperature=0.3, response_as_json=True)

        kwargs = build_request_kwargs("gpt-4o", MESSAGES, options)

        assert kwargs["max_tokens"] == 800
        assert kwargs["temperature"] == 0.3
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"] == MESSAGES

    def test_plain_text_has_no_response_format(self):
        kwargs = build_request_kwargs("gpt-4o", MESSAGES, GenerationOptions())

        assert "response_format" not in kwargs


# =============================================================================
# OpenAI-compatible provider
# =============================================================================

class TestOpenAICompatibleProvider:

    @pytest.mark.asyncio
    async def test_returns_message_content(self):
        client = mock_client(AsyncMock(return_value=completion('{"ok": true}')))
        factory = MagicMock(return_value=client)
        provider = OpenAICompatibleProvider(OPENAI_CONFIG, client_factory=factory)

        content = await provider.complete(MESSAGES, GenerationOptions())

        assert content == '{"ok": true}'
        factory.assert_called_once_with(
            api_key="sk-test",
            base_url="https://api.openai.com/v1",
            timeout=20.0,
            max_retries=0,
        )
        client.chat.completions.create.assert_awaited_once()
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_null_content_is_empty_string(self):
        client = mock_client(AsyncMock(return_value=completion(None)))
        provider = OpenAICompatibleProvider(OPENAI_CONFIG, client_factory=MagicMock(return_value=client))

        assert await provider.complete(MESSAGES, GenerationOptions()) == ""

    @pytest.mark.asyncio
    async def test_slow_call_times_out(self):
        async def slow(**kwargs):
            await asyncio.sleep(1)
            return completion("late")

        client = mock_client(slow)
        provider = OpenAICompatibleProvider(OPENAI_CONFIG, client_factory=MagicMock(return_value=client))

        with pytest.raises(GatewayError) as exc_info:
            await provider.complete(MESSAGES, GenerationOptions(timeout_ms=10))

        assert exc_info.value.reason == FailureReason.TIMEOUT
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sdk_timeout_maps_to_timeout(self):
        client = mock_client(AsyncMock(side_effect=APITimeoutError(request=REQUEST)))
        provider = OpenAICompatibleProvider(OPENAI_CONFIG, client_factory=MagicMock(return_value=client))

        with pytest.raises(GatewayError) as exc_info:
            await provider.complete(MESSAGES, GenerationOptions())

        assert exc_info.value.reason == FailureReason.TIMEOUT

    @pytest.mark.asyncio
    async def test_http_status_maps_to_http_error(self):
        error = APIStatusError(
            "Service Unavailable",
            response=httpx.Response(503, request=REQUEST),
            body=None,
        )
        client = mock_client(AsyncMock(side_effect=error))
        provider = OpenAICompatibleProvider(OPENAI_CONFIG, client_factory=MagicMock(return_value=client))

        with pytest.raises(GatewayError) as exc_info:
            await provider.complete(MESSAGES, GenerationOptions())

        assert exc_info.value.reason == FailureReason.HTTP_ERROR
        assert exc_info.value.status_code == 503
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connection_failure_maps_to_http_error(self):
        client = mock_client(AsyncMock(side_effect=APIConnectionError(request=REQUEST)))
        provider = OpenAICompatibleProvider(OPENAI_CONFIG, client_factory=MagicMock(return_value=client))

        with pytest.raises(GatewayError) as exc_info:
            await provider.complete(MESSAGES, GenerationOptions())

        assert exc_info.value.reason == FailureReason.HTTP_ERROR
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        APIResponseValidationError(response=httpx.Response(200, request=REQUEST), body=None),
        APIError("Unexpected SDK failure", request=REQUEST, body=None),
    ])
    async def test_other_sdk_errors_map_to_http_error(self, error):
        client = mock_client(AsyncMock(side_effect=error))
        provider = OpenAICompatibleProvider(OPENAI_CONFIG, client_factory=MagicMock(return_value=client))

        with pytest.raises(GatewayError) as exc_info:
            await provider.complete(MESSAGES, GenerationOptions())

        assert exc_info.value.reason == FailureReason.HTTP_ERROR
        client.close.assert_awaited_once()


# =============================================================================
# Gateway
# =============================================================================

class TestModelGateway:

    @pytest.mark.asyncio
    async def test_no_credentials_never_calls_out(self):
        factory = MagicMock()
        gateway = ModelGateway(make_settings(), client_factory=factory)

        with pytest.raises(GatewayError) as exc_info:
            await gateway.generate("sys", "usr")

        assert exc_info.value.reason == FailureReason.NO_CREDENTIALS
        factory.assert_not_called()
        assert gateway.tier == FALLBACK_ONLY
        assert gateway.model is None

    @pytest.mark.asyncio
    async def test_resolved_provider_is_used(self):
        client = mock_client(AsyncMock(return_value=completion("hello")))
        factory = MagicMock(return_value=client)
        settings = make_settings(OPENAI_API_KEY="sk-test", MODEL_TIMEOUT_MS=5000)
        gateway = ModelGateway(settings, client_factory=factory)

        assert await gateway.generate("sys", "usr") == "hello"
        assert gateway.tier == "secondary"
        assert factory.call_args.kwargs["timeout"] == 5.0

        sent = client.chat.completions.create.call_args.kwargs
        assert sent["messages"] == MESSAGES
        assert sent["model"] == "gpt-4o"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["", "   \n"])
    async def test_blank_reply_is_empty_response(self, reply):
        gateway = ModelGateway(make_settings(), provider=FakeProvider(response=reply))

        with pytest.raises(GatewayError) as exc_info:
            await gateway.generate("sys", "usr")

        assert exc_info.value.reason == FailureReason.EMPTY_RESPONSE

    @pytest.mark.asyncio
    async def test_provider_errors_propagate(self):
        error = GatewayError(FailureReason.TIMEOUT, "slow")
        gateway = ModelGateway(make_settings(), provider=FakeProvider(error=error))

        with pytest.raises(GatewayError) as exc_info:
            await gateway.generate("sys", "usr")

        assert exc_info.value is error

    def test_options_apply_configured_timeout(self):
        gateway = ModelGateway(make_settings(MODEL_TIMEOUT_MS=1500))

        options = gateway.options(max_tokens=600, response_as_json=True)

        assert options.timeout_ms == 1500
        assert options.max_tokens == 600
        assert options.response_as_json is True
