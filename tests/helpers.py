"""Test doubles and builders shared across NorthStar tests."""
from typing import Optional

from northstar.config import Settings
from northstar.gateway import GenerationOptions, ModelGateway, ModelProvider, ProviderConfig
from northstar.stages.orchestrator import StageOrchestrator
from northstar.stages.pipeline import DecisionPipeline
from northstar.stages.schemas import AXES, ScoreVector, Timeline


class FakeProvider(ModelProvider):
    """Provider returning a canned reply (or raising) without network I/O."""

    def __init__(self, response: str = "", error: Optional[Exception] = None):
        super().__init__(ProviderConfig(
            tier="primary",
            api_key="test-key",
            model="gpt-5-test",
            base_url="http://model.invalid",
        ))
        self.response = response
        self.error = error
        self.calls = []

    async def complete(self, messages, options: GenerationOptions) -> str:
        self.calls.append({"messages": messages, "options": options})
        if self.error is not None:
            raise self.error
        return self.response


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    values = {
        "APP_ENV": "development",
        "OPENAI_API_KEY": "",
        "AIML_API_BASE": "",
        "AIML_API_KEY": "",
        "GPT5_MODEL": "",
        "OPENAI_MODEL": "gpt-4o",
        "MODEL_TIMEOUT_MS": 20000,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_pipeline(provider: Optional[ModelProvider] = None) -> DecisionPipeline:
    gateway = ModelGateway(make_settings(), provider=provider)
    return DecisionPipeline(StageOrchestrator(gateway))


def make_timeline(timeline_id: str, **scores) -> Timeline:
    values = {axis: 0.7 for axis in AXES}
    values.update(scores)
    return Timeline(id=timeline_id, label=f"Timeline {timeline_id}", scores=ScoreVector(**values))
