"""
Stage generators - the two interchangeable implementations of a stage.

Each stage can be produced by:
- ModelStageGenerator: one gateway call, then parse + validate
- FallbackStageGenerator: a pure function of the stage request

Both return a StageOutcome. The model-backed generator reports an
unusable attempt as an outcome with no result instead of raising, so the
orchestrator only has to pick which implementation's outcome to keep.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from northstar.errors import FailureReason, StageFailure
from northstar.gateway import GenerationOptions, ModelGateway
from northstar.stages.schemas import PipelineStage
from northstar.stages.validators import validate_stage_output

logger = logging.getLogger(__name__)

MODEL = "model"
FALLBACK = "fallback"


@dataclass
class StageOutcome:
    """Result of running one stage implementation."""
    stage: PipelineStage
    source: str
    result: Any = None
    failure: Optional[FailureReason] = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None


class StageGenerator(ABC):
    """Produces a stage result from a stage request."""

    source: str = ""

    def __init__(self, stage: PipelineStage):
        self.stage = stage

    @abstractmethod
    async def generate(self, request: Any) -> StageOutcome:
        pass


class FallbackStageGenerator(StageGenerator):
    """Deterministic implementation. Always succeeds."""

    source = FALLBACK

    def __init__(self, stage: PipelineStage, build: Callable[[Any], Any]):
        super().__init__(stage)
        self._build = build

    async def generate(self, request: Any) -> StageOutcome:
        return StageOutcome(stage=self.stage, source=self.source, result=self._build(request))


class ModelStageGenerator(StageGenerator):
    """Gateway-backed implementation. Single attempt, no retries."""

    source = MODEL

    def __init__(
        self,
        stage: PipelineStage,
        gateway: ModelGateway,
        build_prompt: Callable[[Any], Tuple[str, str]],
        options: GenerationOptions,
    ):
        super().__init__(stage)
        self._gateway = gateway
        self._build_prompt = build_prompt
        self._options = options

    @property
    def available(self) -> bool:
        return self._gateway.is_configured

    async def generate(self, request: Any) -> StageOutcome:
        system, user = self._build_prompt(request)

        try:
            raw = await self._gateway.generate(system, user, self._options)
            result = validate_stage_output(self.stage, raw)
        except StageFailure as e:
            logger.warning(f"Model {self.stage.value} attempt discarded ({e.reason.value}): {e.message}")
            return StageOutcome(stage=self.stage, source=self.source, failure=e.reason)
        except Exception as e:
            logger.error(f"Unexpected error in model {self.stage.value} generation: {e}")
            return StageOutcome(
                stage=self.stage, source=self.source, failure=FailureReason.HTTP_ERROR
            )

        return StageOutcome(stage=self.stage, source=self.source, result=result)
