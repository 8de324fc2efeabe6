"""NorthStar Orchestrator - picks the model or fallback result per stage.

For every stage:
1. If the gateway has no credentials, run the fallback directly
2. Otherwise run the model-backed generator once
3. If that attempt failed (timeout, HTTP error, bad JSON, wrong shape),
   run the fallback instead

The orchestrator never raises a gateway or validation error to its caller.
"""
import logging
from typing import Any, Dict

from northstar.errors import FailureReason
from northstar.fallback import (
    build_fallback_plan,
    build_fallback_timelines,
    build_fallback_trailer,
    build_fallback_tradeoffs,
)
from northstar.gateway import ModelGateway
from northstar.stages.generators import (
    FallbackStageGenerator,
    ModelStageGenerator,
    StageOutcome,
)
from northstar.stages.prompts import PROMPT_BUILDERS, STAGE_GENERATION
from northstar.stages.schemas import PipelineStage

logger = logging.getLogger(__name__)


FALLBACK_BUILDERS = {
    PipelineStage.TIMELINES: lambda request: build_fallback_timelines(request.input),
    PipelineStage.TRADEOFFS: lambda request: build_fallback_tradeoffs(
        request.timelines, request.goals_ranked, request.risk_appetite
    ),
    PipelineStage.PLAN: lambda request: build_fallback_plan(),
    PipelineStage.TRAILER: lambda request: build_fallback_trailer(),
}


class StageOrchestrator:
    """Runs one stage at a time with model-first, fallback-second selection."""

    def __init__(self, gateway: ModelGateway):
        self.gateway = gateway
        self._model: Dict[PipelineStage, ModelStageGenerator] = {}
        self._fallback: Dict[PipelineStage, FallbackStageGenerator] = {}

        for stage in PipelineStage:
            self._model[stage] = ModelStageGenerator(
                stage,
                gateway,
                PROMPT_BUILDERS[stage],
                gateway.options(response_as_json=True, **STAGE_GENERATION[stage]),
            )
            self._fallback[stage] = FallbackStageGenerator(stage, FALLBACK_BUILDERS[stage])

    async def run(self, stage: PipelineStage, request: Any) -> StageOutcome:
        """Produce the stage result. Always returns a successful outcome."""
        model = self._model[stage]

        if model.available:
            logger.info(f"Attempting model {stage.value} generation...")
            outcome = await model.generate(request)
            if outcome.succeeded:
                logger.info(f"Model {stage.value} generation successful")
                return outcome
            failure = outcome.failure
        else:
            logger.info(f"No model API available -> using fallback {stage.value}")
            failure = FailureReason.NO_CREDENTIALS

        outcome = await self._fallback[stage].generate(request)
        outcome.failure = failure
        if failure != FailureReason.NO_CREDENTIALS:
            logger.warning(f"Falling back to deterministic {stage.value} after {failure.value}")
        return outcome
