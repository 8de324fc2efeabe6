"""
Decision Pipeline - the four stage operations.

Sequencing is the caller's job: each operation is independent, holds no
state between calls, and takes the previous stage's output as explicit
input. `run_full_pipeline` threads all four for callers that want one
shot, using the recommended timeline as the chosen one.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from northstar.errors import InvalidPayloadError, UnknownActionError
from northstar.stages.generators import StageOutcome
from northstar.stages.orchestrator import StageOrchestrator
from northstar.stages.schemas import (
    PipelineStage,
    Plan,
    PlanRequest,
    ProjectInput,
    ProjectResult,
    StageAction,
    Timeline,
    TimelinesRequest,
    Tradeoffs,
    TradeoffsRequest,
    TrailerRequest,
    TrailerScene,
)

logger = logging.getLogger(__name__)


ACTION_REQUESTS = {
    StageAction.SIMULATE_TIMELINES: TimelinesRequest,
    StageAction.COMPUTE_TRADEOFFS: TradeoffsRequest,
    StageAction.COMPILE_PLAN: PlanRequest,
    StageAction.GENERATE_TRAILER: TrailerRequest,
}


class DecisionPipeline:
    """Stateless facade over the orchestrator."""

    def __init__(self, orchestrator: StageOrchestrator):
        self.orchestrator = orchestrator

    # ==========================================================================
    # Stage operations
    # ==========================================================================

    async def generate_timelines(self, project_input: ProjectInput) -> List[Timeline]:
        outcome = await self._timelines(project_input)
        return outcome.result

    async def analyze_tradeoffs(
        self,
        timelines: List[Timeline],
        goals_ranked: List[str],
        risk_appetite: Optional[str] = None,
    ) -> Tradeoffs:
        outcome = await self._tradeoffs(timelines, goals_ranked, risk_appetite)
        return outcome.result

    async def compile_plan(
        self,
        project_input: ProjectInput,
        chosen_timeline: Timeline,
    ) -> Plan:
        outcome = await self._plan(project_input, chosen_timeline)
        return outcome.result

    async def generate_trailer(
        self,
        project_input: ProjectInput,
        chosen_timeline: Timeline,
        plan: Optional[Plan] = None,
    ) -> List[TrailerScene]:
        outcome = await self._trailer(project_input, chosen_timeline, plan)
        return outcome.result

    # ==========================================================================
    # Action dispatch (HTTP contract)
    # ==========================================================================

    async def dispatch(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run the stage named by `body["action"]` and return the wire response.

        Raises:
            UnknownActionError: action missing or not one of the four stages
            InvalidPayloadError: payload does not fit the action's inputs
        """
        raw_action = body.get("action")
        try:
            action = StageAction(raw_action)
        except ValueError:
            raise UnknownActionError(raw_action)

        payload = {key: value for key, value in body.items() if key != "action"}
        try:
            request = ACTION_REQUESTS[action].model_validate(payload)
        except ValidationError as e:
            raise InvalidPayloadError(f"Invalid payload for {action.value}", str(e))

        if action == StageAction.SIMULATE_TIMELINES:
            outcome = await self.orchestrator.run(PipelineStage.TIMELINES, request)
            response = {"timelines": [timeline.to_wire() for timeline in outcome.result]}
        elif action == StageAction.COMPUTE_TRADEOFFS:
            outcome = await self.orchestrator.run(PipelineStage.TRADEOFFS, request)
            response = {"tradeoffs": outcome.result.to_wire()}
        elif action == StageAction.COMPILE_PLAN:
            outcome = await self.orchestrator.run(PipelineStage.PLAN, request)
            response = outcome.result.to_wire()
        else:
            outcome = await self.orchestrator.run(PipelineStage.TRAILER, request)
            response = {"trailer": [scene.to_wire() for scene in outcome.result]}

        logger.info(f"=== {action.value} completed via {outcome.source} ===")
        return response

    # ==========================================================================
    # Full run
    # ==========================================================================

    async def run_full_pipeline(self, project_input: ProjectInput) -> ProjectResult:
        """
        Run all four stages in order.

        The chosen timeline is the recommended one; if the recommendation
        names an id that is not among the timelines, the first is used.
        """
        result = ProjectResult(project_id=project_input.id)

        timelines = await self._timelines(project_input)
        result.timelines = timelines.result
        result.sources[PipelineStage.TIMELINES.value] = timelines.source

        tradeoffs = await self._tradeoffs(
            result.timelines,
            project_input.profile.goals_ranked,
            project_input.profile.risk_appetite,
        )
        result.tradeoffs = tradeoffs.result
        result.sources[PipelineStage.TRADEOFFS.value] = tradeoffs.source

        chosen = select_timeline(
            result.timelines,
            result.tradeoffs.recommendation.chosen_timeline_id,
        )

        plan = await self._plan(project_input, chosen)
        result.plan = plan.result
        result.sources[PipelineStage.PLAN.value] = plan.source

        trailer = await self._trailer(project_input, chosen, result.plan)
        result.trailer = trailer.result
        result.sources[PipelineStage.TRAILER.value] = trailer.source

        return result

    # ==========================================================================
    # Internals
    # ==========================================================================

    async def _timelines(self, project_input: ProjectInput) -> StageOutcome:
        return await self.orchestrator.run(
            PipelineStage.TIMELINES,
            TimelinesRequest(input=project_input),
        )

    async def _tradeoffs(self, timelines, goals_ranked, risk_appetite) -> StageOutcome:
        return await self.orchestrator.run(
            PipelineStage.TRADEOFFS,
            TradeoffsRequest(
                timelines=timelines,
                goals_ranked=goals_ranked,
                risk_appetite=risk_appetite,
            ),
        )

    async def _plan(self, project_input, chosen_timeline) -> StageOutcome:
        return await self.orchestrator.run(
            PipelineStage.PLAN,
            PlanRequest(input=project_input, chosen_timeline=chosen_timeline),
        )

    async def _trailer(self, project_input, chosen_timeline, plan) -> StageOutcome:
        return await self.orchestrator.run(
            PipelineStage.TRAILER,
            TrailerRequest(input=project_input, chosen_timeline=chosen_timeline, plan=plan),
        )


def select_timeline(timelines: List[Timeline], timeline_id: str) -> Timeline:
    """Find a timeline by id, defaulting to the first one."""
    for timeline in timelines:
        if timeline.id == timeline_id:
            return timeline
    return timelines[0]
