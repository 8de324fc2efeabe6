"""Structural checks for model output, one per stage.

A stage output is usable only if the raw text is a JSON object, passes the
stage's minimal shape predicate, and coerces into the stage's pydantic
model. Every failure raises OutputRejected; callers do not distinguish
malformed JSON from a shape mismatch.
"""
import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Type

from pydantic import BaseModel, ValidationError

from northstar.errors import FailureReason, OutputRejected
from northstar.stages.schemas import (
    PipelineStage,
    Plan,
    TimelinesResult,
    TradeoffsResult,
    TrailerResult,
)


def has_timelines(data: Dict[str, Any]) -> bool:
    timelines = data.get("timelines")
    return isinstance(timelines, list) and len(timelines) > 0


def has_tradeoffs(data: Dict[str, Any]) -> bool:
    return data.get("tradeoffs") is not None


def has_plan(data: Dict[str, Any]) -> bool:
    if not data.get("okr") or not data.get("weeks") or not data.get("blocks"):
        return False
    return isinstance(data["okr"], list) and len(data["okr"]) > 0


def has_trailer(data: Dict[str, Any]) -> bool:
    trailer = data.get("trailer")
    return isinstance(trailer, list) and len(trailer) > 0


@dataclass(frozen=True)
class OutputContract:
    """What a stage's model output must look like and how to unwrap it."""
    predicate: Callable[[Dict[str, Any]], bool]
    model: Type[BaseModel]
    unwrap: Callable[[Any], Any]


STAGE_CONTRACTS: Dict[PipelineStage, OutputContract] = {
    PipelineStage.TIMELINES: OutputContract(
        has_timelines, TimelinesResult, lambda parsed: parsed.timelines
    ),
    PipelineStage.TRADEOFFS: OutputContract(
        has_tradeoffs, TradeoffsResult, lambda parsed: parsed.tradeoffs
    ),
    PipelineStage.PLAN: OutputContract(has_plan, Plan, lambda parsed: parsed),
    PipelineStage.TRAILER: OutputContract(
        has_trailer, TrailerResult, lambda parsed: parsed.trailer
    ),
}


def parse_json_object(raw: str) -> Dict[str, Any]:
    """Parse model text that must be a single JSON object."""
    try:
        data = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as e:
        raise OutputRejected(FailureReason.MALFORMED_OUTPUT, f"Invalid JSON: {e}")

    if not isinstance(data, dict):
        raise OutputRejected(
            FailureReason.MALFORMED_OUTPUT,
            f"Expected a JSON object, got {type(data).__name__}",
        )
    return data


def is_valid_stage_output(stage: PipelineStage, data: Dict[str, Any]) -> bool:
    """Minimal shape predicate for a parsed stage output."""
    return STAGE_CONTRACTS[stage].predicate(data)


def validate_stage_output(stage: PipelineStage, raw: str) -> Any:
    """
    Parse, check and coerce raw model text into the stage result.

    Returns:
        List[Timeline], Tradeoffs, Plan or List[TrailerScene]

    Raises:
        OutputRejected: MALFORMED_OUTPUT or SCHEMA_VIOLATION
    """
    contract = STAGE_CONTRACTS[stage]
    data = parse_json_object(raw)

    if not contract.predicate(data):
        raise OutputRejected(
            FailureReason.SCHEMA_VIOLATION,
            f"Invalid {stage.value} response structure",
        )

    try:
        parsed = contract.model.model_validate(data)
    except ValidationError as e:
        raise OutputRejected(
            FailureReason.SCHEMA_VIOLATION,
            f"{stage.value} response failed validation: {e.error_count()} errors",
        )

    return contract.unwrap(parsed)
