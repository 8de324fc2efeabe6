"""NorthStar API Routes.

Endpoints:
- POST /northstar - Single stage endpoint; the `action` field selects
  simulateTimelines, computeTradeoffs, compilePlan or generateTrailer
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from northstar.errors import InvalidPayloadError, UnknownActionError
from northstar.stages.pipeline import DecisionPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


def get_pipeline(request: Request) -> DecisionPipeline:
    """The pipeline built once at application startup."""
    return request.app.state.pipeline


def error_body(error: str, details: str) -> dict:
    return {"error": error, "details": details}


@router.post("/northstar")
async def run_stage(
    request: Request,
    pipeline: DecisionPipeline = Depends(get_pipeline),
):
    """
    Run one pipeline stage.

    Request bodies by action:
    - simulateTimelines: {action, input}
    - computeTradeoffs: {action, timelines, goals_ranked, risk_appetite?}
    - compilePlan: {action, input, chosenTimeline}
    - generateTrailer: {action, input, chosenTimeline, plan}

    Responses are {timelines}, {tradeoffs}, a flat plan, and {trailer}.
    """
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidPayloadError("Request body must be valid JSON", str(e))

    if not isinstance(body, dict):
        raise InvalidPayloadError("Request body must be a JSON object", type(body).__name__)

    logger.info(f"=== NorthStar called with action: {body.get('action')} ===")

    try:
        return await pipeline.dispatch(body)
    except (UnknownActionError, InvalidPayloadError):
        raise
    except Exception as e:
        logger.error(f"Error in NorthStar stage {body.get('action')}: {e}")
        return JSONResponse(
            status_code=500,
            content=error_body(
                str(e) or "Unknown error occurred",
                "Check service logs for more information",
            ),
        )
