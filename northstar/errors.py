"""Failure taxonomy for the decision pipeline.

Stage failures (gateway errors and unusable model output) are always
recovered by the orchestrator. Only contract errors on the HTTP surface
reach the caller.
"""
from enum import Enum
from typing import Optional


class FailureReason(str, Enum):
    """Why a model-backed stage attempt was discarded."""
    NO_CREDENTIALS = "no_credentials"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_OUTPUT = "malformed_output"
    SCHEMA_VIOLATION = "schema_violation"


class StageFailure(Exception):
    """Base class for recoverable stage failures."""

    def __init__(self, reason: FailureReason, message: str = ""):
        self.reason = reason
        self.message = message or reason.value
        super().__init__(self.message)


class GatewayError(StageFailure):
    """The external model could not produce text."""

    def __init__(
        self,
        reason: FailureReason,
        message: str = "",
        status_code: Optional[int] = None,
    ):
        self.status_code = status_code
        super().__init__(reason, message)


class OutputRejected(StageFailure):
    """Model text was not valid JSON or did not match the stage shape."""


class UnknownActionError(Exception):
    """The request named an action the pipeline does not implement."""

    def __init__(self, action: Optional[str]):
        self.action = action
        super().__init__(f"Unknown action: {action}")


class InvalidPayloadError(Exception):
    """The request body could not be parsed into the action's inputs."""

    def __init__(self, message: str, details: str = ""):
        self.details = details
        super().__init__(message)
