"""Explicit result type for operations that talk to external providers."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ResultStatus(str, Enum):
    """Outcome of a provider-backed operation."""

    OK = "ok"
    EMPTY_STATE = "empty_state"
    PROVIDER_FAILURE = "provider_failure"


class OperationResult(BaseModel):
    """Text produced by an operation together with how it was produced.

    ``text`` is always the user-facing string: the reply, a fixed sentinel for
    empty state, or for provider failures either "" or an
    ``"Error <doing X>: <message>"`` line. ``status`` and ``error`` keep the
    distinction machine-readable.
    """

    model_config = {"frozen": True}

    status: ResultStatus = Field(description="ok, empty_state or provider_failure")
    text: str = Field(default="", description="User-facing text")
    error: Optional[str] = Field(default=None, description="Provider error message on failure")

    @classmethod
    def ok(cls, text: str) -> "OperationResult":
        return cls(status=ResultStatus.OK, text=text or "")

    @classmethod
    def empty_state(cls, sentinel: str) -> "OperationResult":
        return cls(status=ResultStatus.EMPTY_STATE, text=sentinel)

    @classmethod
    def failure(cls, error: str, text: str = "") -> "OperationResult":
        return cls(status=ResultStatus.PROVIDER_FAILURE, text=text, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status == ResultStatus.OK

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.PROVIDER_FAILURE
