"""
Value types shared by the routing layer.

Wire-facing values (requests, responses, errors) are pydantic models so the
transports can serialize them directly; validation results are plain
dataclasses produced by the validator and never leave the process as-is.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class ErrorKind(str, Enum):
    """Closed set of error codes surfaced to callers."""

    INVALID_PARAMS = "INVALID_PARAMS"
    TIMEOUT = "TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class FieldViolation:
    """One schema violation, addressed by a JSON-pointer-like path."""

    path: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating tool parameters against a schema."""

    valid: bool
    errors: Optional[List[FieldViolation]] = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def failure(cls, errors: List[FieldViolation]) -> "ValidationResult":
        return cls(valid=False, errors=list(errors))


class ToolRequest(BaseModel):
    """A single tool invocation as handed over by a transport."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    tool_name: str
    params: Any = None


class ToolError(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    code: ErrorKind
    message: str
    details: Optional[Any] = None


class ToolResponse(BaseModel):
    """
    Outcome of one routed call.

    Exactly one variant is populated: ``success=True`` with ``data`` (which may
    itself be ``None`` if the handler returned nothing), or ``success=False``
    with ``error``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    data: Any = None
    error: Optional[ToolError] = None

    @model_validator(mode="after")
    def _check_variant(self) -> "ToolResponse":
        if self.success and self.error is not None:
            raise ValueError("successful response cannot carry an error")
        if not self.success:
            if self.error is None:
                raise ValueError("failed response requires an error")
            if self.data is not None:
                raise ValueError("failed response cannot carry data")
        return self

    @classmethod
    def ok(cls, data: Any) -> "ToolResponse":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: ToolError) -> "ToolResponse":
        return cls(success=False, error=error)
