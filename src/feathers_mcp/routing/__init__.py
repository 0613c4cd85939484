# Tool-call routing layer
from .deadline import pending_abandoned, with_deadline
from .dispatcher import Dispatcher
from .errors import (
    DuplicateRegistrationError,
    ErrorClassifier,
    TimeoutFailure,
    ToolCallError,
    UnknownToolError,
    ValidationFailure,
    sanitize_stack,
)
from .registry import HandlerEntry, HandlerRegistry, ToolHandler
from .types import (
    ErrorKind,
    FieldViolation,
    ToolError,
    ToolRequest,
    ToolResponse,
    ValidationResult,
)
from .validator import ParameterValidator

__all__ = [
    "Dispatcher",
    "HandlerRegistry",
    "HandlerEntry",
    "ToolHandler",
    "ParameterValidator",
    "ErrorClassifier",
    "with_deadline",
    "pending_abandoned",
    "sanitize_stack",
    "ToolCallError",
    "ValidationFailure",
    "TimeoutFailure",
    "UnknownToolError",
    "DuplicateRegistrationError",
    "ErrorKind",
    "FieldViolation",
    "ValidationResult",
    "ToolRequest",
    "ToolError",
    "ToolResponse",
]
