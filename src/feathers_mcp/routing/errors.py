"""
Routing errors and the classifier that maps them to ``ToolError`` values.

Only two failures are recognized by type: ``ValidationFailure`` (raised for
schema violations) and ``TimeoutFailure`` (raised by the deadline guard).
Everything else, unknown tool names included, is an internal error.
"""

import re
import traceback
from typing import Any, Callable, List, Optional, Sequence

from feathers_mcp.shared.observability import get_logger
from feathers_mcp.shared.observability.metrics import tool_errors_total

from .types import ErrorKind, FieldViolation, ToolError

logger = get_logger(__name__)

DEFAULT_VALIDATION_MESSAGE = "Invalid parameters"
DEFAULT_TIMEOUT_MESSAGE = "Operation timed out"
DEFAULT_INTERNAL_MESSAGE = "Internal error"


class ToolCallError(Exception):
    """Base for the failures the classifier recognizes by type."""


class ValidationFailure(ToolCallError):
    """Parameters did not satisfy the tool's schema."""

    def __init__(
        self,
        violations: Sequence[FieldViolation],
        message: str = DEFAULT_VALIDATION_MESSAGE,
    ):
        if not violations:
            raise ValueError("ValidationFailure requires at least one violation")
        super().__init__(message)
        self.message = message
        self.violations: List[FieldViolation] = list(violations)


class TimeoutFailure(ToolCallError):
    """An operation did not settle within its deadline."""

    def __init__(self, message: str = DEFAULT_TIMEOUT_MESSAGE):
        super().__init__(message)
        self.message = message


class UnknownToolError(LookupError):
    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class DuplicateRegistrationError(ValueError):
    def __init__(self, name: str):
        super().__init__(f'Handler for "{name}" is already registered')
        self.name = name


# File "/abs/path/module.py", line 42, in handler
_PY_FRAME_LOCATION = re.compile(r'File "[^"]*", line \d+')
# (/abs/path/file.js:12:34) or (C:\path\file.ts:1:2)
_PAREN_LOCATOR = re.compile(r"\((?:[^)\\]*[\\/])?[^:)]+:\d+:\d+\)")


def sanitize_stack(stack: Optional[str]) -> Optional[str]:
    """
    Strip file paths and line numbers from a formatted traceback.

    Keeps the call-site structure (function names, exception type) so the
    trace is still useful to an external caller. Only the two locator forms
    above are handled.
    """
    if not stack:
        return None
    lines = []
    for line in stack.splitlines():
        line = _PY_FRAME_LOCATION.sub('File "<redacted>"', line)
        line = _PAREN_LOCATOR.sub("(<redacted>)", line)
        lines.append(line)
    return "\n".join(lines)


def _safe_text(render: Callable[[Any], str], value: Any) -> Optional[str]:
    try:
        return render(value)
    except Exception:
        return None


def _format_stack(err: BaseException) -> Optional[str]:
    try:
        return "".join(traceback.format_exception(type(err), err, err.__traceback__))
    except Exception:
        return None


class ErrorClassifier:
    """
    Maps raised values to the closed ``ErrorKind`` taxonomy.

    ``classify`` does not raise: values whose ``str``/``repr`` blow up are
    reported with the generic internal message.
    """

    def classify(self, err: Any) -> ToolError:
        self._log_raw(err)
        tool_error = self._to_tool_error(err)
        tool_errors_total.labels(code=tool_error.code.value).inc()
        return tool_error

    def _log_raw(self, err: Any) -> None:
        # Operator channel: full, unsanitized detail
        error_type = type(err).__name__
        try:
            if isinstance(err, BaseException):
                logger.error(
                    "tool_error_raw",
                    error_type=error_type,
                    error=_safe_text(str, err),
                    exc_info=(type(err), err, err.__traceback__),
                )
            else:
                logger.error(
                    "tool_error_raw",
                    error_type=error_type,
                    error=_safe_text(repr, err),
                )
        except Exception:
            # Rendering the traceback failed; keep at least the type
            logger.error("tool_error_raw", error_type=error_type, error=None)

    def _to_tool_error(self, err: Any) -> ToolError:
        if isinstance(err, ValidationFailure):
            return ToolError(
                code=ErrorKind.INVALID_PARAMS,
                message=err.message or DEFAULT_VALIDATION_MESSAGE,
                details={"errors": [v.to_dict() for v in err.violations]},
            )

        if isinstance(err, TimeoutFailure):
            return ToolError(
                code=ErrorKind.TIMEOUT,
                message=err.message or DEFAULT_TIMEOUT_MESSAGE,
            )

        if isinstance(err, BaseException):
            return ToolError(
                code=ErrorKind.INTERNAL_ERROR,
                message=_safe_text(str, err) or DEFAULT_INTERNAL_MESSAGE,
                details={"stack": sanitize_stack(_format_stack(err))},
            )

        return ToolError(
            code=ErrorKind.INTERNAL_ERROR,
            message=DEFAULT_INTERNAL_MESSAGE,
            details={"stack": None},
        )
