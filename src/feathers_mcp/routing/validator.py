"""
JSON Schema parameter validation with a compiled-validator cache.

Compiled validators are memoized by a canonical serialization of the schema,
so a schema passed as a fresh dict on every call still hits the cache. The
cache is a plain dict: two requests racing to compile the same schema both do
the work and the later write wins, which is harmless.
"""

import json
from typing import Any, Dict, Iterable, Mapping

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError as JsonSchemaError
from jsonschema.protocols import Validator

from feathers_mcp.shared.observability import get_logger
from feathers_mcp.shared.observability.metrics import validator_cache_total

from .types import FieldViolation, ValidationResult

logger = get_logger(__name__)


def _escape_pointer_token(token: Any) -> str:
    return str(token).replace("~", "~0").replace("/", "~1")


def _pointer(parts: Iterable[Any]) -> str:
    return "".join(f"/{_escape_pointer_token(p)}" for p in parts)


class ParameterValidator:
    """Validates tool parameters against JSON Schemas (Draft 7 by default)."""

    def __init__(self, validator_cls: type = Draft7Validator):
        self._validator_cls = validator_cls
        self._cache: Dict[str, Validator] = {}

    @staticmethod
    def fingerprint(schema: Any) -> str:
        try:
            return json.dumps(schema, sort_keys=True, separators=(",", ":"))
        except (TypeError, ValueError):
            return repr(schema)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def compile(self, schema: Mapping[str, Any]) -> Validator:
        """
        Return the compiled validator for ``schema``, compiling on a miss.

        Raises:
            jsonschema.SchemaError: If the schema itself is malformed
        """
        key = self.fingerprint(schema)
        compiled = self._cache.get(key)
        if compiled is not None:
            validator_cache_total.labels(result="hit").inc()
            return compiled

        validator_cache_total.labels(result="miss").inc()
        self._validator_cls.check_schema(schema)
        compiled = self._validator_cls(schema)
        self._cache[key] = compiled
        logger.debug("schema_validator_compiled", cache_size=len(self._cache))
        return compiled

    def validate(self, params: Any, schema: Mapping[str, Any]) -> ValidationResult:
        compiled = self.compile(schema)
        violations = [self._to_violation(e) for e in compiled.iter_errors(params)]
        if not violations:
            return ValidationResult.success()
        violations.sort(key=lambda v: (v.path, v.message))
        return ValidationResult.failure(violations)

    @staticmethod
    def _to_violation(error: JsonSchemaError) -> FieldViolation:
        parts = list(error.absolute_path)
        if error.validator == "required" and isinstance(error.instance, dict):
            # Point at the missing property rather than its parent object
            for name in error.validator_value:
                if name not in error.instance and error.message.startswith(
                    repr(name)
                ):
                    parts.append(name)
                    break
        return FieldViolation(path=_pointer(parts), message=error.message)
