"""Name to (handler, schema) table used by the dispatcher."""

import copy
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from feathers_mcp.shared.observability import get_logger

from .errors import DuplicateRegistrationError

logger = get_logger(__name__)

ToolHandler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class HandlerEntry:
    handler: ToolHandler
    schema: Mapping[str, Any]


class HandlerRegistry:
    """
    Stores routing handlers along with their JSON schemas.

    Written once at startup and only read afterwards; entries are never
    replaced or removed.
    """

    def __init__(self):
        self._handlers: Dict[str, HandlerEntry] = {}

    def register(
        self, name: str, handler: ToolHandler, schema: Mapping[str, Any]
    ) -> None:
        if name in self._handlers:
            raise DuplicateRegistrationError(name)
        if not callable(handler):
            raise TypeError(f'Handler for "{name}" must be callable')
        # Private copy so later mutation by the caller cannot change the contract
        self._handlers[name] = HandlerEntry(
            handler=handler, schema=copy.deepcopy(schema)
        )
        logger.debug("tool_handler_registered", tool=name)

    def lookup(self, name: str) -> Optional[HandlerEntry]:
        return self._handlers.get(name)

    def has(self, name: str) -> bool:
        return name in self._handlers

    def names(self) -> List[str]:
        return list(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)
