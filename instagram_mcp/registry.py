"""Handler registry: one table per call kind, filled once at startup."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type

from .errors import DuplicateNameError, NotFoundError
from .schema import ArgumentSchema


class CallKind(str, Enum):
    TOOL = "tool"
    PROMPT = "prompt"
    RESOURCE = "resource"


@dataclass(frozen=True)
class HandlerEntry:
    kind: CallKind
    name: str
    schema: Type[ArgumentSchema]
    handler: Callable[[Any], Any]
    description: str = ""
    mime_type: Optional[str] = None


class HandlerRegistry:
    """
    Maps ``(kind, name)`` to a :class:`HandlerEntry`.

    Names are unique per kind. Once :meth:`freeze` is called the registry is
    read-only; the server freezes it before it starts serving.
    """

    def __init__(self):
        self._entries: Dict[CallKind, Dict[str, HandlerEntry]] = {kind: {} for kind in CallKind}
        self._frozen = False

    def register(
        self,
        kind: CallKind,
        name: str,
        schema: Type[ArgumentSchema],
        handler: Callable[[Any], Any],
        description: str = "",
        mime_type: Optional[str] = None,
    ) -> HandlerEntry:
        if self._frozen:
            raise RuntimeError(f"Registry is frozen, cannot register {kind.value} '{name}'")
        kind = CallKind(kind)
        table = self._entries[kind]
        if name in table:
            raise DuplicateNameError(f"{kind.value} '{name}' is already registered")
        entry = HandlerEntry(kind, name, schema, handler, description, mime_type)
        table[name] = entry
        return entry

    def resolve(self, kind: CallKind, name: str) -> HandlerEntry:
        kind = CallKind(kind)
        if not isinstance(name, str):
            raise NotFoundError(f"unknown {kind.value} '{name}'")
        try:
            return self._entries[kind][name]
        except KeyError:
            raise NotFoundError(f"unknown {kind.value} '{name}'") from None

    def entries(self, kind: CallKind) -> List[HandlerEntry]:
        return list(self._entries[CallKind(kind)].values())

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen
