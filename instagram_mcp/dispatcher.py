"""Dispatcher: the single place where calls are validated, run and enveloped."""
from __future__ import annotations

import inspect
import logging
import re
from typing import Any, Dict, List, Optional, Pattern, Tuple

from .envelope import ResultEnvelope
from .errors import McpError, NotFoundError, ValidationError
from .registry import CallKind, HandlerEntry, HandlerRegistry
from .schema import validate

logger = logging.getLogger(__name__)

_TEMPLATE_VAR = re.compile(r"\{(\w+)\}")


def compile_uri_template(template: str) -> Pattern[str]:
    """``config://{environment}/{service}`` -> regex with one named group per variable."""
    parts = []
    pos = 0
    for match in _TEMPLATE_VAR.finditer(template):
        parts.append(re.escape(template[pos:match.start()]))
        parts.append(f"(?P<{match.group(1)}>[^/]+)")
        pos = match.end()
    parts.append(re.escape(template[pos:]))
    return re.compile("^" + "".join(parts) + "$")


class Dispatcher:
    def __init__(self, registry: HandlerRegistry):
        self.registry = registry
        self._templates: List[Tuple[Pattern[str], HandlerEntry]] = [
            (compile_uri_template(entry.name), entry) for entry in registry.entries(CallKind.RESOURCE)
        ]

    async def dispatch(self, kind: CallKind, name: str, args: Any = None) -> ResultEnvelope:
        try:
            entry = self.registry.resolve(kind, name)
        except NotFoundError as exc:
            logger.info("Rejected call: %s", exc)
            return ResultEnvelope.failure_of(str(exc), type(exc).__name__)
        return await self._invoke(entry, args)

    def match_resource(self, uri: str) -> Optional[Tuple[HandlerEntry, Dict[str, str]]]:
        """First registered template matching ``uri``, with its extracted variables."""
        if not isinstance(uri, str):
            return None
        for pattern, entry in self._templates:
            match = pattern.match(uri)
            if match:
                return entry, match.groupdict()
        return None

    async def read_resource(self, uri: str) -> ResultEnvelope:
        matched = self.match_resource(uri)
        if matched is None:
            logger.info("Rejected call: unknown resource %r", uri)
            return ResultEnvelope.failure_of(f"unknown resource '{uri}'", NotFoundError.__name__)
        entry, variables = matched
        return await self._invoke(entry, variables)

    async def _invoke(self, entry: HandlerEntry, args: Any) -> ResultEnvelope:
        try:
            validated = validate(entry.schema, args)
        except ValidationError as exc:
            logger.info("Invalid arguments for %s '%s': %s", entry.kind.value, entry.name, exc)
            return ResultEnvelope.failure_of(str(exc), type(exc).__name__)

        logger.debug("Calling %s '%s'", entry.kind.value, entry.name)
        try:
            result = entry.handler(validated)
            if inspect.isawaitable(result):
                result = await result
        except McpError as exc:
            logger.warning("%s '%s' failed: %s", entry.kind.value, entry.name, exc)
            return ResultEnvelope.failure_of(_message(exc), type(exc).__name__)
        except Exception as exc:
            logger.exception("%s '%s' raised", entry.kind.value, entry.name)
            return ResultEnvelope.failure_of(_message(exc), type(exc).__name__)
        return ResultEnvelope.success_of(result)


def _message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
