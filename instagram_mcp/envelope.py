"""Uniform success/failure envelope and its wire encodings."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResultEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    payload: Any = None
    error_message: Optional[str] = Field(default=None, alias="errorMessage")
    # Exception class name, used by transports to pick a status code. Not sent on the wire.
    error_type: Optional[str] = Field(default=None, exclude=True)

    @classmethod
    def success_of(cls, value: Any) -> "ResultEnvelope":
        return cls(success=True, payload=value)

    @classmethod
    def failure_of(cls, message: str, error_type: Optional[str] = None) -> "ResultEnvelope":
        return cls(success=False, error_message=message, error_type=error_type)

    def to_wire(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "payload": _jsonable(self.payload)}
        return {"success": False, "errorMessage": self.error_message}

    def payload_text(self) -> str:
        if not self.success:
            return self.error_message or ""
        return encode_value(self.payload)

    def to_content(self) -> List[Dict[str, str]]:
        return [{"type": "text", "text": self.payload_text()}]


def encode_value(value: Any) -> str:
    """Text form of a handler result: strings pass through, the rest becomes JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _jsonable(value: Any) -> Any:
    # Round-trip through json so dates, paths etc. become plain strings.
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return json.loads(json.dumps(value, default=str))
