"""Argument schemas: every tool, prompt and resource declares a pydantic model."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

S = TypeVar("S", bound="ArgumentSchema")


class ArgumentSchema(BaseModel):
    """Base for call argument models. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @classmethod
    def json_schema(cls) -> Dict[str, Any]:
        return cls.model_json_schema(by_alias=True)

    @classmethod
    def describe_arguments(cls) -> List[Dict[str, Any]]:
        """Prompt-style argument list: name, description, required."""
        return [
            {
                "name": info.alias or name,
                "description": info.description or "",
                "required": info.is_required(),
            }
            for name, info in cls.model_fields.items()
        ]


class NoArguments(ArgumentSchema):
    pass


def validate(schema: Type[S], args: Any) -> S:
    """Validate and coerce a raw argument bag against ``schema``."""
    if args is None:
        args = {}
    if not isinstance(args, Mapping):
        raise ValidationError("arguments", "expected an object", type(args).__name__)
    try:
        return schema.model_validate(dict(args))
    except PydanticValidationError as exc:
        raise _convert(exc) from exc


def _convert(exc: PydanticValidationError) -> ValidationError:
    first = exc.errors()[0]
    loc = first.get("loc") or ()
    field = ".".join(str(part) for part in loc) or "arguments"
    if first.get("type") == "missing":
        return ValidationError(field, "missing")
    reason = first.get("msg", "invalid value")
    if reason.startswith("Value error, "):
        reason = reason[len("Value error, "):]
    if not loc:
        # model-level rule, the reason already names the fields involved
        return ValidationError(field, reason, message=reason)
    return ValidationError(field, reason, first.get("input"))
