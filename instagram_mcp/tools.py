"""General-purpose demo tools.

Tools with an ``operation`` argument keep one dispatch table per tool, keyed by
a closed Enum, and every member of the Enum has an entry.
"""
from __future__ import annotations

import json
import math
import random
import secrets
import string
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field

from .errors import ParseError, ValidationError
from .registry import CallKind, HandlerRegistry
from .schema import ArgumentSchema


# ---------------------------------------------------------------- greetings


class NameArgs(ArgumentSchema):
    name: str = Field(description="Name to greet")


def hello_world(args: NameArgs) -> str:
    return f"Hello, {args.name}! Welcome to the MCP server."


def goodbye(args: NameArgs) -> str:
    return f"Goodbye, {args.name}! Thanks for using the MCP server."


# ---------------------------------------------------------------- calculate


class Operation(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    POWER = "power"


def _divide(a: float, b: float) -> float:
    if b == 0:
        raise ZeroDivisionError("Division by zero is not allowed")
    return a / b


CALCULATIONS: Dict[Operation, Callable[[float, float], float]] = {
    Operation.ADD: lambda a, b: a + b,
    Operation.SUBTRACT: lambda a, b: a - b,
    Operation.MULTIPLY: lambda a, b: a * b,
    Operation.DIVIDE: _divide,
    Operation.POWER: math.pow,
}


class CalculateArgs(ArgumentSchema):
    operation: Operation = Field(description="The mathematical operation to perform")
    a: float = Field(description="First number")
    b: float = Field(description="Second number")


def format_number(value: float) -> str:
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def calculate(args: CalculateArgs) -> str:
    result = CALCULATIONS[args.operation](args.a, args.b)
    return f"{format_number(args.a)} {args.operation.value} {format_number(args.b)} = {format_number(result)}"


# ---------------------------------------------------------------- text_transform


class TextOperation(str, Enum):
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    CAPITALIZE = "capitalize"
    REVERSE = "reverse"
    WORD_COUNT = "word_count"
    CHAR_COUNT = "char_count"


def _capitalize(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


TEXT_TRANSFORMS: Dict[TextOperation, Callable[[str], str]] = {
    TextOperation.UPPERCASE: str.upper,
    TextOperation.LOWERCASE: str.lower,
    TextOperation.CAPITALIZE: _capitalize,
    TextOperation.REVERSE: lambda text: text[::-1],
    TextOperation.WORD_COUNT: lambda text: f"Word count: {len(text.split())}",
    TextOperation.CHAR_COUNT: lambda text: f"Character count: {len(text)}",
}


class TextTransformArgs(ArgumentSchema):
    text: str = Field(description="The text to transform")
    operation: TextOperation = Field(description="The transformation operation")


def text_transform(args: TextTransformArgs) -> str:
    return TEXT_TRANSFORMS[args.operation](args.text)


# ---------------------------------------------------------------- generate_data


class DataType(str, Enum):
    UUID = "uuid"
    PASSWORD = "password"
    EMAIL = "email"
    PHONE = "phone"
    COLOR = "color"
    NUMBER = "number"


class GenerateOptions(ArgumentSchema):
    length: Optional[int] = Field(default=None, ge=1, le=1024, description="Length for password generation")
    min: Optional[int] = Field(default=None, description="Minimum value for number generation")
    max: Optional[int] = Field(default=None, description="Maximum value for number generation")


PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"
EMAIL_DOMAINS = ("example.com", "test.org", "demo.net")


def _password(options: GenerateOptions) -> str:
    length = options.length or 12
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def _email(options: GenerateOptions) -> str:
    user = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{user}@{random.choice(EMAIL_DOMAINS)}"


def _phone(options: GenerateOptions) -> str:
    return f"+1-{random.randint(100, 999)}-{random.randint(100, 999)}-{random.randint(1000, 9999)}"


def _number(options: GenerateOptions) -> str:
    low = 1 if options.min is None else options.min
    high = 100 if options.max is None else options.max
    if low > high:
        raise ValidationError("options.min", "must not exceed options.max", low)
    return str(random.randint(low, high))


GENERATORS: Dict[DataType, Callable[[GenerateOptions], str]] = {
    DataType.UUID: lambda options: str(uuid.uuid4()),
    DataType.PASSWORD: _password,
    DataType.EMAIL: _email,
    DataType.PHONE: _phone,
    DataType.COLOR: lambda options: f"#{random.randint(0, 0xFFFFFF):06x}",
    DataType.NUMBER: _number,
}


class GenerateDataArgs(ArgumentSchema):
    type: DataType = Field(description="Type of data to generate")
    count: int = Field(default=1, ge=1, le=100, description="Number of items to generate")
    options: Optional[GenerateOptions] = None


def generate_data(args: GenerateDataArgs) -> str:
    options = args.options or GenerateOptions()
    generator = GENERATORS[args.type]
    return "\n".join(generator(options) for _ in range(args.count))


# ---------------------------------------------------------------- datetime_utility


class DateOperation(str, Enum):
    CURRENT = "current"
    FORMAT = "format"
    ADD_DAYS = "add_days"
    DIFF_DAYS = "diff_days"
    TIMEZONE_CONVERT = "timezone_convert"


class DatetimeArgs(ArgumentSchema):
    operation: DateOperation = Field(description="The datetime operation to perform")
    date: Optional[str] = Field(default=None, description="ISO date string (for operations that need a date)")
    format: Optional[str] = Field(default=None, description="strftime pattern; any other value selects the long date form")
    days: Optional[float] = Field(default=None, description="Number of days to add")
    target_date: Optional[str] = Field(default=None, description="Target date for comparison")
    timezone: Optional[str] = Field(default=None, description="Target IANA timezone, e.g. Europe/Prague")


def parse_date(raw: str, field: str = "date") -> datetime:
    """Parse an ISO 8601 string; naive values are taken as UTC."""
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(field, "not an ISO 8601 date", raw) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _require(args: DatetimeArgs, *fields: str) -> None:
    missing = [name for name in fields if getattr(args, name) is None]
    if missing:
        names = " and ".join(missing)
        noun = "parameter" if len(missing) == 1 else "parameters"
        raise ValidationError(
            missing[0], "missing", message=f"{names} {noun} required for {args.operation.value} operation"
        )


def _current(args: DatetimeArgs) -> str:
    return to_iso(datetime.now(timezone.utc))


def _format(args: DatetimeArgs) -> str:
    _require(args, "date")
    value = parse_date(args.date)
    if not args.format:
        return to_iso(value)
    if "%" in args.format:
        return value.strftime(args.format)
    return f"{value:%B} {value.day}, {value.year}"


def _add_days(args: DatetimeArgs) -> str:
    _require(args, "date", "days")
    return to_iso(parse_date(args.date) + timedelta(days=args.days))


def _diff_days(args: DatetimeArgs) -> str:
    _require(args, "date", "target_date")
    delta = parse_date(args.target_date, "target_date") - parse_date(args.date)
    days = math.ceil(abs(delta.total_seconds()) / 86400)
    return f"{days} days"


def _timezone_convert(args: DatetimeArgs) -> str:
    _require(args, "date", "timezone")
    try:
        zone = ZoneInfo(args.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError("timezone", "unknown timezone", args.timezone) from None
    local = parse_date(args.date).astimezone(zone)
    hour = local.hour % 12 or 12
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local:%M:%S} {local:%p}"


DATE_OPERATIONS: Dict[DateOperation, Callable[[DatetimeArgs], str]] = {
    DateOperation.CURRENT: _current,
    DateOperation.FORMAT: _format,
    DateOperation.ADD_DAYS: _add_days,
    DateOperation.DIFF_DAYS: _diff_days,
    DateOperation.TIMEZONE_CONVERT: _timezone_convert,
}


def datetime_utility(args: DatetimeArgs) -> str:
    return DATE_OPERATIONS[args.operation](args)


# ---------------------------------------------------------------- json_utility


class JsonOperation(str, Enum):
    VALIDATE = "validate"
    FORMAT = "format"
    MINIFY = "minify"
    EXTRACT_KEYS = "extract_keys"
    EXTRACT_VALUES = "extract_values"


class JsonUtilityArgs(ArgumentSchema):
    operation: JsonOperation = Field(description="The JSON operation to perform")
    json_text: str = Field(alias="json", description="JSON string to process")
    key_path: Optional[str] = Field(default=None, description="Dot notation path for value extraction (e.g., 'user.name')")


def extract_keys(value: Any, prefix: str = "") -> List[str]:
    """Dotted paths of every object key, depth first.

    A top-level array yields its indices; arrays below the top are not descended into.
    """
    keys: List[str] = []
    if isinstance(value, dict):
        children = value.items()
    elif isinstance(value, list):
        children = ((str(index), child) for index, child in enumerate(value))
    else:
        return keys
    for key, child in children:
        full = f"{prefix}.{key}" if prefix else key
        keys.append(full)
        if isinstance(child, dict):
            keys.extend(extract_keys(child, full))
    return keys


def extract_value(value: Any, key_path: str) -> Any:
    """Follow ``a.b.0.c``; returns None as soon as a step does not exist."""
    for key in key_path.split("."):
        if isinstance(value, dict) and key in value:
            value = value[key]
        elif isinstance(value, list) and key.isdigit() and int(key) < len(value):
            value = value[int(key)]
        else:
            return None
    return value


def _extract_values(parsed: Any, args: JsonUtilityArgs) -> Any:
    if not args.key_path:
        raise ValidationError("key_path", "missing", message="key_path required for extract_values operation")
    return extract_value(parsed, args.key_path)


JSON_OPERATIONS: Dict[JsonOperation, Callable[[Any, JsonUtilityArgs], Any]] = {
    JsonOperation.VALIDATE: lambda parsed, args: "Valid JSON",
    JsonOperation.FORMAT: lambda parsed, args: json.dumps(parsed, indent=2, ensure_ascii=False),
    JsonOperation.MINIFY: lambda parsed, args: json.dumps(parsed, separators=(",", ":"), ensure_ascii=False),
    JsonOperation.EXTRACT_KEYS: lambda parsed, args: extract_keys(parsed),
    JsonOperation.EXTRACT_VALUES: _extract_values,
}


def json_utility(args: JsonUtilityArgs) -> Any:
    try:
        parsed = json.loads(args.json_text)
    except json.JSONDecodeError as exc:
        if args.operation is JsonOperation.VALIDATE:
            return f"Invalid JSON: {exc}"
        raise ParseError(f"Invalid JSON: {exc}") from exc
    return JSON_OPERATIONS[args.operation](parsed, args)


# ---------------------------------------------------------------- registration

for _table, _enum in (
    (CALCULATIONS, Operation),
    (TEXT_TRANSFORMS, TextOperation),
    (GENERATORS, DataType),
    (DATE_OPERATIONS, DateOperation),
    (JSON_OPERATIONS, JsonOperation),
):
    assert set(_table) == set(_enum), f"{_enum.__name__} dispatch table is incomplete"


def register_tools(registry: HandlerRegistry) -> None:
    registry.register(CallKind.TOOL, "hello_world", NameArgs, hello_world, "A simple hello world tool")
    registry.register(CallKind.TOOL, "goodbye", NameArgs, goodbye, "A simple goodbye tool")
    registry.register(CallKind.TOOL, "calculate", CalculateArgs, calculate, "Perform basic mathematical operations")
    registry.register(CallKind.TOOL, "text_transform", TextTransformArgs, text_transform, "Transform text in various ways")
    registry.register(CallKind.TOOL, "generate_data", GenerateDataArgs, generate_data, "Generate random data for testing purposes")
    registry.register(CallKind.TOOL, "datetime_utility", DatetimeArgs, datetime_utility, "Work with dates and times")
    registry.register(CallKind.TOOL, "json_utility", JsonUtilityArgs, json_utility, "Work with JSON data")
