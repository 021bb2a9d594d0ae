from __future__ import annotations

import copy
import logging
import urllib.parse
import uuid
from collections.abc import Iterable
from typing import Any

from jsonschema import Draft7Validator, FormatChecker, ValidationError

logger = logging.getLogger(__name__)

FORMAT_CHECKER = FormatChecker()


@FORMAT_CHECKER.checks("uuid", raises=ValueError)
def _is_uuid(instance: object) -> bool:
    if not isinstance(instance, str):
        return True
    uuid.UUID(instance)
    return len(instance) == 36 and all(instance[i] == "-" for i in (8, 13, 18, 23))


@FORMAT_CHECKER.checks("uri", raises=ValueError)
def _is_uri(instance: object) -> bool:
    if not isinstance(instance, str):
        return True
    parts = urllib.parse.urlsplit(instance)
    return bool(parts.scheme) and bool(parts.netloc)


class InvalidParamsError(Exception):
    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Invalid parameters: {', '.join(errors)}")


def _type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _join(path: Iterable[Any]) -> str:
    return ".".join(str(p) for p in path)


def _describe(error: ValidationError) -> str:
    kind = error.validator
    limit = error.validator_value
    if kind == "type":
        return f"Expected {limit}, received {_type_name(error.instance)}"
    if kind == "minLength":
        return f"Must contain at least {limit} character(s)"
    if kind == "maxLength":
        return f"Must contain at most {limit} character(s)"
    if kind == "minimum":
        return f"Must be greater than or equal to {limit}"
    if kind == "maximum":
        return f"Must be less than or equal to {limit}"
    if kind == "exclusiveMinimum":
        return f"Must be greater than {limit}"
    if kind == "minItems":
        return f"Must contain at least {limit} item(s)"
    if kind == "maxItems":
        return f"Must contain at most {limit} item(s)"
    if kind == "enum":
        return "Expected one of: " + ", ".join(str(v) for v in limit)
    if kind == "format":
        return f"Invalid {limit}"
    return error.message


def flatten_errors(errors: Iterable[ValidationError]) -> list[str]:
    messages: list[str] = []
    for error in errors:
        path = list(error.absolute_path)
        if error.validator == "required":
            lines = [
                f"{_join([*path, name])}: Required"
                for name in error.validator_value
                if isinstance(error.instance, dict) and name not in error.instance
            ]
        else:
            prefix = f"{_join(path)}: " if path else ""
            lines = [f"{prefix}{_describe(error)}"]
        for line in lines:
            if line not in messages:
                messages.append(line)
    return messages


def normalize_arguments(schema: dict, value: Any) -> Any:
    """Apply schema defaults and strip undeclared properties. Integral floats become ints where an integer is expected."""
    if isinstance(value, dict) and "properties" in schema:
        result: dict[str, Any] = {}
        for name, prop_schema in schema["properties"].items():
            if name in value:
                result[name] = normalize_arguments(prop_schema, value[name])
            elif "default" in prop_schema:
                result[name] = copy.deepcopy(prop_schema["default"])
        return result
    if isinstance(value, list) and isinstance(schema.get("items"), dict):
        return [normalize_arguments(schema["items"], item) for item in value]
    if schema.get("type") == "integer" and isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def validate_arguments(schema: dict, arguments: Any) -> dict:
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise InvalidParamsError([f"Expected object, received {_type_name(arguments)}"])
    normalized = normalize_arguments(schema, arguments)
    validator = Draft7Validator(schema, format_checker=FORMAT_CHECKER)
    errors = sorted(validator.iter_errors(normalized), key=lambda e: _join(e.absolute_path))
    if errors:
        messages = flatten_errors(errors)
        logger.debug("Argument validation failed: %s", messages)
        raise InvalidParamsError(messages)
    return normalized
