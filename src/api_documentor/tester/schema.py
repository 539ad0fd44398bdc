"""Validate response bodies and supplied parameters against an endpoint.

Problems are reported as data: every check returns a ValidationResult
listing all violations found, never just the first one.
"""

import logging
from typing import Any, Mapping

from jsonschema import Draft7Validator
from jsonschema.validators import validator_for
from pydantic import BaseModel

from api_documentor.analyzer.base import Endpoint

logger = logging.getLogger(__name__)


class Violation(BaseModel):
    message: str
    path: str | None = None  # JSON pointer into the checked value
    keyword: str | None = None  # schema keyword that failed


class ValidationResult(BaseModel):
    endpoint: Endpoint
    valid: bool
    errors: list[Violation] = []


def validate_response(endpoint: Endpoint, status_code: int, body: Any) -> ValidationResult:
    """Check ``body`` against the schema declared for ``status_code``.

    Responses without a declared schema always pass. A schema that cannot
    be compiled or resolved fails with a single violation.
    """
    logger.info("Validating schema for %s with status %s", endpoint.label, status_code)

    spec = endpoint.response_for(status_code)
    if spec is None or spec.schema_ is None:
        logger.warning("No schema defined for status %s", status_code)
        return ValidationResult(endpoint=endpoint, valid=True)

    try:
        validator_cls = validator_for(spec.schema_, default=Draft7Validator)
        validator_cls.check_schema(spec.schema_)
        found = sorted(validator_cls(spec.schema_).iter_errors(body), key=lambda e: [str(p) for p in e.absolute_path])
    except Exception as exc:  # malformed or unresolvable schema
        logger.error("Error validating schema: %s", exc)
        message = getattr(exc, "message", None) or str(exc)
        return ValidationResult(endpoint=endpoint, valid=False, errors=[Violation(message=message)])

    if found:
        errors = [
            Violation(message=e.message, path=_pointer(e.absolute_path), keyword=str(e.validator))
            for e in found
        ]
        logger.error("Schema validation failed: %s", [v.message for v in errors])
        return ValidationResult(endpoint=endpoint, valid=False, errors=errors)

    logger.info("Schema validation passed")
    return ValidationResult(endpoint=endpoint, valid=True)


def _pointer(path) -> str:
    """RFC 6901 pointer; the document root is ``""``."""
    return "".join("/" + str(part).replace("~", "~0").replace("/", "~1") for part in path)


def validate_params(endpoint: Endpoint, supplied: Mapping[str, Any]) -> ValidationResult:
    """Check required parameters are present and supplied values have the declared types.

    Missing parameters short-circuit: type checks only run once nothing
    required is missing.
    """
    logger.info("Validating request parameters for %s", endpoint.label)

    missing = [p.name for p in endpoint.parameters if p.required and p.name not in supplied]
    if missing:
        logger.error("Missing required parameters: %s", ", ".join(missing))
        return ValidationResult(
            endpoint=endpoint,
            valid=False,
            errors=[Violation(message=f"Missing required parameter: {name}") for name in missing],
        )

    errors = []
    for param in endpoint.parameters:
        if param.name not in supplied:
            continue
        value = supplied[param.name]
        expected = _EXPECTED_TYPES.get(param.type)
        if expected is None:
            continue
        label, check = expected
        if not check(value):
            errors.append(
                Violation(message=f"Parameter {param.name} should be {label}, got {_type_name(value)}")
            )

    if errors:
        logger.error("Parameter type validation errors: %s", [v.message for v in errors])
        return ValidationResult(endpoint=endpoint, valid=False, errors=errors)

    logger.info("Parameter validation passed")
    return ValidationResult(endpoint=endpoint, valid=True)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_EXPECTED_TYPES = {
    "string": ("a string", lambda v: isinstance(v, str)),
    "number": ("a number", _is_number),
    "integer": ("a number", _is_number),
    "boolean": ("a boolean", lambda v: isinstance(v, bool)),
    "array": ("an array", lambda v: isinstance(v, list)),
    "object": ("an object", lambda v: isinstance(v, dict)),
}


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if _is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
