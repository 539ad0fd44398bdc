"""Representative values for parameters and schema nodes.

``generate_value`` walks a schema description by its ``type`` tag. Anything
it does not recognize (a missing or unknown type, a ``$ref``, a node that is
not a mapping) becomes an empty mapping, so it never raises. ``$ref`` is
deliberately not resolved.
"""

from typing import Any, Mapping

from api_documentor.analyzer.base import Parameter

DEFAULT_NUMBER = 123
DEFAULT_STRING = "test-string"


def generate_value(schema: Any, overrides: Mapping[str, Any] | None = None) -> Any:
    """Produce a value shaped like ``schema``.

    Object properties named in ``overrides`` take the override verbatim.
    """
    overrides = overrides or {}
    if not isinstance(schema, Mapping):
        return {}

    kind = schema.get("type")
    if kind == "string":
        return _first_set(schema, DEFAULT_STRING)
    if kind in ("number", "integer"):
        return _first_set(schema, DEFAULT_NUMBER)
    if kind == "boolean":
        return _first_set(schema, True)
    if kind == "array":
        if "items" in schema:
            return [generate_value(schema["items"], overrides)]
        return []
    if kind == "object":
        return _generate_object(schema, overrides)
    # $ref, unknown or missing type
    return {}


def _generate_object(schema: Mapping, overrides: Mapping[str, Any]) -> dict:
    result = {}
    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return result
    for name, prop_schema in properties.items():
        if name in overrides:
            result[name] = overrides[name]
        else:
            result[name] = generate_value(prop_schema, overrides)
    return result


def _first_set(schema: Mapping, fallback: Any) -> Any:
    for key in ("example", "default"):
        if schema.get(key) is not None:
            return schema[key]
    return fallback


PARAMETER_DEFAULTS = {
    "number": DEFAULT_NUMBER,
    "integer": DEFAULT_NUMBER,
    "boolean": True,
}


def parameter_value(param: Parameter, overrides: Mapping[str, Any] | None = None) -> Any:
    """Value for a non-body parameter: override, example, default, then a type literal."""
    if overrides and param.name in overrides:
        return overrides[param.name]
    if param.example is not None:
        return param.example
    if param.default is not None:
        return param.default

    if param.type in PARAMETER_DEFAULTS:
        return PARAMETER_DEFAULTS[param.type]
    if param.type == "array":
        return []
    if param.type == "object":
        return {}
    return f"test-{param.name}"
