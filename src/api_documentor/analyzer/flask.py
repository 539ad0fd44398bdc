"""Flask route adapter.

Reads the Werkzeug ``url_map`` and the ``view_functions`` registry. Flask
has no built-in API metadata, so besides docstrings and blueprint names the
adapter looks for an optional metadata mapping attached to the view
function (attribute ``apidoc`` by default)::

    def get_user(user_id):
        ...
    get_user.apidoc = {
        "summary": "Fetch a user",
        "tags": ["users"],
        "responses": {200: {"description": "The user", "schema": {...}}},
    }

Recognized keys are listed in ``METADATA_KEYS``; ``parameters`` entries and
``responses`` values use the persisted endpoint-list field names.
"""

import logging
import re
from typing import Any, Iterable

from .adapter import (
    INTROSPECTION_ERRORS,
    RouteAdapter,
    default_responses,
    merge_parameters,
    path_parameters,
    split_docstring,
)
from .base import Endpoint, HttpMethod, Parameter, ResponseSpec
from .paths import normalize_slashes, to_canonical

METADATA_ATTR = "apidoc"
METADATA_KEYS = ("summary", "description", "tags", "deprecated", "parameters", "responses")
CONVERTER_TYPES = {
    "int": "integer",
    "float": "number",
}
IMPLICIT_METHODS = {"HEAD", "OPTIONS"}

_RULE_ARGUMENT = re.compile(r"<(?:([A-Za-z0-9_]+)(?:\([^)]*\))?:)?([A-Za-z0-9_]+)>")


class FlaskAdapter(RouteAdapter):
    framework = "flask"

    def __init__(self, logger: logging.Logger | None = None, metadata_attr: str = METADATA_ATTR):
        super().__init__(logger)
        self.metadata_attr = metadata_attr

    @classmethod
    def matches(cls, app: Any) -> bool:
        return hasattr(app, "url_map") and isinstance(getattr(app, "view_functions", None), dict)

    def _extract(self, app: Any) -> Iterable[Endpoint]:
        for rule in app.url_map.iter_rules():
            if rule.endpoint == "static":
                continue
            view = app.view_functions.get(rule.endpoint)
            try:
                endpoints = list(self._rule_endpoints(rule, view))
            except INTROSPECTION_ERRORS as exc:
                self.logger.warning("Skipping rule %s: %s", rule.rule, exc)
                continue
            yield from endpoints

    def _rule_endpoints(self, rule: Any, view: Any) -> Iterable[Endpoint]:
        path = to_canonical(normalize_slashes(rule.rule))
        types = {name: CONVERTER_TYPES.get(conv, "string") for conv, name in _RULE_ARGUMENT.findall(rule.rule)}
        meta = self._metadata(view)

        summary, description = split_docstring(getattr(view, "view_class", view))
        blueprint = rule.endpoint.rpartition(".")[0]
        tags = [blueprint] if blueprint else []
        tags += [t for t in meta.get("tags", []) if t not in tags]

        declared = [Parameter.model_validate(p) for p in meta.get("parameters", [])]
        responses = _parse_responses(meta.get("responses"))

        methods = {m.upper() for m in (rule.methods or ())} - IMPLICIT_METHODS
        for method in HttpMethod:
            if method.value not in methods:
                continue
            self.logger.debug("Found endpoint: %s %s", method.value, path)
            yield Endpoint(
                path=path,
                method=method,
                parameters=merge_parameters(path_parameters(path, types), declared),
                responses=responses or default_responses(),
                summary=meta.get("summary", summary),
                description=meta.get("description", description),
                tags=tags,
                deprecated=meta.get("deprecated", False),
            )

    def _metadata(self, view: Any) -> dict:
        meta = getattr(view, self.metadata_attr, None)
        if not isinstance(meta, dict):
            return {}
        unknown = set(meta) - set(METADATA_KEYS)
        if unknown:
            self.logger.warning("Ignoring unknown %s keys: %s", self.metadata_attr, ", ".join(sorted(unknown)))
        return meta


def _parse_responses(responses: Any) -> list[ResponseSpec]:
    if not responses:
        return []
    if isinstance(responses, dict):
        result = []
        for code, spec in responses.items():
            try:
                status_code = int(code)
            except (TypeError, ValueError):
                continue  # "default", "2XX"
            result.append(ResponseSpec.model_validate({**(spec or {}), "statusCode": status_code}))
        return result
    return [ResponseSpec.model_validate(spec) for spec in responses]
