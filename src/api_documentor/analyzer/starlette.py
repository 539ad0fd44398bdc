"""Starlette route adapter.

Walks ``app.routes``. ``Mount`` (and ``Host``) containers are flattened by
joining their prefix with each sub-route path before placeholders are
extracted. Starlette declares no response metadata, so every endpoint gets
the default responses.
"""

import inspect
from typing import Any, Iterable

from .adapter import INTROSPECTION_ERRORS, RouteAdapter, default_responses, path_parameters, split_docstring
from .base import Endpoint, HttpMethod
from .paths import join_paths, to_canonical

CONVERTOR_TYPES = {
    "IntegerConvertor": "integer",
    "FloatConvertor": "number",
}


class StarletteAdapter(RouteAdapter):
    framework = "starlette"

    @classmethod
    def matches(cls, app: Any) -> bool:
        return (
            isinstance(getattr(app, "routes", None), list)
            and hasattr(app, "router")
            and not callable(getattr(app, "openapi", None))
        )

    def _extract(self, app: Any) -> Iterable[Endpoint]:
        yield from self._walk(app.routes, "")

    def _walk(self, routes: list, prefix: str) -> Iterable[Endpoint]:
        for route in routes:
            sub_routes = getattr(route, "routes", None)
            if sub_routes is not None and not hasattr(route, "methods"):
                base = join_paths(prefix, getattr(route, "path", ""))
                self.logger.debug("Entering mounted router at %s", base)
                yield from self._walk(sub_routes, base)
            elif hasattr(route, "methods"):
                try:
                    endpoints = list(self._route_endpoints(route, prefix))
                except INTROSPECTION_ERRORS as exc:
                    self.logger.warning("Skipping route %r: %s", getattr(route, "path", route), exc)
                    continue
                yield from endpoints
            else:
                self.logger.debug("Skipping non-HTTP route %r", getattr(route, "path", route))

    def _route_endpoints(self, route: Any, prefix: str) -> Iterable[Endpoint]:
        path = to_canonical(join_paths(prefix, route.path))
        types = {
            name: CONVERTOR_TYPES.get(type(convertor).__name__, "string")
            for name, convertor in (getattr(route, "param_convertors", None) or {}).items()
        }
        summary, description = split_docstring(route.endpoint)

        for method in _route_methods(route):
            self.logger.debug("Found endpoint: %s %s", method.value, path)
            yield Endpoint(
                path=path,
                method=method,
                parameters=path_parameters(path, types),
                responses=default_responses(),
                summary=summary,
                description=description,
            )


def _route_methods(route: Any) -> list[HttpMethod]:
    declared = route.methods
    if declared is None:
        endpoint = route.endpoint
        if inspect.isclass(endpoint):
            declared = {m.value for m in HttpMethod if callable(getattr(endpoint, m.value.lower(), None))}
        else:
            declared = {"GET"}
    declared = {m.upper() for m in declared}
    if "GET" in declared:
        declared.discard("HEAD")
    return [m for m in HttpMethod if m.value in declared]
