"""FastAPI route adapter.

FastAPI already publishes everything it knows about a route (summaries,
tags, deprecation flags, parameter and response schemas) through its
OpenAPI document, so this adapter reads ``app.openapi()`` and maps it with
the OpenAPI mapper instead of walking ``app.routes`` by hand.
"""

from typing import Any, Iterable

from .adapter import RouteAdapter
from .base import Endpoint
from .openapi import iter_openapi_endpoints


class FastApiAdapter(RouteAdapter):
    framework = "fastapi"

    @classmethod
    def matches(cls, app: Any) -> bool:
        return callable(getattr(app, "openapi", None)) and isinstance(getattr(app, "routes", None), list)

    def _extract(self, app: Any) -> Iterable[Endpoint]:
        doc = app.openapi()
        return iter_openapi_endpoints(doc, self.logger)
