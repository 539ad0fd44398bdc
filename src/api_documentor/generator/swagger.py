"""Swagger 2.0 document renderer.

Body and response schemas that carry a ``title`` are hoisted into
``definitions`` and replaced by a ``$ref``.
"""

import copy
import re
from urllib.parse import urlsplit

from api_documentor.analyzer.base import Endpoint, Parameter, ParamLocation, ResponseFormat, ResponseSpec
from api_documentor.analyzer.paths import to_braces
from api_documentor.generator.info import ApiInfo

MEDIA_TYPES = {
    ResponseFormat.JSON: "application/json",
    ResponseFormat.XML: "application/xml",
    ResponseFormat.TEXT: "text/plain",
    ResponseFormat.HTML: "text/html",
}


def base_document(info: ApiInfo) -> dict:
    doc = {
        "swagger": "2.0",
        "info": {"title": info.title, "description": info.description, "version": info.version},
        "host": "localhost:3000",
        "basePath": "/",
        "schemes": ["http"],
        "consumes": ["application/json"],
        "produces": ["application/json"],
        "paths": {},
        "definitions": {},
    }
    if info.base_url:
        parts = urlsplit(info.base_url)
        doc["host"] = parts.netloc
        doc["basePath"] = parts.path or "/"
        doc["schemes"] = [parts.scheme or "http"]
    return doc


class SwaggerRenderer:
    def render(self, endpoints: list[Endpoint], info: ApiInfo) -> dict:
        doc = base_document(info)

        tags: list[str] = []
        for ep in endpoints:
            tags += [t for t in ep.tags if t not in tags]
        doc["tags"] = [{"name": t, "description": f"Operations related to {t}"} for t in tags]

        for ep in endpoints:
            self._add_endpoint(doc, ep)
        return doc

    def _add_endpoint(self, doc: dict, endpoint: Endpoint) -> None:
        operation = {
            "tags": endpoint.tags,
            "summary": endpoint.summary or endpoint.label,
            "description": endpoint.description,
            "operationId": operation_id(endpoint),
            "deprecated": endpoint.deprecated,
            "produces": produces(endpoint.responses),
            "parameters": [self._parameter(doc, p) for p in endpoint.parameters],
            "responses": {
                str(r.status_code): self._response(doc, r) for r in endpoint.responses
            },
        }
        operation = {k: v for k, v in operation.items() if v != [] and v != {}}
        doc["paths"].setdefault(to_braces(endpoint.path), {})[endpoint.method.value.lower()] = operation

    def _parameter(self, doc: dict, param: Parameter) -> dict:
        out = {
            "name": param.name,
            "in": param.location.value,
            "description": param.description or "",
            "required": param.required,
        }
        if param.location is ParamLocation.BODY:
            out["schema"] = self._schema(doc, param.schema_) if param.schema_ else {"type": "object", "properties": {}}
            return out

        out["type"] = param.type
        if param.enum_values:
            out["enum"] = param.enum_values
        if param.default is not None:
            out["default"] = param.default
        if param.format:
            out["format"] = param.format
        return out

    def _response(self, doc: dict, response: ResponseSpec) -> dict:
        out = {"description": response.description or f"Status {response.status_code} response"}
        if response.schema_:
            out["schema"] = self._schema(doc, response.schema_)
        return out

    def _schema(self, doc: dict, schema: dict) -> dict:
        schema = copy.deepcopy(schema)
        title = schema.pop("title", None)
        if not title:
            return schema
        doc["definitions"][title] = schema
        return {"$ref": f"#/definitions/{title}"}


def produces(responses: list[ResponseSpec]) -> list[str]:
    types: list[str] = []
    for response in responses:
        media = MEDIA_TYPES.get(response.content_format, "application/json")
        if media not in types:
            types.append(media)
    return types


def operation_id(endpoint: Endpoint) -> str:
    path = re.sub(r"[:{}]", "", endpoint.path.lstrip("/")).replace("/", "_").replace("-", "_")
    return f"{endpoint.method.value.lower()}_{path}"


def render_swagger(endpoints: list[Endpoint], info: ApiInfo) -> dict:
    return SwaggerRenderer().render(endpoints, info)
