"""OpenAPI / Swagger document adapter.

Maps OpenAPI 3.x and Swagger 2.0 documents onto canonical endpoints. Used
directly for documents loaded from disk and by the FastAPI adapter for the
document a FastAPI app publishes.
"""

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from .adapter import INTROSPECTION_ERRORS, RouteAdapter, default_responses, merge_parameters, path_parameters
from .base import Endpoint, HttpMethod, Parameter, ParamLocation, ResponseFormat, ResponseSpec
from .paths import to_canonical

logger = logging.getLogger(__name__)

METHODS = {m.value for m in HttpMethod}
DEFS_KEY = "$defs"
LOCATIONS = {
    "path": ParamLocation.PATH,
    "query": ParamLocation.QUERY,
    "header": ParamLocation.HEADER,
    "body": ParamLocation.BODY,
    "formData": ParamLocation.BODY,
}
CONTENT_FORMATS = (
    ("json", ResponseFormat.JSON),
    ("xml", ResponseFormat.XML),
    ("text/plain", ResponseFormat.TEXT),
    ("text/html", ResponseFormat.HTML),
)


class OpenApiAdapter(RouteAdapter):
    framework = "openapi"

    @classmethod
    def matches(cls, app: Any) -> bool:
        return isinstance(app, dict) and ("openapi" in app or "swagger" in app)

    def _extract(self, app: Any) -> Iterable[Endpoint]:
        return iter_openapi_endpoints(app, self.logger)


def parse_openapi(file_path: Path) -> list[Endpoint]:
    """Parse an OpenAPI/Swagger file into a list of Endpoint."""
    doc = yaml.safe_load(Path(file_path).read_text(encoding="utf-8"))
    return OpenApiAdapter().extract(doc)


def iter_openapi_endpoints(doc: dict, log: logging.Logger | None = None) -> Iterable[Endpoint]:
    log = log or logger
    paths = resolve_refs(doc.get("paths") or {}, doc)
    doc_produces = doc.get("produces", [])

    for raw_path, item in paths.items():
        shared = item.get("parameters", [])
        for method, operation in item.items():
            if method.upper() not in METHODS or not isinstance(operation, dict):
                continue
            try:
                endpoint = _operation_endpoint(doc, raw_path, method, operation, shared, doc_produces)
            except INTROSPECTION_ERRORS as exc:
                log.warning("Skipping operation %s %s: %s", method.upper(), raw_path, exc)
                continue
            log.debug("Found endpoint: %s", endpoint.label)
            yield endpoint


def _operation_endpoint(
    doc: dict, raw_path: str, method: str, operation: dict, shared: list, doc_produces: list
) -> Endpoint:
    path = to_canonical(raw_path)
    declared = merge_parameters(
        _parse_parameters(shared, doc), _parse_parameters(operation.get("parameters", []), doc)
    )
    body = _parse_request_body(operation.get("requestBody"), doc)
    if body is not None:
        declared = merge_parameters(declared, [body])

    produces = operation.get("produces", doc_produces)
    responses = _parse_responses(operation.get("responses", {}), produces, doc)

    return Endpoint(
        path=path,
        method=method.upper(),
        parameters=merge_parameters(path_parameters(path), declared),
        responses=responses or default_responses(),
        description=operation.get("description", ""),
        summary=operation.get("summary", ""),
        tags=operation.get("tags", []),
        deprecated=operation.get("deprecated", False),
    )


def resolve_refs(node: Any, doc: dict, seen: tuple[str, ...] = ()) -> Any:
    """Inline local ``$ref`` pointers. A reference back into its own chain is kept."""
    if isinstance(node, list):
        return [resolve_refs(item, doc, seen) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith("#/"):
        if ref in seen:
            return node
        target = _lookup_pointer(doc, ref)
        if target is None:
            return node
        return resolve_refs(target, doc, seen + (ref,))

    return {key: resolve_refs(value, doc, seen) for key, value in node.items()}


def bundle_schema(schema: Any, doc: dict) -> Any:
    """Make an inlined schema self-contained.

    The refs :func:`resolve_refs` keeps (cycles) point into ``doc``. They are
    rewritten to ``#/$defs/<name>`` and their targets copied into a ``$defs``
    block at the schema root, so the schema validates without ``doc``.
    """
    if not isinstance(schema, dict):
        return schema

    pending: list[str] = []
    bundled = _rewrite_refs(schema, doc, pending)
    defs: dict[str, Any] = {}
    while pending:
        ref = pending.pop()
        name = _def_name(ref)
        if name in defs:
            continue
        defs[name] = _rewrite_refs(resolve_refs(_lookup_pointer(doc, ref), doc, (ref,)), doc, pending)

    if defs:
        bundled[DEFS_KEY] = {**bundled.get(DEFS_KEY, {}), **defs}
    return bundled


def _rewrite_refs(node: Any, doc: dict, pending: list[str]) -> Any:
    if isinstance(node, list):
        return [_rewrite_refs(item, doc, pending) for item in node]
    if not isinstance(node, dict):
        return node

    out = {key: _rewrite_refs(value, doc, pending) for key, value in node.items()}
    ref = node.get("$ref")
    if (
        isinstance(ref, str)
        and ref.startswith("#/")
        and not ref.startswith(f"#/{DEFS_KEY}/")
        and _lookup_pointer(doc, ref) is not None
    ):
        pending.append(ref)
        out["$ref"] = f"#/{DEFS_KEY}/{ref.rsplit('/', 1)[-1]}"
    return out


def _def_name(ref: str) -> str:
    return ref.rsplit("/", 1)[-1].replace("~1", "/").replace("~0", "~")


def _lookup_pointer(doc: dict, ref: str) -> Any:
    current: Any = doc
    for token in ref[2:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if not isinstance(current, dict) or token not in current:
            return None
        current = current[token]
    return current


def _parse_parameters(params: list[dict], doc: dict) -> list[Parameter]:
    result = []
    for p in params:
        location = LOCATIONS.get(p.get("in", "query"))
        if location is None:
            continue  # cookie parameters have no canonical location
        schema = p.get("schema") or {}

        if p.get("in") == "body":
            result.append(
                Parameter(
                    name=p.get("name", "body"),
                    type=_schema_type(schema, "object"),
                    required=p.get("required", False),
                    location=location,
                    description=p.get("description"),
                    schema_=bundle_schema(schema, doc) or None,
                )
            )
            continue

        result.append(
            Parameter(
                name=p["name"],
                type=_schema_type(schema, p.get("type", "string")),
                required=location is ParamLocation.PATH or p.get("required", False),
                location=location,
                description=p.get("description"),
                default=schema.get("default", p.get("default")),
                example=p.get("example", schema.get("example")),
                enum_values=schema.get("enum", p.get("enum")),
                format=schema.get("format", p.get("format")),
            )
        )
    return result


def _parse_request_body(body: dict | None, doc: dict) -> Parameter | None:
    if not body:
        return None
    content = body.get("content", {})
    schema = None
    for content_type in ("application/json", "multipart/form-data"):
        if content_type in content:
            schema = content[content_type].get("schema")
            break
    else:
        # Fallback: first available schema
        for ct_data in content.values():
            schema = ct_data.get("schema")
            break

    return Parameter(
        name="body",
        type=_schema_type(schema or {}, "object"),
        required=body.get("required", False),
        location=ParamLocation.BODY,
        description=body.get("description") or "Request body",
        schema_=bundle_schema(schema, doc) or None,
    )


def _parse_responses(responses: dict, produces: list[str], doc: dict) -> list[ResponseSpec]:
    result = []
    for status_code, resp in responses.items():
        try:
            code = int(status_code)
        except (TypeError, ValueError):
            continue  # "default", "2XX"
        if not isinstance(resp, dict):
            continue

        if "content" in resp:
            content = resp.get("content") or {}
            content_type = next(iter(content), "application/json")
            schema = (content.get(content_type) or {}).get("schema")
        else:
            content_type = produces[0] if produces else "application/json"
            schema = resp.get("schema")

        result.append(
            ResponseSpec(
                status_code=code,
                description=resp.get("description", ""),
                content_format=_content_format(content_type),
                schema_=bundle_schema(schema, doc) or None,
            )
        )
    return result


def _content_format(content_type: str) -> ResponseFormat:
    if not content_type:
        return ResponseFormat.JSON
    for marker, fmt in CONTENT_FORMATS:
        if marker in content_type:
            return fmt
    if content_type.startswith("text/"):
        return ResponseFormat.TEXT
    return ResponseFormat.BINARY


def _schema_type(schema: dict, fallback: str) -> str:
    """The single type a schema declares, looking through nullable unions."""
    declared = schema.get("type")
    if isinstance(declared, str):
        return declared
    if isinstance(declared, list):
        candidates = declared
    else:
        candidates = [s.get("type") for s in schema.get("anyOf", schema.get("oneOf", [])) if isinstance(s, dict)]
    for candidate in candidates:
        if isinstance(candidate, str) and candidate != "null":
            return candidate
    return fallback
