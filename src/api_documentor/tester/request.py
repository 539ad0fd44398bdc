"""Turn an endpoint and a test configuration into a concrete request."""

import json
import re
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from api_documentor.analyzer.base import Endpoint, HttpMethod, ParamLocation
from api_documentor.config import TesterConfig
from api_documentor.tester.values import generate_value, parameter_value

BODY_METHODS = {HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH}

# Characters encodeURIComponent leaves alone, on top of quote()'s own.
_URI_COMPONENT_SAFE = "!*'()"


class SynthesizedRequest(BaseModel):
    """A request ready to be sent."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    url: str
    headers: dict[str, str]
    body: Any = None


def build_request(endpoint: Endpoint, config: TesterConfig) -> SynthesizedRequest:
    body = None
    if endpoint.method in BODY_METHODS:
        body = build_body(endpoint, config)
    return SynthesizedRequest(
        method=endpoint.method,
        url=build_url(endpoint, config),
        headers=build_headers(endpoint, config),
        body=body,
    )


def build_url(endpoint: Endpoint, config: TesterConfig) -> str:
    """Full URL with path placeholders filled and query parameters appended."""
    overrides = config.param_values
    path = endpoint.path

    for param in endpoint.parameters_in(ParamLocation.PATH):
        value = _encode(parameter_value(param, overrides))
        pattern = re.compile(rf":{re.escape(param.name)}(?![A-Za-z0-9_])")
        path = pattern.sub(lambda _: value, path, count=1)

    query = [
        f"{param.name}={_encode(parameter_value(param, overrides))}"
        for param in endpoint.parameters_in(ParamLocation.QUERY)
    ]
    if query:
        path += ("&" if "?" in path else "?") + "&".join(query)

    return join_url(config.base_url, path)


def join_url(base_url: str, path: str) -> str:
    """Join with exactly one ``/`` between base URL and path."""
    if base_url.endswith("/") and path.startswith("/"):
        return base_url[:-1] + path
    if path and not base_url.endswith("/") and not path.startswith(("/", "?")):
        return f"{base_url}/{path}"
    return base_url + path


def build_headers(endpoint: Endpoint, config: TesterConfig) -> dict[str, str]:
    headers = {"Content-Type": "application/json", **config.headers}
    for param in endpoint.parameters_in(ParamLocation.HEADER):
        headers[param.name] = stringify(parameter_value(param, config.param_values))
    return headers


def build_body(endpoint: Endpoint, config: TesterConfig) -> Any:
    """Request body, or None when the endpoint takes no body parameters."""
    body_params = endpoint.parameters_in(ParamLocation.BODY)
    if not body_params:
        return None

    for param in body_params:
        if param.body_schema is not None:
            return generate_value(param.body_schema, config.param_values)

    return {param.name: parameter_value(param, config.param_values) for param in body_params}


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    if value is None:
        return ""
    return str(value)


def _encode(value: Any) -> str:
    return quote(stringify(value), safe=_URI_COMPONENT_SAFE)
