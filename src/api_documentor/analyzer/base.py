"""Canonical endpoint model.

Every route adapter (Flask, Starlette, FastAPI, OpenAPI documents) converts
its input into these models; the renderers and the test pipeline only ever
read them. Field aliases are the names used in persisted endpoint lists.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .paths import to_canonical


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class ParamLocation(str, Enum):
    PATH = "path"
    QUERY = "query"
    BODY = "body"
    HEADER = "header"


class ResponseFormat(str, Enum):
    JSON = "json"
    XML = "xml"
    TEXT = "text"
    HTML = "html"
    BINARY = "binary"


class Parameter(BaseModel):
    """A single endpoint parameter."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    type: str = "string"  # string / number / integer / boolean / array / object
    required: bool = False
    location: ParamLocation = Field(alias="in")
    description: str | None = None
    default: Any = None
    example: Any = None
    enum_values: list | None = Field(default=None, alias="enum")
    format: str | None = None
    schema_: dict | None = Field(default=None, alias="schema")

    @property
    def body_schema(self) -> dict | None:
        """The schema that drives synthesis for body parameters, if any."""
        if self.location is ParamLocation.BODY:
            return self.schema_
        return None


class ResponseSpec(BaseModel):
    """A declared response for one status code."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_code: int = Field(alias="statusCode", ge=100, le=599)
    description: str = ""
    content_format: ResponseFormat = Field(default=ResponseFormat.JSON, alias="format")
    schema_: dict | None = Field(default=None, alias="schema")

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or ""


class Endpoint(BaseModel):
    """One route of the analyzed application."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str  # /users/:id
    method: HttpMethod
    parameters: list[Parameter] = []
    responses: list[ResponseSpec] = []
    description: str = ""
    summary: str = ""
    tags: list[str] = []
    deprecated: bool = False

    @field_validator("path")
    @classmethod
    def _canonical_path(cls, value: str) -> str:
        return to_canonical(value)

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("description", "summary", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or ""

    @model_validator(mode="after")
    def _check_unique(self) -> "Endpoint":
        seen: set[tuple[str, ParamLocation]] = set()
        for param in self.parameters:
            key = (param.name, param.location)
            if key in seen:
                raise ValueError(f"duplicate parameter {param.name!r} in {param.location.value}")
            seen.add(key)

        codes: set[int] = set()
        for response in self.responses:
            if response.status_code in codes:
                raise ValueError(f"duplicate response for status {response.status_code}")
            codes.add(response.status_code)
        return self

    @property
    def label(self) -> str:
        return f"{self.method.value} {self.path}"

    def parameters_in(self, location: ParamLocation) -> list[Parameter]:
        return [p for p in self.parameters if p.location is location]

    def response_for(self, status_code: int) -> ResponseSpec | None:
        for response in self.responses:
            if response.status_code == status_code:
                return response
        return None

    def success_status_codes(self) -> list[int]:
        """Declared 2xx status codes, in declaration order."""
        return [r.status_code for r in self.responses if 200 <= r.status_code < 300]

    def to_data(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def endpoints_from_data(data: Any) -> list[Endpoint]:
    """Build endpoints from a decoded endpoint list."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("an endpoint list must be a sequence of endpoint records")
    return [Endpoint.model_validate(item) for item in data]


def endpoints_to_data(endpoints: Iterable[Endpoint]) -> list[dict]:
    return [endpoint.to_data() for endpoint in endpoints]


def load_endpoints(file_path: Path) -> list[Endpoint]:
    """Read an endpoint list written as JSON or YAML."""
    text = Path(file_path).read_text(encoding="utf-8")
    return endpoints_from_data(yaml.safe_load(text))


def dump_endpoints(endpoints: Iterable[Endpoint], file_path: Path) -> None:
    """Write an endpoint list as JSON, creating parent directories."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(json.dumps(endpoints_to_data(endpoints), indent=2), encoding="utf-8")
