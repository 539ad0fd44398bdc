"""Markdown documentation renderer."""

import json
import re

from api_documentor.analyzer.base import Endpoint, Parameter, ParamLocation
from api_documentor.generator.info import ApiInfo

UNTAGGED = "API Endpoints"

PARAM_SECTIONS = (
    (ParamLocation.PATH, "Path Parameters"),
    (ParamLocation.QUERY, "Query Parameters"),
    (ParamLocation.HEADER, "Header Parameters"),
)


class MarkdownRenderer:
    """Renders endpoints as a single Markdown document grouped by tag."""

    def render(self, endpoints: list[Endpoint], info: ApiInfo) -> str:
        groups = group_by_tag(endpoints)
        parts = [self._render_header(info), self._render_toc(groups)]
        for tag, tag_endpoints in groups.items():
            parts.append(f"\n## {tag}\n\n")
            parts.extend(self._render_endpoint(ep, info.base_url) for ep in tag_endpoints)
        return "".join(parts)

    def _render_header(self, info: ApiInfo) -> str:
        header = f"# {info.title}\n\n{info.description}\n\n**Version:** {info.version}\n"
        if info.base_url:
            header += f"**Base URL:** `{info.base_url}`\n"
        return header + "\n"

    def _render_toc(self, groups: dict[str, list[Endpoint]]) -> str:
        lines = ["## Table of Contents", ""]
        for tag, tag_endpoints in groups.items():
            lines.append(f"- [{tag}](#{anchor(tag)})")
            for ep in tag_endpoints:
                title = endpoint_title(ep)
                lines.append(f"  - [{title}](#{anchor(title)})")
        return "\n".join(lines) + "\n\n"

    def _render_endpoint(self, endpoint: Endpoint, base_url: str | None) -> str:
        out = [f"### {endpoint_title(endpoint)}\n\n"]
        if endpoint.deprecated:
            out.append("> **Warning:** This endpoint is deprecated and may be removed in future versions.\n\n")
        out.append(f"**{endpoint.method.value}** `{endpoint.path}`\n\n")
        if endpoint.description:
            out.append(f"{endpoint.description}\n\n")
        if base_url:
            out.append(f"**Example URL:** `{example_url(endpoint, base_url)}`\n\n")

        if endpoint.parameters:
            out.append("#### Parameters\n\n")
            for location, heading in PARAM_SECTIONS:
                params = endpoint.parameters_in(location)
                if params:
                    out.append(f"**{heading}:**\n\n{params_table(params)}\n")

            body_params = endpoint.parameters_in(ParamLocation.BODY)
            if body_params:
                out.append("**Request Body:**\n\n")
                schema = next((p.body_schema for p in body_params if p.body_schema is not None), None)
                if schema is not None:
                    out.append(_json_block(schema))
                else:
                    out.append(f"{params_table(body_params)}\n")

        if endpoint.responses:
            out.append("#### Responses\n\n")
            for response in endpoint.responses:
                out.append(f"**Status Code:** {response.status_code} - {response.description}\n\n")
                if response.schema_ is not None:
                    out.append(_json_block(response.schema_))

        out.append("---\n\n")
        return "".join(out)


def group_by_tag(endpoints: list[Endpoint]) -> dict[str, list[Endpoint]]:
    """Group endpoints under each of their tags; untagged ones go last."""
    groups: dict[str, list[Endpoint]] = {}
    untagged = []
    for ep in endpoints:
        if not ep.tags:
            untagged.append(ep)
        for tag in ep.tags:
            groups.setdefault(tag, []).append(ep)
    if untagged:
        groups.setdefault(UNTAGGED, []).extend(untagged)
    return groups


def endpoint_title(endpoint: Endpoint) -> str:
    return endpoint.summary or endpoint.label


def anchor(title: str) -> str:
    return re.sub(r"\s+", "-", re.sub(r"[^\w\s-]", "", title.lower()))


def example_url(endpoint: Endpoint, base_url: str) -> str:
    url = f"{base_url}{endpoint.path}"
    query = endpoint.parameters_in(ParamLocation.QUERY)
    if query:
        url += "?" + "&".join(
            f"{p.name}={p.example if p.example is not None else '{' + p.name + '}'}" for p in query
        )
    return url


def params_table(params: list[Parameter]) -> str:
    rows = ["| Name | Type | Required | Description |", "|------|------|----------|-------------|"]
    for p in params:
        rows.append(f"| {p.name} | {p.type} | {'Yes' if p.required else 'No'} | {p.description or ''} |")
    return "\n".join(rows) + "\n"


def _json_block(schema: dict) -> str:
    return f"```json\n{json.dumps(schema, indent=2)}\n```\n\n"


def render_markdown(endpoints: list[Endpoint], info: ApiInfo) -> str:
    return MarkdownRenderer().render(endpoints, info)
