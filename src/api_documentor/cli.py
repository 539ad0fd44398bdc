"""CLI entry point for api-documentor."""

import importlib
import json
import sys
from pathlib import Path
from typing import Any, Callable

import click
import yaml

from api_documentor.analyzer.base import Endpoint, dump_endpoints, load_endpoints
from api_documentor.analyzer.detect import FrameworkType, analyze_app
from api_documentor.config import DEFAULT_TIMEOUT_MS, TesterConfig, load_config_file, load_param_values
from api_documentor.generator.info import ApiInfo
from api_documentor.generator.render import EXTENSIONS, DocumentFormat, generate_documentation
from api_documentor.log import LogLevel, configure_logging
from api_documentor.tester.runner import EndpointTestReport, run_api_endpoints

DOCUMENT_FILES = (".json", ".yaml", ".yml")
FRAMEWORKS = [f.value for f in FrameworkType]
FORMATS = [f.value for f in DocumentFormat]


def _read_file(loader: Callable[[Path], Any], path: Path, what: str) -> Any:
    """Run a file loader, reporting unreadable or malformed files through click."""
    try:
        return loader(path)
    except (OSError, yaml.YAMLError, ValueError) as exc:
        raise click.ClickException(f"Invalid {what} {path}: {exc}") from exc


def _load_document(path: Path) -> Any:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def _load_app(app_ref: str, app_dir: Path) -> Any:
    """Load the host application: an OpenAPI file or a ``module:attr`` reference."""
    candidate = Path(app_ref)
    if candidate.suffix in DOCUMENT_FILES and candidate.is_file():
        return _read_file(_load_document, candidate, "API document")

    module_name, _, attr = app_ref.partition(":")
    attr = attr or "app"
    if str(app_dir) not in sys.path:
        sys.path.insert(0, str(app_dir))
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import {module_name!r}: {exc}", param_hint="--app") from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise click.BadParameter(f"{module_name!r} has no attribute {attr!r}", param_hint="--app") from exc


def _read_endpoints(input_path: Path) -> list[Endpoint]:
    return _read_file(load_endpoints, input_path, "endpoints file")


def _parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    headers = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected 'Name: value', got {value!r}", param_hint="--header")
        headers[name.strip()] = content.strip()
    return headers


def _write_report(report: EndpointTestReport, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(report.to_data(), indent=2, default=str), encoding="utf-8")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML/JSON file with option defaults per command.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None):
    """API Documentor: document and test web API endpoints."""
    configure_logging(LogLevel.DEBUG if verbose else LogLevel.WARN)
    if config_path is not None:
        ctx.default_map = _read_file(load_config_file, config_path, "config file")


@main.command()
@click.option("-a", "--app", "app_ref", required=True, help="Application as module:attr, or an OpenAPI .json/.yaml file.")
@click.option("-f", "--framework", default="auto", type=click.Choice(FRAMEWORKS), help="Framework type.")
@click.option("--app-dir", default=".", type=click.Path(file_okay=False, path_type=Path), help="Directory to import the application from.")
@click.option("-o", "--output", default="api-endpoints.json", type=click.Path(path_type=Path), help="Output endpoints file.")
def analyze(app_ref: str, framework: str, app_dir: Path, output: Path):
    """Analyze API endpoints from an application."""
    click.echo(f"Analyzing {app_ref} (framework: {framework})...")
    endpoints = analyze_app(_load_app(app_ref, app_dir.resolve()), framework)
    dump_endpoints(endpoints, output)
    click.echo(f"Found {len(endpoints)} endpoints.")
    click.echo(f"Endpoints saved to {output}")


@main.command()
@click.option("-i", "--input", "input_path", default="api-endpoints.json", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Input endpoints file.")
@click.option("-o", "--output", default="docs/api.md", type=click.Path(path_type=Path), help="Output documentation file.")
@click.option("-f", "--format", "fmt", default="markdown", type=click.Choice(FORMATS), help="Documentation format.")
@click.option("-t", "--title", default="API Documentation", help="API title.")
@click.option("-d", "--description", default="Generated API documentation", help="API description.")
@click.option("--api-version", default="1.0.0", help="API version.")
@click.option("-b", "--base-url", default="http://localhost:3000", help="API base URL.")
def generate(input_path: Path, output: Path, fmt: str, title: str, description: str, api_version: str, base_url: str):
    """Generate API documentation from an endpoints file."""
    endpoints = _read_endpoints(input_path)
    info = ApiInfo(title=title, description=description, version=api_version, base_url=base_url)
    generate_documentation(endpoints, fmt, output, info)
    click.echo(f"Documentation generated at {output}")


@main.command()
@click.option("-i", "--input", "input_path", default="api-endpoints.json", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Input endpoints file.")
@click.option("-o", "--output", default="test-results.json", type=click.Path(path_type=Path), help="Output test results file.")
@click.option("-b", "--base-url", default="http://localhost:3000", help="API base URL.")
@click.option("-t", "--timeout", default=DEFAULT_TIMEOUT_MS, type=click.IntRange(min=1), help="Request timeout in milliseconds.")
@click.option("-s", "--validate-schema", is_flag=True, help="Validate response bodies against declared schemas.")
@click.option("-p", "--params", "params_path", type=click.Path(dir_okay=False, path_type=Path), help="JSON/YAML file of parameter values.")
@click.option("-H", "--header", "headers", multiple=True, help="Extra request header, 'Name: value'. Repeatable.")
@click.pass_context
def test(ctx: click.Context, input_path: Path, output: Path, base_url: str, timeout: int, validate_schema: bool, params_path: Path | None, headers: tuple[str, ...]):
    """Test API endpoints against a running server."""
    endpoints = _read_endpoints(input_path)
    config = TesterConfig(
        base_url=base_url,
        headers=_parse_headers(headers),
        timeout=timeout,
        validate_schema=validate_schema,
        param_values=_read_file(load_param_values, params_path, "parameters file") if params_path else {},
    )

    click.echo(f"Testing {len(endpoints)} endpoints against {base_url}...")
    report = run_api_endpoints(endpoints, config)
    _write_report(report, output)
    click.echo(f"Test results: {report.summary()}")
    click.echo(f"Test results saved to {output}")

    if not report.all_passed:
        ctx.exit(1)


@main.command()
@click.option("-a", "--app", "app_ref", required=True, help="Application as module:attr, or an OpenAPI .json/.yaml file.")
@click.option("-f", "--framework", default="auto", type=click.Choice(FRAMEWORKS), help="Framework type.")
@click.option("--app-dir", default=".", type=click.Path(file_okay=False, path_type=Path), help="Directory to import the application from.")
@click.option("-o", "--output-dir", default="docs", type=click.Path(file_okay=False, path_type=Path), help="Output directory.")
@click.option("-d", "--doc-format", default="markdown", type=click.Choice(FORMATS + ["all"]), help="Documentation format.")
@click.option("-b", "--base-url", default="http://localhost:3000", help="API base URL.")
@click.option("-t", "--title", default="API Documentation", help="API title.")
@click.option("--description", default="Generated API documentation", help="API description.")
@click.option("--api-version", default="1.0.0", help="API version.")
@click.option("--test", "run_tests", is_flag=True, help="Run tests after documentation generation.")
def auto(app_ref: str, framework: str, app_dir: Path, output_dir: Path, doc_format: str, base_url: str, title: str, description: str, api_version: str, run_tests: bool):
    """Full pipeline: analyze -> generate documentation -> (optionally) test."""
    # Step 1: Analyze
    click.echo(f"Analyzing {app_ref} (framework: {framework})...")
    endpoints = analyze_app(_load_app(app_ref, app_dir.resolve()), framework)
    output_dir.mkdir(parents=True, exist_ok=True)
    endpoints_path = output_dir / "api-endpoints.json"
    dump_endpoints(endpoints, endpoints_path)
    click.echo(f"Found {len(endpoints)} endpoints. Saved to {endpoints_path}")

    # Step 2: Generate documentation
    info = ApiInfo(title=title, description=description, version=api_version, base_url=base_url)
    formats = list(DocumentFormat) if doc_format == "all" else [DocumentFormat(doc_format)]
    for fmt in formats:
        doc_path = generate_documentation(endpoints, fmt, output_dir / f"api.{EXTENSIONS[fmt]}", info)
        click.echo(f"  Generated {fmt.value} documentation at {doc_path}")

    # Step 3: Test
    if run_tests:
        config = TesterConfig(base_url=base_url, validate_schema=True)
        report = run_api_endpoints(endpoints, config)
        results_path = output_dir / "test-results.json"
        _write_report(report, results_path)
        click.echo(f"  Test results: {report.summary()}. Saved to {results_path}")

    click.echo("Done!")
