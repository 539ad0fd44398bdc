"""Run endpoint tests: synthesize, execute, classify, optionally validate.

Endpoints are processed one at a time, in input order. A transport failure
only fails its own endpoint; the report always holds one result per
endpoint.
"""

import json
import logging
from typing import Any, Iterable

import requests
from pydantic import BaseModel

from api_documentor.analyzer.base import Endpoint
from api_documentor.config import TesterConfig
from api_documentor.errors import ExecutionError
from api_documentor.tester.executor import execute
from api_documentor.tester.request import build_request
from api_documentor.tester.schema import validate_response


class EndpointTestResult(BaseModel):
    endpoint: Endpoint
    success: bool
    status_code: int | None = None
    response_time: float | None = None  # milliseconds
    error: str | None = None
    response_body: Any = None

    def to_data(self) -> dict:
        data = {
            "endpoint": self.endpoint.to_data(),
            "success": self.success,
            "statusCode": self.status_code,
            "responseTime": self.response_time,
            "error": self.error,
            "responseBody": self.response_body,
        }
        return {key: value for key, value in data.items() if value is not None}


class EndpointTestReport(BaseModel):
    results: list[EndpointTestResult] = []

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def all_passed(self) -> bool:
        return self.passed == self.total

    def summary(self) -> str:
        return f"{self.passed}/{self.total} tests passed"

    def to_data(self) -> list[dict]:
        return [result.to_data() for result in self.results]


def expected_status_codes(endpoint: Endpoint) -> list[int]:
    """Declared 2xx codes, or [200] when the endpoint declares none."""
    return endpoint.success_status_codes() or [200]


class EndpointTester:
    """Runs endpoint tests against a live server with one shared HTTP session."""

    def __init__(
        self,
        config: TesterConfig,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ):
        self.config = config
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def __enter__(self) -> "EndpointTester":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session if this tester created it."""
        if self._owns_session:
            self.session.close()

    def run_endpoint(self, endpoint: Endpoint) -> EndpointTestResult:
        self.logger.info("Testing endpoint: %s", endpoint.label)
        request = build_request(endpoint, self.config)

        try:
            outcome = execute(request, self.config.timeout, self.session)
        except ExecutionError as exc:
            self.logger.error("Error testing endpoint %s: %s", endpoint.label, exc)
            return EndpointTestResult(endpoint=endpoint, success=False, error=str(exc))

        expected = expected_status_codes(endpoint)
        success = outcome.status_code in expected
        error = None
        if not success:
            error = f"Expected status {' or '.join(str(c) for c in expected)}, got {outcome.status_code}"

        if success and self.config.validate_schema and outcome.body is not None:
            validation = validate_response(endpoint, outcome.status_code, outcome.body)
            if not validation.valid:
                success = False
                violations = [v.model_dump(exclude_none=True) for v in validation.errors]
                error = f"Schema validation failed: {json.dumps(violations)}"

        self.logger.info("Test %s for %s", "passed" if success else "failed", endpoint.label)
        return EndpointTestResult(
            endpoint=endpoint,
            success=success,
            status_code=outcome.status_code,
            response_time=outcome.elapsed_ms,
            error=error,
            response_body=outcome.body,
        )

    def run_endpoints(self, endpoints: Iterable[Endpoint]) -> EndpointTestReport:
        endpoints = list(endpoints)
        self.logger.info("Testing %d API endpoints...", len(endpoints))

        report = EndpointTestReport()
        for endpoint in endpoints:
            report.results.append(self.run_endpoint(endpoint))

        self.logger.info("Testing complete. %s.", report.summary())
        return report


def run_endpoint(endpoint: Endpoint, config: TesterConfig, session: requests.Session | None = None) -> EndpointTestResult:
    with EndpointTester(config, session) as tester:
        return tester.run_endpoint(endpoint)


def run_api_endpoints(
    endpoints: Iterable[Endpoint],
    config: TesterConfig,
    session: requests.Session | None = None,
) -> EndpointTestReport:
    """Test every endpoint in order and return the report."""
    with EndpointTester(config, session) as tester:
        return tester.run_endpoints(endpoints)
