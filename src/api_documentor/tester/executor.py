"""Send one synthesized request and time it."""

import logging
import time
from typing import Any

import requests
from pydantic import BaseModel

from api_documentor.config import DEFAULT_TIMEOUT_MS
from api_documentor.errors import ExecutionError
from api_documentor.tester.request import SynthesizedRequest

logger = logging.getLogger(__name__)


class ExecutionOutcome(BaseModel):
    status_code: int
    body: Any = None
    elapsed_ms: float


def execute(
    request: SynthesizedRequest,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    session: requests.Session | None = None,
) -> ExecutionOutcome:
    """Issue ``request`` once.

    Every HTTP status is a valid outcome. Connection errors, timeouts and
    protocol errors raise :class:`ExecutionError`.
    """
    if session is None:
        with requests.Session() as owned:
            return execute(request, timeout_ms, owned)

    kwargs: dict[str, Any] = {"headers": request.headers, "timeout": timeout_ms / 1000}
    if request.body is not None:
        kwargs["json"] = request.body

    logger.debug("Request: %s %s %s", request.method.value, request.url, kwargs)
    start = time.perf_counter()
    try:
        response = session.request(request.method.value, request.url, **kwargs)
    except requests.RequestException as exc:
        raise ExecutionError(f"{request.method.value} {request.url} failed: {exc}") from exc
    elapsed_ms = (time.perf_counter() - start) * 1000

    logger.debug("Response status: %s, time: %.1fms", response.status_code, elapsed_ms)
    return ExecutionOutcome(status_code=response.status_code, body=decode_body(response), elapsed_ms=elapsed_ms)


def decode_body(response: requests.Response) -> Any:
    """JSON when the body parses as JSON, text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
