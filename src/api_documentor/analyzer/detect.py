"""Framework selection and auto-detection."""

import logging
from enum import Enum
from typing import Any

from .adapter import RouteAdapter
from .base import Endpoint
from .fastapi import FastApiAdapter
from .flask import FlaskAdapter
from .openapi import OpenApiAdapter
from .starlette import StarletteAdapter

logger = logging.getLogger(__name__)


class FrameworkType(str, Enum):
    FLASK = "flask"
    STARLETTE = "starlette"
    FASTAPI = "fastapi"
    OPENAPI = "openapi"
    AUTO = "auto"


ADAPTERS: dict[FrameworkType, type[RouteAdapter]] = {
    FrameworkType.FLASK: FlaskAdapter,
    FrameworkType.STARLETTE: StarletteAdapter,
    FrameworkType.FASTAPI: FastApiAdapter,
    FrameworkType.OPENAPI: OpenApiAdapter,
}

# FastAPI apps are Starlette apps too, so FastAPI is probed first.
PROBE_ORDER = (
    FrameworkType.OPENAPI,
    FrameworkType.FASTAPI,
    FrameworkType.STARLETTE,
    FrameworkType.FLASK,
)
DEFAULT_FRAMEWORK = FrameworkType.FLASK


def detect_framework(app: Any, log: logging.Logger | None = None) -> FrameworkType:
    """Guess the framework of ``app`` from its structure.

    Returns: the first framework whose probe matches, or Flask.
    """
    log = log or logger
    for framework in PROBE_ORDER:
        if ADAPTERS[framework].matches(app):
            return framework
    log.warning("Could not detect framework type, defaulting to %s", DEFAULT_FRAMEWORK.value)
    return DEFAULT_FRAMEWORK


def analyze_app(
    app: Any,
    framework: FrameworkType | str = FrameworkType.AUTO,
    log: logging.Logger | None = None,
) -> list[Endpoint]:
    """Extract the endpoints of ``app`` using the selected (or detected) adapter."""
    log = log or logger
    framework = FrameworkType(framework)
    if framework is FrameworkType.AUTO:
        framework = detect_framework(app, log)
        log.info("Detected framework: %s", framework.value)

    adapter = ADAPTERS[framework](logger=log)
    return adapter.extract(app)
