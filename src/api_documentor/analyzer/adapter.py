"""Route adapter interface and helpers shared by the framework adapters."""

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

from .base import Endpoint, Parameter, ParamLocation, ResponseFormat, ResponseSpec
from .paths import extract_parameters

# Errors a host object with an unexpected shape raises while being walked.
INTROSPECTION_ERRORS = (AttributeError, TypeError, KeyError, ValueError)


class RouteAdapter(ABC):
    """Turns one host framework's route table into canonical endpoints.

    Subclasses implement :meth:`matches` (a cheap structural probe used by
    framework auto-detection) and :meth:`_extract`. :meth:`extract` never
    raises for a host object it cannot read; it logs and returns ``[]``.
    Implementations skip a single unreadable route (logging a warning) and
    keep the rest.
    """

    framework: str = ""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    @abstractmethod
    def matches(cls, app: Any) -> bool:
        """Return True if ``app`` looks like an application of this framework."""

    @abstractmethod
    def _extract(self, app: Any) -> Iterable[Endpoint]:
        ...

    def extract(self, app: Any) -> list[Endpoint]:
        self.logger.info("Analyzing %s application...", self.framework)
        try:
            endpoints = list(self._extract(app))
        except INTROSPECTION_ERRORS as exc:
            self.logger.error("Error analyzing %s app: %s", self.framework, exc)
            return []
        self.logger.info("Analysis complete. Found %d endpoints.", len(endpoints))
        return endpoints


def default_responses() -> list[ResponseSpec]:
    """The responses assumed when a host declares none."""
    return [
        ResponseSpec(status_code=200, description="Successful response", content_format=ResponseFormat.JSON),
        ResponseSpec(status_code=400, description="Bad request", content_format=ResponseFormat.JSON),
    ]


def path_parameters(path: str, types: dict[str, str] | None = None) -> list[Parameter]:
    """Required path parameters for every placeholder in ``path``.

    ``types`` maps a parameter name to a canonical type when the host
    exposes converters; anything else is a string.
    """
    types = types or {}
    params: list[Parameter] = []
    seen: set[str] = set()
    for name in extract_parameters(path):
        if name in seen:
            continue
        seen.add(name)
        params.append(
            Parameter(
                name=name,
                type=types.get(name, "string"),
                required=True,
                location=ParamLocation.PATH,
                description=f"URL parameter: {name}",
            )
        )
    return params


def merge_parameters(defaults: list[Parameter], declared: list[Parameter]) -> list[Parameter]:
    """Combine derived and declared parameters; declared ones win per (name, location)."""
    declared_keys = {(p.name, p.location) for p in declared}
    merged = [p for p in defaults if (p.name, p.location) not in declared_keys]
    seen: set[tuple[str, ParamLocation]] = set()
    for param in declared:
        key = (param.name, param.location)
        if key not in seen:
            seen.add(key)
            merged.append(param)
    return merged


def split_docstring(func: Any) -> tuple[str, str]:
    """Return (summary, description) from a handler's docstring."""
    doc = inspect.getdoc(func) if func is not None else None
    if not doc:
        return "", ""
    summary, _, rest = doc.partition("\n")
    return summary.strip(), rest.strip()
