"""Path helpers shared by the route adapters.

Route paths come in several placeholder notations: ``:id`` (the canonical
one), ``{id}`` / ``{id:int}`` (Starlette, FastAPI, OpenAPI) and
``<int:id>`` (Flask/Werkzeug). Everything here is pure and total.
"""

import re

_PLACEHOLDER = re.compile(r":([A-Za-z0-9_]+)|\{([A-Za-z0-9_]+)(?::[^}]*)?\}")
_BRACES = re.compile(r"\{([A-Za-z0-9_]+)(?::[^}]*)?\}")
_ANGLE = re.compile(r"<(?:[A-Za-z0-9_]+(?:\([^)]*\))?:)?([A-Za-z0-9_]+)>")
_SLASHES = re.compile(r"/+")


def extract_parameters(path: str) -> list[str]:
    """Return placeholder names in the order they appear in ``path``.

    >>> extract_parameters("/a/:id/b/{name}")
    ['id', 'name']
    """
    return [m.group(1) or m.group(2) for m in _PLACEHOLDER.finditer(path)]


def normalize_slashes(path: str) -> str:
    """Collapse every run of ``/`` into a single one."""
    return _SLASHES.sub("/", path)


def join_paths(base: str, sub: str) -> str:
    """Join a router prefix and a sub-path without doubled or dangling ``/``."""
    joined = normalize_slashes(f"/{base}/{sub}")
    if len(joined) > 1:
        joined = joined.rstrip("/")
    return joined


def to_canonical(path: str) -> str:
    """Rewrite ``{name}`` and ``<conv:name>`` placeholders as ``:name``."""
    path = _BRACES.sub(r":\1", path)
    return _ANGLE.sub(r":\1", path)


def to_braces(path: str) -> str:
    """Rewrite ``:name`` placeholders as ``{name}`` (OpenAPI notation)."""
    return re.sub(r":([A-Za-z0-9_]+)", r"{\1}", path)
