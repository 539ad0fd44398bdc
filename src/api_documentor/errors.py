"""Exceptions raised by api-documentor."""


class ApiDocumentorError(Exception):
    """Base class for errors raised by this package."""


class ExecutionError(ApiDocumentorError):
    """A request could not be completed (connection, timeout or protocol failure)."""
