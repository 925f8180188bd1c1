"""Errors raised by the links catalog."""


class LinkCatalogError(Exception):
    """Base class for every failure the catalog reports to callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LinkCatalogError):
    """A caller-supplied parameter was rejected before reaching storage."""


class NotFoundError(LinkCatalogError):
    """A read or update by key matched no rows."""


class StorageError(LinkCatalogError):
    """The database engine reported a failure; the message is the engine's."""
