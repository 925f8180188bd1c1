"""Links catalog: storage, pagination and full-text search for link records."""

from .errors import LinkCatalogError, NotFoundError, StorageError, ValidationError
from .storage.database import Database, DriverError
from .storage.models import UNSET, Language, Link, LinkPatch, NewLink, Order
from .storage.repository import LinkRepository

__all__ = [
    "Database",
    "DriverError",
    "Language",
    "Link",
    "LinkCatalogError",
    "LinkPatch",
    "LinkRepository",
    "NewLink",
    "NotFoundError",
    "Order",
    "StorageError",
    "UNSET",
    "ValidationError",
]
