"""Link-oriented operations on top of the SQLite driver."""

import logging
from typing import Any

from ..errors import NotFoundError, StorageError, ValidationError
from .database import Database, DriverError
from .models import Language, Link, LinkPatch, NewLink, Order, QueryResult, language_code
from .search import FTS_TABLES, build_match_expression

logger = logging.getLogger(__name__)

_TIMESTAMP_NOW = "strftime('%Y-%m-%d %H:%M:%f', 'now')"


def _check_non_negative(name: str, value: int | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        logger.debug(f"Rejected {name} {value!r}")
        raise ValidationError(f"{name} must be a non-negative integer")


class LinkRepository:
    """CRUD and full-text search for links.

    Every method issues at most one statement. Engine failures surface as
    ``StorageError`` carrying the engine's message; nothing is retried.
    """

    def __init__(self, db: Database):
        self.db = db

    def _query(self, sql: str, params: tuple[Any, ...] = ()) -> QueryResult:
        try:
            return self.db.query(sql, params)
        except DriverError as e:
            raise StorageError(str(e)) from e

    # ---- Create ----

    def create(self, data: NewLink) -> int:
        """Insert a new link, return its ID."""
        result = self._query(
            """
            INSERT INTO links (url, title, language, image_link, description)
            VALUES (?, ?, ?, ?, ?)
            RETURNING id
            """,
            (
                data.url,
                data.title,
                language_code(data.language),
                data.image_link,
                data.description,
            ),
        )
        link_id = result.rows[0]["id"]
        logger.info(f"Created link {link_id} for {data.url}")
        return link_id

    # ---- Read ----

    def read_by_id(self, link_id: int) -> Link:
        """Get a link by ID."""
        result = self._query("SELECT * FROM links WHERE id = ?", (link_id,))
        if not result.rows:
            raise NotFoundError(f"No links found for id {link_id}")
        return Link.from_row(result.rows[0])

    def read_by_url(self, url: str) -> Link:
        """Get a link by URL."""
        result = self._query("SELECT * FROM links WHERE url = ?", (url,))
        if not result.rows:
            raise NotFoundError(f"No links found for url {url}")
        return Link.from_row(result.rows[0])

    def read_links(
        self,
        order: Order | str = "asc",
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Link]:
        """Get links ordered by creation time, optionally paginated."""
        if isinstance(order, Order):
            order = order.value
        if order not in ("asc", "desc"):
            logger.debug(f"Rejected read order {order!r}")
            raise ValidationError("order must have value of either asc or desc")
        _check_non_negative("limit", limit)
        _check_non_negative("offset", offset)

        direction = order.upper()
        query = f"SELECT * FROM links ORDER BY created_on {direction}, id {direction}"
        params: list[Any] = []
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        if offset is not None:
            if limit is None:
                # SQLite only accepts OFFSET after a LIMIT clause
                query += " LIMIT -1"
            query += " OFFSET ?"
            params.append(offset)

        result = self._query(query, tuple(params))
        return [Link.from_row(row) for row in result.rows]

    # ---- Update ----

    def _update(self, column: str, key: Any, patch: LinkPatch) -> QueryResult:
        set_parts = []
        params: list[Any] = []
        for name, value in patch.changes():
            set_parts.append(f"{name} = ?")
            params.append(value)
        set_parts.append(f"updated_on = {_TIMESTAMP_NOW}")
        params.append(key)

        return self._query(
            f"UPDATE links SET {', '.join(set_parts)} WHERE {column} = ? RETURNING *",
            tuple(params),
        )

    def update_by_id(self, link_id: int, patch: LinkPatch) -> Link:
        """Apply a partial update to the link with this ID."""
        result = self._update("id", link_id, patch)
        if not result.rows:
            raise NotFoundError(f"link cannot be found for id {link_id}")
        logger.info(f"Updated link {link_id}")
        return Link.from_row(result.rows[0])

    def update_by_url(self, url: str, patch: LinkPatch) -> Link:
        """Apply a partial update to the link with this URL."""
        result = self._update("url", url, patch)
        if not result.rows:
            raise NotFoundError(f"link cannot be found for url {url}")
        logger.info(f"Updated link {result.rows[0]['id']} ({url})")
        return Link.from_row(result.rows[0])

    # ---- Delete ----

    def delete_by_id(self, link_id: int) -> None:
        """Delete a link by ID. Missing IDs are ignored."""
        result = self._query("DELETE FROM links WHERE id = ?", (link_id,))
        logger.info(f"Deleted {result.row_count} link(s) for id {link_id}")

    def delete_by_url(self, url: str) -> None:
        """Delete a link by URL. Missing URLs are ignored."""
        result = self._query("DELETE FROM links WHERE url = ?", (url,))
        logger.info(f"Deleted {result.row_count} link(s) for url {url}")

    # ---- Search ----

    def search(
        self, query: str, language: Language | str, limit: int | None = None
    ) -> list[Link]:
        """Full-text search across links written in one language."""
        if not Language.is_supported(language):
            logger.debug(f"Rejected search language {language!r}")
            raise ValidationError(
                f"Invalid language '{language}', language must be either 'en' or 'fr'"
            )
        language = Language(language_code(language))
        _check_non_negative("limit", limit)

        expression = build_match_expression(query, language)
        if expression is None:
            logger.debug(f"Search text {query!r} has no terms")
            return []

        fts_table = FTS_TABLES[language]
        sql = f"""
            SELECT links.* FROM links
            JOIN {fts_table} ON links.id = {fts_table}.rowid
            WHERE {fts_table} MATCH ? AND links.language = ?
            ORDER BY rank
        """
        params: list[Any] = [expression, language.value]
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        result = self._query(sql, tuple(params))
        return [Link.from_row(row) for row in result.rows]
