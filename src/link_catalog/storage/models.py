"""Data models for the links catalog."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterator, Optional


class Language(Enum):
    ENGLISH = "en"
    FRENCH = "fr"

    @classmethod
    def codes(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def is_supported(cls, code: Any) -> bool:
        if isinstance(code, cls):
            return True
        return code in cls.codes()


class Order(Enum):
    ASC = "asc"
    DESC = "desc"


class _Unset:
    """Marker for a patch field that was not supplied."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def language_code(language: "Language | str") -> str:
    """Return the storage value for a language given as enum member or code."""
    if isinstance(language, Language):
        return language.value
    return language


def _parse_timestamp(value: str | None) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


@dataclass
class NewLink:
    """Fields supplied when creating a link."""

    url: str
    title: str
    language: Language | str
    image_link: Optional[str] = None
    description: Optional[str] = None


@dataclass
class LinkPatch:
    """Partial update of a link.

    Fields left as ``UNSET`` are not touched. A field explicitly set to
    ``None`` clears the column.
    """

    title: Any = UNSET
    description: Any = UNSET
    image_link: Any = UNSET
    language: Any = UNSET

    COLUMNS = ("title", "description", "image_link", "language")

    def changes(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(column, value)`` for each supplied field."""
        for column in self.COLUMNS:
            value = getattr(self, column)
            if value is UNSET:
                continue
            if column == "language" and value is not None:
                value = language_code(value)
            yield column, value


@dataclass
class Link:
    """A stored link record."""

    id: int
    url: str
    title: str
    language: str
    image_link: Optional[str] = None
    description: Optional[str] = None
    created_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Link":
        """Convert database row to Link."""
        return cls(
            id=row["id"],
            url=row["url"],
            title=row["title"],
            language=row["language"],
            image_link=row["image_link"],
            description=row["description"],
            created_on=_parse_timestamp(row["created_on"]),
            updated_on=_parse_timestamp(row["updated_on"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the link the way API callers expect it (camelCase keys)."""
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "language": self.language,
            "imageLink": self.image_link,
            "description": self.description,
            "createdOn": self.created_on.isoformat() if self.created_on else None,
            "updatedOn": self.updated_on.isoformat() if self.updated_on else None,
        }


@dataclass
class QueryResult:
    """Raw outcome of a single statement."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
