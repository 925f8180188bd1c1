from __future__ import annotations

from datetime import datetime, timezone

from link_catalog.storage.models import UNSET, Language, Link, LinkPatch


def _row(**overrides):
    row = {
        "id": 3,
        "url": "https://test.com",
        "title": "A title",
        "language": "en",
        "image_link": None,
        "description": None,
        "created_on": "2024-05-01 10:20:30.456",
        "updated_on": None,
    }
    row.update(overrides)
    return row


def test_from_row_parses_timestamps_as_utc():
    link = Link.from_row(_row(updated_on="2024-05-02 08:00:00.000"))
    assert link.created_on == datetime(2024, 5, 1, 10, 20, 30, 456000, tzinfo=timezone.utc)
    assert link.updated_on == datetime(2024, 5, 2, 8, 0, tzinfo=timezone.utc)


def test_from_row_keeps_nulls():
    link = Link.from_row(_row())
    assert link.image_link is None
    assert link.description is None
    assert link.updated_on is None


def test_to_dict_uses_camel_case():
    data = Link.from_row(_row(image_link="https://test.com/i.png")).to_dict()
    assert data == {
        "id": 3,
        "url": "https://test.com",
        "title": "A title",
        "language": "en",
        "imageLink": "https://test.com/i.png",
        "description": None,
        "createdOn": "2024-05-01T10:20:30.456000+00:00",
        "updatedOn": None,
    }


def test_language_support():
    assert Language.codes() == ["en", "fr"]
    assert Language.is_supported("fr")
    assert Language.is_supported(Language.ENGLISH)
    assert not Language.is_supported("ru")
    assert not Language.is_supported(None)


def test_unset_is_distinct_from_none():
    patch = LinkPatch(description=None)
    assert patch.title is UNSET
    assert not UNSET
    assert repr(UNSET) == "UNSET"
    assert list(patch.changes()) == [("description", None)]
