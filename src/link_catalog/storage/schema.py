"""DDL for the links catalog."""

from pathlib import Path

SCHEMA_SQL = """
-- Main links table
CREATE TABLE IF NOT EXISTS links (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT UNIQUE NOT NULL CHECK (url <> ''),
    title TEXT NOT NULL CHECK (title <> ''),
    language TEXT NOT NULL CHECK (language IN ('en', 'fr')),
    image_link TEXT,
    description TEXT,
    created_on TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now')),
    updated_on TEXT
);

-- Indexes
CREATE INDEX IF NOT EXISTS idx_links_created_on ON links(created_on);
CREATE INDEX IF NOT EXISTS idx_links_language ON links(language);

-- Full-text search, one contentless index per language. The triggers store
-- stem_text() output, which Database registers on every connection.
CREATE VIRTUAL TABLE IF NOT EXISTS links_fts_en USING fts5(
    title,
    description,
    content='',
    tokenize='unicode61 remove_diacritics 2'
);

CREATE VIRTUAL TABLE IF NOT EXISTS links_fts_fr USING fts5(
    title,
    description,
    content='',
    tokenize='unicode61 remove_diacritics 2'
);

-- Triggers to keep FTS in sync; each row is indexed only under its language
CREATE TRIGGER IF NOT EXISTS links_ai AFTER INSERT ON links BEGIN
    INSERT INTO links_fts_en(rowid, title, description)
    SELECT new.id, stem_text('en', new.title), stem_text('en', new.description)
    WHERE new.language = 'en';
    INSERT INTO links_fts_fr(rowid, title, description)
    SELECT new.id, stem_text('fr', new.title), stem_text('fr', new.description)
    WHERE new.language = 'fr';
END;

CREATE TRIGGER IF NOT EXISTS links_au AFTER UPDATE ON links BEGIN
    INSERT INTO links_fts_en(links_fts_en, rowid, title, description)
    SELECT 'delete', old.id, stem_text('en', old.title), stem_text('en', old.description)
    WHERE old.language = 'en';
    INSERT INTO links_fts_fr(links_fts_fr, rowid, title, description)
    SELECT 'delete', old.id, stem_text('fr', old.title), stem_text('fr', old.description)
    WHERE old.language = 'fr';
    INSERT INTO links_fts_en(rowid, title, description)
    SELECT new.id, stem_text('en', new.title), stem_text('en', new.description)
    WHERE new.language = 'en';
    INSERT INTO links_fts_fr(rowid, title, description)
    SELECT new.id, stem_text('fr', new.title), stem_text('fr', new.description)
    WHERE new.language = 'fr';
END;

CREATE TRIGGER IF NOT EXISTS links_ad AFTER DELETE ON links BEGIN
    INSERT INTO links_fts_en(links_fts_en, rowid, title, description)
    SELECT 'delete', old.id, stem_text('en', old.title), stem_text('en', old.description)
    WHERE old.language = 'en';
    INSERT INTO links_fts_fr(links_fts_fr, rowid, title, description)
    SELECT 'delete', old.id, stem_text('fr', old.title), stem_text('fr', old.description)
    WHERE old.language = 'fr';
END;
"""

# Dropping the links table also drops its triggers.
DROP_SCHEMA_SQL = """
DROP TABLE IF EXISTS links_fts_en;
DROP TABLE IF EXISTS links_fts_fr;
DROP TABLE IF EXISTS links;
"""


def load_ddl(path: str | Path) -> str:
    """Read a DDL script from a .sql file, or every .sql file in a directory.

    Directory contents are concatenated in file name order, so scripts can be
    prefixed with a sequence number (``001_links.sql``, ``002_indexes.sql``).
    """
    path = Path(path)
    if path.is_dir():
        files = sorted(path.glob("*.sql"))
        if not files:
            raise FileNotFoundError(f"No .sql files found in {path}")
        return "\n".join(f.read_text(encoding="utf-8") for f in files)
    return path.read_text(encoding="utf-8")
