"""Database connection, DDL, and low-level row helpers for ginkou."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ginkou.exceptions import SchemaError

SCHEMA_VERSION = "1.0"

MEMORY = ":memory:"

# ---------------------------------------------------------------------------
# DDL statements
# ---------------------------------------------------------------------------

_DDL = """
CREATE TABLE IF NOT EXISTS meta (
    key TEXT NOT NULL,
    value TEXT,
    UNIQUE (key)
);

CREATE TABLE IF NOT EXISTS words (
    id INTEGER PRIMARY KEY,
    word TEXT NOT NULL,
    UNIQUE (word)
);

CREATE TABLE IF NOT EXISTS sentences (
    id INTEGER PRIMARY KEY,
    sentence TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS word_sentences (
    word_id INTEGER NOT NULL REFERENCES words (id),
    sentence_id INTEGER NOT NULL REFERENCES sentences (id),
    PRIMARY KEY (word_id, sentence_id)
);
CREATE INDEX IF NOT EXISTS word_sentence_sentence_index
    ON word_sentences (sentence_id);
"""

# Columns every pre-existing table must carry to be usable.
_REQUIRED_COLUMNS = {
    "words": {"id", "word"},
    "sentences": {"id", "sentence"},
    "word_sentences": {"word_id", "sentence_id"},
}

_MATCHING_SQL = (
    "SELECT s.sentence FROM sentences s "
    "JOIN word_sentences ws ON ws.sentence_id = s.id "
    "JOIN words w ON w.id = ws.word_id "
    "WHERE w.word = ? "
    "ORDER BY length(s.sentence), s.id"
)


def connect(db_path: str | Path = MEMORY) -> sqlite3.Connection:
    """Open a database connection with ginkou PRAGMA settings."""
    db_path_str = str(db_path)
    conn = sqlite3.connect(db_path_str)
    conn.execute("PRAGMA foreign_keys = ON")
    if db_path_str != MEMORY:
        conn.execute("PRAGMA journal_mode = WAL")
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables if they don't exist. Set schema version."""
    conn.executescript(_DDL)
    conn.execute(
        "INSERT OR IGNORE INTO meta (key, value) VALUES ('schema_version', ?)",
        (SCHEMA_VERSION,),
    )
    conn.commit()


def check_schema_version(conn: sqlite3.Connection) -> None:
    """Verify the database schema version is compatible."""
    try:
        row = conn.execute(
            "SELECT value FROM meta WHERE key = 'schema_version'"
        ).fetchone()
    except sqlite3.OperationalError:
        # meta table doesn't exist - uninitialized DB
        return
    if row is None:
        return
    version = row[0]
    if version != SCHEMA_VERSION:
        raise SchemaError(
            f"Incompatible schema version: {version} "
            f"(expected {SCHEMA_VERSION})"
        )


def check_tables(conn: sqlite3.Connection) -> None:
    """Reject pre-existing tables that lack the columns ginkou relies on."""
    legacy = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND lower(name) = 'wordsentence'"
    ).fetchone()
    if legacy is not None:
        raise SchemaError(
            f"Found table {legacy[0]!r} from an older ginkou layout; "
            "this database cannot be opened"
        )
    for table, required in _REQUIRED_COLUMNS.items():
        columns = {
            row[1] for row in conn.execute(f"PRAGMA table_info({table})")
        }
        if not columns:
            continue
        missing = required - columns
        if missing:
            raise SchemaError(
                f"Table {table!r} is missing column(s): "
                f"{', '.join(sorted(missing))}"
            )


# ---------------------------------------------------------------------------
# Row helpers
# ---------------------------------------------------------------------------

def insert_sentence(conn: sqlite3.Connection, text: str) -> int:
    """Insert a sentence row and return its id."""
    cur = conn.execute("INSERT INTO sentences (sentence) VALUES (?)", (text,))
    return cur.lastrowid


def get_or_create_word(conn: sqlite3.Connection, word: str) -> int:
    """Get the id for a word, inserting if needed."""
    conn.execute("INSERT OR IGNORE INTO words (word) VALUES (?)", (word,))
    row = conn.execute("SELECT id FROM words WHERE word = ?", (word,)).fetchone()
    return row[0]


def link_word(conn: sqlite3.Connection, word_id: int, sentence_id: int) -> None:
    """Record membership of a word in a sentence; repeats are ignored."""
    conn.execute(
        "INSERT OR IGNORE INTO word_sentences (word_id, sentence_id) "
        "VALUES (?, ?)",
        (word_id, sentence_id),
    )


def get_sentence_row(
    conn: sqlite3.Connection, sentence_id: int
) -> sqlite3.Row | None:
    """Get a full sentence row by id."""
    return conn.execute(
        "SELECT id, sentence FROM sentences WHERE id = ?",
        (sentence_id,),
    ).fetchone()


def matching_sentences(
    conn: sqlite3.Connection, word: str, limit: int | None = None
) -> list[str]:
    """Sentences containing ``word``, shortest first, ties by insertion."""
    if limit is None:
        rows = conn.execute(_MATCHING_SQL, (word,))
    else:
        rows = conn.execute(_MATCHING_SQL + " LIMIT ?", (word, limit))
    return [row[0] for row in rows]


def count_rows(conn: sqlite3.Connection, table: str) -> int:
    """Number of rows in one of the bank tables."""
    if table not in _REQUIRED_COLUMNS:
        raise ValueError(f"Unknown table: {table!r}")
    return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
