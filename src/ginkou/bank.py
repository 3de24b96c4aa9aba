"""SentenceBank, the word-indexed sentence store."""

from __future__ import annotations

import functools
import logging
import sqlite3
from collections.abc import Callable, Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar

from ginkou import db as _db
from ginkou.exceptions import (
    IntegrityError,
    SchemaError,
    StoreIOError,
)
from ginkou.models import BankStats, QueryMode, SentenceModel

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])

DEFAULT_LIMIT = 200


@contextmanager
def _store_io(bank: SentenceBank, action: str) -> Generator[None, None, None]:
    """Re-raise SQLite I/O failures as StoreIOError."""
    try:
        yield
    except sqlite3.OperationalError as e:
        raise StoreIOError(f"{action} {bank._db_path} failed: {e}") from e


def _modifies_db(method: _F) -> _F:
    """Decorator: runs a mutation in its own transaction unless batching."""

    @functools.wraps(method)
    def wrapper(self: SentenceBank, *args: Any, **kwargs: Any) -> Any:
        with _store_io(self, "Write to"):
            if self._in_batch:
                return method(self, *args, **kwargs)
            with self._conn:
                return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _reads_db(method: _F) -> _F:
    """Decorator: translates I/O failures of a lookup."""

    @functools.wraps(method)
    def wrapper(self: SentenceBank, *args: Any, **kwargs: Any) -> Any:
        with _store_io(self, "Read from"):
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class SentenceBank:
    """Sentences indexed by the word roots they contain.

    Pass ``":memory:"`` (the default) for an ephemeral bank, or a file
    path for a durable one. Tables are created on first open.
    """

    def __init__(
        self,
        db_path: str | Path = _db.MEMORY,
        *,
        limit: int = DEFAULT_LIMIT,
    ) -> None:
        self._db_path = str(db_path)
        self.limit = limit
        try:
            self._conn = _db.connect(db_path)
        except sqlite3.OperationalError as e:
            raise StoreIOError(f"Cannot open {self._db_path}: {e}") from e
        except sqlite3.DatabaseError as e:
            raise SchemaError(f"{self._db_path} is not usable: {e}") from e
        try:
            _db.check_schema_version(self._conn)
            _db.check_tables(self._conn)
            _db.init_db(self._conn)
        except sqlite3.OperationalError as e:
            self._conn.close()
            raise StoreIOError(f"Cannot initialize {self._db_path}: {e}") from e
        except sqlite3.DatabaseError as e:
            self._conn.close()
            raise SchemaError(f"{self._db_path} is not usable: {e}") from e
        except SchemaError:
            self._conn.close()
            raise
        self._in_batch = False
        self._batch_depth = 0
        logger.debug(f"Opened sentence bank at {self._db_path}")

    @property
    def path(self) -> str:
        return self._db_path

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> SentenceBank:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Batch context manager
    # ------------------------------------------------------------------

    @contextmanager
    def batch(self) -> Generator[None, None, None]:
        """Group multiple insertions into a single transaction."""
        self._batch_depth += 1
        if self._batch_depth == 1:
            self._in_batch = True
            self._conn.execute("BEGIN")
        try:
            yield
        except BaseException:
            if self._batch_depth == 1:
                self._conn.rollback()
                self._in_batch = False
            self._batch_depth -= 1
            raise
        else:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                try:
                    with _store_io(self, "Commit to"):
                        self._conn.commit()
                finally:
                    self._in_batch = False

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    @_modifies_db
    def add_sentence(self, text: str) -> int:
        """Store a new sentence and return its id.

        Identical texts are stored as distinct sentences.
        """
        return _db.insert_sentence(self._conn, text)

    @_modifies_db
    def add_word(self, word: str, sentence_id: int) -> None:
        """Record that ``word`` occurs in sentence ``sentence_id``.

        Repeating a (word, sentence) pair is a no-op.
        """
        word_id = _db.get_or_create_word(self._conn, word)
        try:
            _db.link_word(self._conn, word_id, sentence_id)
        except sqlite3.IntegrityError as e:
            raise IntegrityError(
                f"Sentence not found: {sentence_id!r} (word {word!r})"
            ) from e

    def add_words(self, words: list[str], sentence_id: int) -> None:
        """Record every word in ``words`` for one sentence."""
        with self.batch():
            for word in words:
                self.add_word(word, sentence_id)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @_reads_db
    def matching_sentences(
        self, word: str, mode: QueryMode | str = QueryMode.ALL
    ) -> list[str]:
        """Texts of sentences containing ``word``, shortest first.

        Sentences of equal length come back in insertion order.
        ``QueryMode.BEST`` caps the result at :attr:`limit` sentences.
        """
        mode = QueryMode(mode)
        limit = self.limit if mode is QueryMode.BEST else None
        return _db.matching_sentences(self._conn, word, limit)

    @_reads_db
    def get_sentence(self, sentence_id: int) -> SentenceModel | None:
        """The stored sentence with this id, or None."""
        row = _db.get_sentence_row(self._conn, sentence_id)
        if row is None:
            return None
        return SentenceModel(id=row["id"], text=row["sentence"])

    @_reads_db
    def words_for_sentence(self, sentence_id: int) -> list[str]:
        """Words recorded for one sentence, oldest word first."""
        rows = self._conn.execute(
            "SELECT w.word FROM words w "
            "JOIN word_sentences ws ON ws.word_id = w.id "
            "WHERE ws.sentence_id = ? ORDER BY w.id",
            (sentence_id,),
        ).fetchall()
        return [row[0] for row in rows]

    @_reads_db
    def count_sentences(self) -> int:
        return _db.count_rows(self._conn, "sentences")

    @_reads_db
    def stats(self) -> BankStats:
        """Row counts of sentences, words and memberships."""
        return BankStats(
            sentences=_db.count_rows(self._conn, "sentences"),
            words=_db.count_rows(self._conn, "words"),
            memberships=_db.count_rows(self._conn, "word_sentences"),
        )
