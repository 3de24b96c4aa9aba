"""Domain model dataclasses and enums for ginkou."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class QueryMode(str, Enum):
    """How many matching sentences a lookup returns."""

    ALL = "all"
    BEST = "best"


@dataclass(frozen=True, slots=True)
class Segment:
    """One delimiter-terminated unit produced by the segmenter.

    Exactly one of ``text`` and ``error`` is set. ``raw`` always holds
    the bytes of the unit as read, delimiter included.
    """

    index: int
    raw: bytes
    text: str | None = None
    error: UnicodeDecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class Token:
    """A single analyzer record: surface form plus its root."""

    surface: str
    root: str
    features: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SentenceModel:
    """A stored sentence."""

    id: int
    text: str


@dataclass(frozen=True, slots=True)
class BankStats:
    """Row counts for the three relations of a bank."""

    sentences: int
    words: int
    memberships: int


@dataclass(slots=True)
class IngestResult:
    """Outcome of one ingestion pass."""

    added: int = 0
    skipped: int = 0
    sentence_ids: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.added + self.skipped
