"""Shared test fixtures for ginkou."""

import pytest

from ginkou import SentenceBank
from ginkou.exceptions import ExtractionError


class FakeExtractor:
    """Root extractor backed by a fixed sentence -> roots table.

    Sentences missing from the table are split on spaces, with the
    delimiter dropped, so plain ASCII test input needs no table entry.
    """

    def __init__(self, table=None, fail_on=()):
        self.table = dict(table or {})
        self.fail_on = set(fail_on)
        self.calls = []

    def __call__(self, sentence):
        self.calls.append(sentence)
        if sentence in self.fail_on:
            raise ExtractionError(f"cannot analyze {sentence!r}")
        if sentence in self.table:
            return list(self.table[sentence])
        return sentence.replace("。", " ").split()


@pytest.fixture
def bank():
    """Create an in-memory bank for testing."""
    with SentenceBank(":memory:") as b:
        yield b


@pytest.fixture
def bank_with_data(bank):
    """Bank holding "A B" and "A B C", each indexed by its letters."""
    s1 = bank.add_sentence("A B")
    bank.add_word("A", s1)
    bank.add_word("B", s1)
    s2 = bank.add_sentence("A B C")
    bank.add_word("A", s2)
    bank.add_word("B", s2)
    bank.add_word("C", s2)
    return bank, s1, s2


@pytest.fixture
def japanese_extractor():
    """Extractor knowing the roots of two short Japanese sentences."""
    return FakeExtractor({
        "猫を見た。": ["猫", "を", "見る", "た"],
        "犬を見る。": ["犬", "を", "見る"],
    })
