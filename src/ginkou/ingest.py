"""
Ingestion pipeline: segment a stream, extract roots, store the results.

A unit that is not valid UTF-8 is reported and skipped. Any other
failure, including malformed analyzer output, aborts the pass, and
since the whole pass runs in one bank batch nothing from it is kept.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import BinaryIO, Optional

from ginkou.bank import SentenceBank
from ginkou.models import IngestResult, Segment
from ginkou.segmenter import DEFAULT_DELIMITER, sentences
from ginkou.tokenizer import RootExtractor

logger = logging.getLogger(__name__)

SegmentCallback = Callable[[Segment], None]


def add_sentence_with_words(
    bank: SentenceBank,
    sentence: str,
    extract_roots: RootExtractor,
) -> int:
    """Store one sentence and index it under each of its roots.

    Roots are extracted before anything is written, so an analyzer
    failure leaves the bank untouched.

    Returns:
        The id of the new sentence
    """
    roots = extract_roots(sentence)
    with bank.batch():
        sentence_id = bank.add_sentence(sentence)
        bank.add_words(roots, sentence_id)
    return sentence_id


def ingest(
    bank: SentenceBank,
    stream: BinaryIO,
    extract_roots: RootExtractor,
    *,
    delimiter: str = DEFAULT_DELIMITER,
    on_segment: Optional[SegmentCallback] = None,
) -> IngestResult:
    """Run one ingestion pass over ``stream`` into ``bank``.

    Args:
        bank: The bank receiving the sentences
        stream: Binary stream of raw text
        extract_roots: Callable returning the distinct roots of a sentence
        delimiter: Sentence delimiter character
        on_segment: Called with every segment before it is processed

    Returns:
        IngestResult with counts and the ids of stored sentences

    Raises:
        ExtractionError: If the analyzer fails on any sentence
        StoreIOError: If the bank cannot be written
    """
    result = IngestResult()
    with bank.batch():
        for segment in sentences(stream, delimiter):
            if on_segment is not None:
                on_segment(segment)
            if not segment.ok:
                logger.debug(f"Err on #{segment.index}: {segment.error}")
                result.skipped += 1
                continue
            sentence_id = add_sentence_with_words(
                bank, segment.text, extract_roots
            )
            logger.debug(f"#{segment.index}: {segment.text} -> id {sentence_id}")
            result.added += 1
            result.sentence_ids.append(sentence_id)
    logger.info(f"Added {result.added} sentence(s), skipped {result.skipped}")
    return result
