"""Reduce a sentence to its word roots with the MeCab analyzer."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from ginkou.exceptions import ExtractionError
from ginkou.models import Token

logger = logging.getLogger(__name__)

END_MARKER = "EOS"

# Index of the base form in MeCab's IPADIC feature list.
ROOT_FIELD = 6

RootExtractor = Callable[[str], list[str]]


def parse_line(line: str) -> Token:
    """Parse one ``surface<TAB>f0,f1,...`` analysis line."""
    surface, tab, rest = line.partition("\t")
    if not tab:
        raise ExtractionError(f"Analysis line has no tab: {line!r}")
    features = tuple(rest.split(","))
    if len(features) <= ROOT_FIELD:
        raise ExtractionError(
            f"Analysis line has {len(features)} feature field(s), "
            f"need at least {ROOT_FIELD + 1}: {line!r}"
        )
    return Token(surface=surface, root=features[ROOT_FIELD], features=features)


def parse_analysis(lines: Iterable[str]) -> Iterator[Token]:
    """Lazily parse analyzer output up to the end marker."""
    for line in lines:
        if line == END_MARKER:
            return
        yield parse_line(line)


def unique_roots(tokens: Iterable[Token]) -> list[str]:
    """Roots of ``tokens`` in first-seen order, without repeats."""
    seen: dict[str, None] = {}
    for token in tokens:
        seen.setdefault(token.root, None)
    return list(seen)


def _default_tagger_args() -> str:
    import ipadic

    return ipadic.MECAB_ARGS


class MecabExtractor:
    """Callable returning the distinct word roots of a sentence.

    The underlying ``MeCab.Tagger`` is created on first use, so building
    an extractor is cheap and never fails.
    """

    def __init__(self, tagger_args: str | None = None) -> None:
        self._tagger_args = tagger_args
        self._tagger = None

    def _get_tagger(self):
        if self._tagger is None:
            import MeCab

            args = self._tagger_args
            if args is None:
                args = _default_tagger_args()
            try:
                self._tagger = MeCab.Tagger(args)
            except RuntimeError as e:
                raise ExtractionError(
                    f"Could not start MeCab with args {args!r}: {e}"
                ) from e
        return self._tagger

    def analyze(self, sentence: str) -> Iterator[Token]:
        """Tokens of ``sentence`` as reported by MeCab."""
        tagger = self._get_tagger()
        try:
            output = tagger.parse(sentence)
        except RuntimeError as e:
            raise ExtractionError(f"MeCab failed on {sentence!r}: {e}") from e
        if output is None:
            raise ExtractionError(f"MeCab returned no output for {sentence!r}")
        return parse_analysis(output.splitlines())

    def __call__(self, sentence: str) -> list[str]:
        roots = unique_roots(self.analyze(sentence))
        if not roots:
            raise ExtractionError(f"No parseable tokens in {sentence!r}")
        logger.debug(f"Roots for {sentence!r}: {roots}")
        return roots
