"""
Command-line interface for the ginkou sentence bank.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from ginkou.bank import SentenceBank
from ginkou.config import Config, load_config
from ginkou.exceptions import GinkouError
from ginkou.ingest import ingest
from ginkou.models import QueryMode, Segment
from ginkou.tokenizer import MecabExtractor


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the ginkou CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config).with_overrides(database=args.db)
        return args.func(args, config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except GinkouError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--database", "-d",
        dest="db",
        type=Path,
        help="The database to use (default: ~/.ginkoudb)",
    )
    common.add_argument(
        "--config",
        type=Path,
        help="YAML config file (default: ~/.ginkou.yaml if present)",
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output",
    )

    parser = argparse.ArgumentParser(
        prog="ginkou",
        description="Japanese sentence bank",
    )
    subparsers = parser.add_subparsers(title="commands", dest="command")

    # add command
    add_parser = subparsers.add_parser(
        "add",
        parents=[common],
        help="Add new sentences to the database",
    )
    add_parser.add_argument(
        "--file", "-f",
        type=Path,
        help="The file to read sentences from (default: stdin)",
    )
    add_parser.set_defaults(func=cmd_add)

    # get command
    get_parser = subparsers.add_parser(
        "get",
        parents=[common],
        help="Search for all sentences containing a given word",
    )
    get_parser.add_argument(
        "word",
        help="The word to search for in the database",
    )
    get_parser.add_argument(
        "--allwords", "-a",
        dest="all",
        action="store_true",
        help="Show all results instead of the shortest ones",
    )
    get_parser.set_defaults(func=cmd_get)

    # stats command
    stats_parser = subparsers.add_parser(
        "stats",
        parents=[common],
        help="Show how many sentences and words are stored",
    )
    stats_parser.set_defaults(func=cmd_stats)

    return parser


def cmd_add(args: argparse.Namespace, config: Config) -> int:
    """Handle add command."""
    if args.file is None:
        stream = sys.stdin.buffer
    else:
        try:
            stream = open(args.file, "rb")
        except OSError as e:
            print(f"Couldn't open {args.file}:\n {e}")
            return 0

    extractor = MecabExtractor(config.tagger_args)
    try:
        with SentenceBank(config.database, limit=config.limit) as bank:
            result = ingest(
                bank,
                stream,
                extractor,
                delimiter=config.delimiter,
                on_segment=_print_segment,
            )
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()

    print(f"\nAdded {result.added} sentence(s), skipped {result.skipped}")
    return 0


def cmd_get(args: argparse.Namespace, config: Config) -> int:
    """Handle get command."""
    mode = QueryMode.ALL if args.all else QueryMode.BEST
    with SentenceBank(config.database, limit=config.limit) as bank:
        matches = bank.matching_sentences(args.word, mode)

    # Output is often piped into `head`; stop quietly when it closes.
    try:
        for sentence in matches:
            print(sentence)
        sys.stdout.flush()
    except BrokenPipeError:
        _silence_stdout()
    return 0


def cmd_stats(args: argparse.Namespace, config: Config) -> int:
    """Handle stats command."""
    with SentenceBank(config.database, limit=config.limit) as bank:
        stats = bank.stats()

    print(f"Database:    {bank.path}")
    print(f"Sentences:   {stats.sentences}")
    print(f"Words:       {stats.words}")
    print(f"Memberships: {stats.memberships}")
    return 0


def _print_segment(segment: Segment) -> None:
    """Print ingestion progress for one segment."""
    if segment.ok:
        print(f"#{segment.index}: {segment.text}")
    else:
        print(f"Err on #{segment.index}: {segment.error}")


def _silence_stdout() -> None:
    """Point stdout at devnull so the final flush at exit cannot fail."""
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, ValueError, OSError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)


if __name__ == "__main__":
    sys.exit(main())
