"""CLI for running queries against a resource snapshot file."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

import orjson

from resource_search.adapters.snapshot import JsonSnapshotProvider
from resource_search.config import get_settings
from resource_search.domain.errors import SearchEngineError, SnapshotLoadError
from resource_search.domain.model import SearchResult
from resource_search.observability.logging import configure_logging
from resource_search.observability.tracing import init_tracing
from resource_search.search.engine import ResourceSearchEngine


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ENGINE_ERROR = 1
EXIT_USAGE = 2


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resource-search",
        description="Search a cloud resource snapshot with the type-ahead query syntax",
        epilog="Syntax: <term>  type:<v>  location:<v>  rg:<v>  name:<v>  tag:<key>=<value>  (* and ? wildcards)",
    )
    parser.add_argument("snapshot", type=Path, help="JSON file with a list of resources")
    parser.add_argument("query", nargs="*", help="Query tokens (joined with spaces)")
    parser.add_argument("--suggest", metavar="PARTIAL", help="Print autocomplete suggestions for PARTIAL")
    parser.add_argument("--limit", type=int, default=20, help="Maximum results to print (default: 20)")
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of a table")
    return parser


def _format_result(rank: int, result: SearchResult) -> str:
    return (
        f"{rank:>3}. {result.resource_name:<32} score={result.score:7.2f}"
        f" {result.match_type.value}={result.match_value}"
    )


def _write_json(payload: object) -> None:
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    configure_logging(settings.get_log_level(), json_output=settings.log_json)
    if settings.tracing_enabled:
        init_tracing(settings.service_name)

    parser = build_argument_parser()
    args = parser.parse_args(argv)
    if args.limit < 1:
        parser.error("--limit must be >= 1")

    try:
        resources = JsonSnapshotProvider(args.snapshot).fetch()
    except SnapshotLoadError as exc:
        logger.error("%s", exc)
        return EXIT_USAGE

    engine = ResourceSearchEngine(suggestion_min_length=settings.suggestion_min_length)
    engine.set_resources(resources)

    if args.suggest is not None:
        suggestions = engine.get_suggestions(args.suggest, limit=settings.max_suggestions)
        if args.json:
            _write_json(suggestions)
        else:
            for suggestion in suggestions:
                sys.stdout.write(suggestion + "\n")
        return EXIT_OK

    query = " ".join(args.query)
    try:
        results = engine.search(query)
    except SearchEngineError as exc:
        logger.error("Search failed: %s", exc)
        return EXIT_ENGINE_ERROR

    shown = results[: args.limit]
    if args.json:
        _write_json([result.model_dump(mode="json") for result in shown])
    else:
        for rank, result in enumerate(shown, start=1):
            sys.stdout.write(_format_result(rank, result) + "\n")
        sys.stdout.write(f"{len(results)} results for {query!r}\n")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
