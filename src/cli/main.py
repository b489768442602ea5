"""Chirp CLI entry points.
This module exposes commands for caching feed endpoints and reading them back.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from typing import Any, Sequence

from core.config import ChirpConfig
from core.errors import ChirpConfigError, ChirpError
from store.cache_sdk import ChirpClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="chirp", description="Feed API cache for MongoDB")
    parser.add_argument("--mongo-uri", help="Override CHIRP_MONGO_URI for this command")
    parser.add_argument("--db", help="Override CHIRP_MONGO_DB for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_write_command(subparsers)
    _add_read_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None, client: ChirpClient | None = None) -> int:
    """Run the Chirp CLI.

    Args:
        argv: Optional argument vector.
        client: Optional pre-built SDK client.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = client or _build_client(args.mongo_uri, args.db)
        if args.command == "write":
            return _run_write_command(client, args)
        if args.command == "read":
            return _run_read_command(client, args)
    except ChirpError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(mongo_uri: str | None, database_name: str | None) -> ChirpClient:
    """Build SDK client with optional store overrides."""
    config = ChirpConfig.from_env()
    if mongo_uri:
        config = replace(config, mongo_uri=mongo_uri)
    if database_name:
        config = replace(config, database_name=database_name)
    return ChirpClient(config)


def _run_write_command(client: ChirpClient, args: argparse.Namespace) -> int:
    """Handle write command.

    Prints the saved/read counts, or the upstream error payload.
    """
    result = client.write(
        args.endpoint,
        query=_parse_pairs(args.query, "--query"),
        require=list(args.require),
        grep=_parse_grep(args.grep),
    )
    if result.is_upstream_error:
        print(json.dumps(result.read, sort_keys=True))
        return 1
    read_count = len(result.read) if isinstance(result.read, list) else 0
    summary = {"endpoint": args.endpoint, "saved": len(result.saved), "read": read_count}
    print(json.dumps(summary, sort_keys=True))
    return 0


def _run_read_command(client: ChirpClient, args: argparse.Namespace) -> int:
    """Handle read command.

    Prints one JSON document per line.
    """
    found = client.read(
        args.endpoint,
        filter_spec=_parse_pairs(args.filter, "--filter"),
        limit=args.limit,
    )
    if found is None:
        return 0
    records = [found] if isinstance(found, dict) else found
    for record in records:
        print(json.dumps(record, sort_keys=True, default=str))
    return 0


def _parse_pairs(values: Sequence[str], flag: str) -> dict[str, str]:
    """Parse repeated ``key=value`` arguments into a mapping."""
    return dict(_split_pairs(values, flag))


def _parse_grep(values: Sequence[str]) -> dict[str, list[str]]:
    """Parse repeated ``path=kw1,kw2`` arguments; repeated paths accumulate."""
    grep: dict[str, list[str]] = {}
    for path, keywords in _split_pairs(values, "--grep"):
        grep.setdefault(path, []).extend(word for word in keywords.split(",") if word)
    return grep


def _split_pairs(values: Sequence[str], flag: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for value in values:
        key, separator, item = value.partition("=")
        if not separator or not key:
            raise ChirpConfigError(f"{flag} expects KEY=VALUE, got '{value}'.")
        pairs.append((key, item))
    return pairs


def _add_write_command(subparsers: Any) -> None:
    """Register write subcommand."""
    parser = subparsers.add_parser("write", help="Fetch an endpoint and cache new records")
    parser.add_argument("endpoint", help="Feed endpoint, e.g. statuses/user_timeline")
    parser.add_argument(
        "--query",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter; repeat for several",
    )
    parser.add_argument(
        "--require",
        action="append",
        default=[],
        metavar="PATH",
        help="Dot path that must hold a non-empty value; repeatable",
    )
    parser.add_argument(
        "--grep",
        action="append",
        default=[],
        metavar="PATH=KW1,KW2",
        help="Dot path whose value must contain one of the keywords; repeatable",
    )


def _add_read_command(subparsers: Any) -> None:
    """Register read subcommand."""
    parser = subparsers.add_parser("read", help="Print cached records for an endpoint")
    parser.add_argument("endpoint", help="Feed endpoint, e.g. statuses/user_timeline")
    parser.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Exact-match filter; repeatable",
    )
    parser.add_argument("--limit", type=int, help="Maximum records to print")
