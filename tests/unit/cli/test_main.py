"""Unit tests for CLI command handling."""

from __future__ import annotations

import json

from cli.main import build_parser, main
from store.cache_sdk import ChirpClient
from tests.fakes import FakeFeed, InMemoryStore, make_tweet


def _client(config, payload, store: InMemoryStore | None = None) -> ChirpClient:
    return ChirpClient(config, feed=FakeFeed(payload), store=store or InMemoryStore())


def test_cli_write_prints_counts(config, capsys) -> None:
    """CLI write should print saved and read counts."""
    client = _client(config, [make_tweet(1, text="red sky"), make_tweet(2, text="blue sky")])

    exit_code = main(
        ["write", "statuses/user_timeline", "--grep", "text=red,green", "--query", "count=2"],
        client=client,
    )
    summary = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert summary == {"endpoint": "statuses/user_timeline", "read": 2, "saved": 1}


def test_cli_write_reports_zero_read_for_envelope_payload(config, capsys) -> None:
    """A non-error mapping body carries no record list to count."""
    envelope = {"statuses": [make_tweet(1)], "search_metadata": {"count": 1}}
    client = _client(config, envelope)

    exit_code = main(["write", "search/tweets"], client=client)
    summary = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert summary == {"endpoint": "search/tweets", "read": 0, "saved": 0}


def test_cli_write_reports_upstream_errors(config, capsys) -> None:
    """Upstream error payloads should be printed with a failing exit code."""
    payload = {"errors": [{"code": 215, "message": "Bad Authentication data."}]}

    exit_code = main(["write", "statuses/user_timeline"], client=_client(config, payload))

    assert exit_code == 1
    assert json.loads(capsys.readouterr().out) == payload


def test_cli_write_rejects_malformed_pairs(config, capsys) -> None:
    """Malformed KEY=VALUE arguments should fail without a traceback."""
    exit_code = main(
        ["write", "statuses/user_timeline", "--query", "count"],
        client=_client(config, []),
    )

    assert exit_code == 1
    assert "--query expects KEY=VALUE" in capsys.readouterr().err


def test_cli_read_prints_json_lines(config, capsys) -> None:
    """CLI read should print one record per line."""
    store = InMemoryStore()
    client = _client(config, [make_tweet(1), make_tweet(2)], store)
    main(["write", "statuses/user_timeline"], client=client)
    capsys.readouterr()

    exit_code = main(
        ["read", "statuses/user_timeline", "--filter", "id_str=1002"],
        client=client,
    )
    lines = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0
    assert [json.loads(line)["id_str"] for line in lines] == ["1002"]


def test_parser_accumulates_repeated_options() -> None:
    """Repeatable options should collect every value."""
    args = build_parser().parse_args(
        ["write", "search", "--require", "user.name", "--require", "text"]
    )

    assert args.require == ["user.name", "text"]
