"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from crowdvest.cli.date_filters import resolve_cli_date_range
from crowdvest.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_rejects_period_with_since(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), since="2024-01-01", until=None, period="this-month")

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_returns_period_range():
    assert resolve_cli_date_range(_ctx(), since=None, until=None, period="this-month") == get_date_range(
        "this-month"
    )


def test_parses_since_and_until():
    start, end = resolve_cli_date_range(_ctx(), since="2024-01-01", until="2024-01-31", period=None)

    assert start == date(2024, 1, 1)
    assert end == date(2024, 1, 31)


def test_open_ended_range():
    assert resolve_cli_date_range(_ctx(), since=None, until=None, period=None) == (None, None)


def test_invalid_since(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(_ctx(), since="whenever", until=None, period=None)

    assert "Invalid --since date" in capsys.readouterr().err
