"""Tests for the command-line interface."""

import logging

import pytest

from shortener import cli
from shortener.cli import build_parser, main
from shortener.core.setting import Settings


@pytest.fixture
def served(monkeypatch):
    """Capture the arguments `serve` hands to uvicorn."""
    calls = {}
    settings = Settings(_env_file=None, DATABASE_URL="memory://", HOST="0.0.0.0", EXPOSED_PORT=8000)

    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: logging.getLogger("shortener"))
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.update(kwargs))
    return calls


def test_encode(capsys):
    assert main(["encode", "11"]) == 0
    assert capsys.readouterr().out.strip() == "f"


def test_decode(capsys):
    assert main(["decode", "32"]) == 0
    assert capsys.readouterr().out.strip() == "51"


def test_decode_rejects_foreign_characters(capsys):
    assert main(["decode", "a!b"]) == 1
    assert "Invalid character" in capsys.readouterr().err


def test_serve_arguments():
    args = build_parser().parse_args(["serve", "--host", "127.0.0.1", "--port", "9000"])
    assert args.host == "127.0.0.1"
    assert args.port == 9000


def test_serve_defaults_to_settings(served):
    assert main(["serve"]) == 0
    assert served["host"] == "0.0.0.0"
    assert served["port"] == 8000


def test_serve_keeps_explicit_zero_port_and_empty_host(served):
    assert main(["serve", "--host", "", "--port", "0"]) == 0
    assert served["host"] == ""
    assert served["port"] == 0
