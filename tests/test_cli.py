from __future__ import annotations

import json
import sys
from typing import List

import pytest

import cli
from fakes import FakeBrowser
from html_fixtures import CONTACT_HTML, PROFILE_HTML, STABLE_SEARCH_HTML


def _run_cli_with_args(monkeypatch, args_list: List[str]) -> None:
    """Run cli.main() in-process with the provided argv."""
    monkeypatch.setattr(sys, "argv", ["cli.py"] + args_list)
    try:
        cli.main()
    except SystemExit as e:
        code = int(getattr(e, "code", 0) or 0)
        if code not in (0, None):
            raise


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("RUN_ENV", "test")
    monkeypatch.setenv("SETTLE_DELAY_SECONDS", "0")
    monkeypatch.setenv("CONTACT_REVEAL_DELAY_SECONDS", "0")
    monkeypatch.setenv("BROWSE_TRACE", "false")

    def html_for(url: str) -> str:
        return STABLE_SEARCH_HTML if "/search/" in url else PROFILE_HTML

    browser = FakeBrowser(html_for, contact_html=CONTACT_HTML)
    monkeypatch.setattr(cli, "_make_browser", lambda settings: browser)
    return str(tmp_path / "cli.db"), browser


def test_cli_session_lifecycle(cli_env, monkeypatch, capsys):
    db, _ = cli_env
    _run_cli_with_args(monkeypatch, ["--db", db, "bootstrap"])
    _run_cli_with_args(monkeypatch, ["--db", db, "status", "--owner", "owner-a"])
    out = capsys.readouterr().out
    assert json.loads(out[out.index("{"):])["state"] == "disconnected"

    _run_cli_with_args(monkeypatch, ["--db", db, "login", "--owner", "owner-a", "--li-at", "token", "--no-validate"])
    _run_cli_with_args(monkeypatch, ["--db", db, "status", "--owner", "owner-a"])
    out = capsys.readouterr().out
    assert json.loads(out[out.index("{"):])["state"] == "connected"

    _run_cli_with_args(monkeypatch, ["--db", db, "logout", "--owner", "owner-a"])
    assert "Session cleared" in capsys.readouterr().out


def test_cli_scrape_then_archives_and_history(cli_env, monkeypatch, capsys):
    db, browser = cli_env
    _run_cli_with_args(monkeypatch, ["--db", db, "login", "--owner", "owner-a", "--li-at", "token"])
    assert browser.pages[0].visited == ["https://www.linkedin.com/feed/"]
    capsys.readouterr()

    _run_cli_with_args(monkeypatch, ["--db", db, "scrape", "--owner", "owner-a", "--profile", "jane-doe"])
    scraped = json.loads(capsys.readouterr().out)
    assert scraped["name"] == "Jane Doe"
    assert scraped["email"]["kind"] == "real"

    _run_cli_with_args(monkeypatch, ["--db", db, "archives", "--owner", "owner-a"])
    archives = json.loads(capsys.readouterr().out)
    assert len(archives) == 1
    assert archives[0]["email"] == "jane@example.com"
    assert archives[0]["email_is_fallback"] is False

    _run_cli_with_args(monkeypatch, ["--db", db, "history-stats", "--owner", "owner-a"])
    assert json.loads(capsys.readouterr().out)["total"] == 1


def test_cli_search_records_history(cli_env, monkeypatch, capsys):
    db, _ = cli_env
    monkeypatch.setenv("SEARCH_MAX_PAGES", "1")
    _run_cli_with_args(monkeypatch, ["--db", db, "login", "--owner", "owner-a", "--li-at", "token", "--no-validate"])
    capsys.readouterr()

    _run_cli_with_args(monkeypatch, ["--db", db, "search", "--owner", "owner-a", "--title", "Head of Sales", "--company", "Acme"])
    response = json.loads(capsys.readouterr().out)
    assert {r["external_id"] for r in response["results"]} == {"jane-doe", "mark-lee"}

    _run_cli_with_args(monkeypatch, ["--db", db, "history", "--owner", "owner-a"])
    groups = json.loads(capsys.readouterr().out)
    assert len(groups) == 1
    assert groups[0]["count"] == 2
    assert groups[0]["search_key"] == "company:acme|job_title:head of sales"


def test_cli_scrape_without_login_exits_with_error(cli_env, monkeypatch, capsys):
    db, browser = cli_env
    with pytest.raises(SystemExit) as exc:
        _run_cli_with_args(monkeypatch, ["--db", db, "scrape", "--owner", "owner-a", "--profile", "jane-doe"])
    assert exc.value.code == 1
    assert "reconnect" in capsys.readouterr().err
    assert browser.pages == []


def test_cli_scrape_summary(cli_env, monkeypatch, capsys):
    db, _ = cli_env
    _run_cli_with_args(monkeypatch, ["--db", db, "login", "--owner", "owner-a", "--li-at", "token", "--no-validate"])
    capsys.readouterr()

    _run_cli_with_args(monkeypatch, ["--db", db, "scrape", "--owner", "owner-a", "--profile", "jane-doe", "--summary"])
    out = capsys.readouterr().out
    assert "Jane Doe" in out
    assert "Recent Posts: 5" in out
    assert "Active: yes" in out
