import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from config.settings import get_settings
from db import schema
from db.connection import get_connection
from db.repos.archive_repo import ArchiveRepo
from db.repos.history_repo import HistoryRepo
from db.repos.sessions_repo import SessionsRepo
from errors import LinkedInEngineError
from models.search_criteria import SearchCriteria
from services.archive_merger import ArchiveMerger
from services.auth_service import LinkedInAuthService
from services.browse import BrowseGate
from services.company_lookup import build_company_lookup
from services.history_indexer import HistoryIndexer
from services.linkedin_service import LinkedInArchiveService
from services.reporting import print_history_summary, print_profile_summary, print_search_summary
from services.session_store import SessionStore
from utils.logging_setup import init_logging
from utils.timefmt import as_utc


logger = logging.getLogger(__name__)


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _make_browser(settings):
    # Imported lazily so archive/history commands work without a browser install
    from services.playwright_browser import PlaywrightBrowser
    return PlaywrightBrowser(settings)


async def _with_browser(settings, fn):
    browser = _make_browser(settings)
    try:
        return await fn(browser)
    finally:
        stop = getattr(browser, "stop", None)
        if stop is not None:
            await stop()


def _open(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    return conn


def _session_store(conn, settings) -> SessionStore:
    return SessionStore(SessionsRepo(conn), settings)


def _archive_service(conn, settings, browser=None) -> LinkedInArchiveService:
    store = _session_store(conn, settings)
    return LinkedInArchiveService(
        gate=BrowseGate(browser, store, settings),
        merger=ArchiveMerger(ArchiveRepo(conn)),
        history=HistoryIndexer(HistoryRepo(conn)),
        lookup=build_company_lookup(settings),
        settings=settings,
    )


def _parse_when(text):
    if not text:
        return None
    return as_utc(datetime.fromisoformat(text))


def cmd_bootstrap(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    print("Schema ready")


def cmd_login(args):
    settings = get_settings()
    conn = _open(args)
    store = _session_store(conn, settings)

    if args.cookies_file:
        cookies = json.loads(Path(args.cookies_file).read_text(encoding="utf-8"))
        if isinstance(cookies, dict):
            cookies = cookies.get("cookies") or []
    else:
        cookies = [{"name": "li_at", "value": args.li_at}]

    async def _connect(browser):
        auth = LinkedInAuthService(store, browser, settings)
        return await auth.connect_with_cookies(args.owner, cookies, validate=True)

    if args.no_validate:
        session = asyncio.run(LinkedInAuthService(store, None, settings).connect_with_cookies(args.owner, cookies, validate=False))
    else:
        session = asyncio.run(_with_browser(settings, _connect))
    print(f"LinkedIn connected for owner={args.owner}; session expires {session.expires_at.isoformat()}")


def cmd_logout(args):
    settings = get_settings()
    conn = _open(args)
    removed = LinkedInAuthService(_session_store(conn, settings), None, settings).logout(args.owner)
    print("Session cleared" if removed else "No session to clear")


def cmd_status(args):
    settings = get_settings()
    conn = _open(args)
    _print_json(LinkedInAuthService(_session_store(conn, settings), None, settings).status(args.owner))


def cmd_search(args):
    settings = get_settings()
    conn = _open(args)
    criteria = SearchCriteria(
        job_title=args.title,
        industry=args.industry,
        company=args.company,
        keywords=args.location,
    )

    async def _search(browser):
        return await _archive_service(conn, settings, browser).search_people(args.owner, criteria)

    response = asyncio.run(_with_browser(settings, _search))
    if args.summary:
        print_search_summary(criteria, response)
    else:
        _print_json(response.model_dump(mode="json"))


def cmd_scrape(args):
    settings = get_settings()
    conn = _open(args)

    async def _scrape(browser):
        return await _archive_service(conn, settings, browser).scrape_profile(
            args.owner, args.profile, known_name=args.name
        )

    profile = asyncio.run(_with_browser(settings, _scrape))
    if args.summary:
        print_profile_summary(profile)
    else:
        _print_json(profile.model_dump(mode="json"))


def cmd_archives(args):
    settings = get_settings()
    conn = _open(args)
    rows = _archive_service(conn, settings).get_archives(args.owner)
    out = []
    for r in rows[: args.limit] if args.limit else rows:
        item = r.model_dump(mode="json", exclude={"email"})
        item["email"] = r.email_address
        item["email_is_fallback"] = r.email_is_fallback
        out.append(item)
    _print_json(out)


def cmd_history(args):
    settings = get_settings()
    conn = _open(args)
    service = _archive_service(conn, settings)
    groups = service.get_history_grouped(args.owner, _parse_when(args.start), _parse_when(args.end))
    if args.summary:
        print_history_summary(groups, service.get_history_stats(args.owner))
    else:
        _print_json([g.model_dump(mode="json") for g in groups])


def cmd_history_stats(args):
    settings = get_settings()
    conn = _open(args)
    _print_json(_archive_service(conn, settings).get_history_stats(args.owner).model_dump(mode="json"))


def cmd_history_cleanup(args):
    settings = get_settings()
    conn = _open(args)
    days = args.days if args.days is not None else settings.history_retention_days
    deleted = _archive_service(conn, settings).delete_history_older_than(args.owner, days)
    print(f"Deleted {deleted} history entries older than {days} days")


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="LinkedIn profile archive CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def _owner(p):
        p.add_argument("--owner", default=settings.default_owner_id, help="Owner id (default from settings)")

    p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_login = sub.add_parser("login", help="Connect a LinkedIn session from a li_at cookie or exported cookies")
    _owner(p_login)
    lg = p_login.add_mutually_exclusive_group(required=True)
    lg.add_argument("--li-at", help="Value of the li_at session cookie")
    lg.add_argument("--cookies-file", help="JSON file with exported LinkedIn cookies")
    p_login.add_argument("--no-validate", action="store_true", help="Store cookies without opening LinkedIn")
    p_login.set_defaults(func=cmd_login)

    p_logout = sub.add_parser("logout", help="Clear the stored LinkedIn session")
    _owner(p_logout)
    p_logout.set_defaults(func=cmd_logout)

    p_status = sub.add_parser("status", help="Show LinkedIn session state")
    _owner(p_status)
    p_status.set_defaults(func=cmd_status)

    p_search = sub.add_parser("search", help="Search people and record new results to history")
    _owner(p_search)
    p_search.add_argument("--title", help="Job title; 'Title - Company' is split")
    p_search.add_argument("--industry")
    p_search.add_argument("--company")
    p_search.add_argument("--location", help="Location text (mapped to a LinkedIn geo filter when known)")
    p_search.add_argument("--summary", action="store_true", help="Print a text summary instead of JSON")
    p_search.set_defaults(func=cmd_search)

    p_scrape = sub.add_parser("scrape", help="Scrape one profile into the archive")
    _owner(p_scrape)
    p_scrape.add_argument("--profile", required=True, help="Profile URL or public id")
    p_scrape.add_argument("--name", help="Name already known from search results")
    p_scrape.add_argument("--summary", action="store_true", help="Print a text summary instead of JSON")
    p_scrape.set_defaults(func=cmd_scrape)

    p_arch = sub.add_parser("archives", help="List archived profiles, newest first")
    _owner(p_arch)
    p_arch.add_argument("--limit", type=int, default=None)
    p_arch.set_defaults(func=cmd_archives)

    p_hist = sub.add_parser("history", help="Show view history grouped by search")
    _owner(p_hist)
    p_hist.add_argument("--start", help="ISO timestamp lower bound (inclusive)")
    p_hist.add_argument("--end", help="ISO timestamp upper bound (inclusive)")
    p_hist.add_argument("--summary", action="store_true", help="Print a text summary instead of JSON")
    p_hist.set_defaults(func=cmd_history)

    p_hs = sub.add_parser("history-stats", help="Show view history totals")
    _owner(p_hs)
    p_hs.set_defaults(func=cmd_history_stats)

    p_hc = sub.add_parser("history-cleanup", help="Delete history entries older than N days")
    _owner(p_hc)
    p_hc.add_argument("--days", type=int, default=None, help="Retention in days (default from settings)")
    p_hc.set_defaults(func=cmd_history_cleanup)

    args = parser.parse_args()
    try:
        args.func(args)
    except LinkedInEngineError as e:
        logger.error("command failed", extra={"step": args.cmd, "status": "error", "error": type(e).__name__})
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
