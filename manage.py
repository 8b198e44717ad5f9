#!/usr/bin/env python3
"""
POS sync terminal management CLI.

Usage:
    python manage.py serve               Start the terminal API
    python manage.py status              Queue counts and sync availability
    python manage.py tickets [--status]  List queued tickets
    python manage.py sync                Drain pending tickets now
    python manage.py retry TICKET_ID     Re-attempt one ticket
    python manage.py retry --failed      Re-attempt every failed ticket

All commands except serve talk to the running terminal over its API so
that only one process ever writes the local queue.
"""

import argparse
import subprocess
import sys
from datetime import datetime
from pathlib import Path

import httpx

from possync.config import get_settings

ROOT_DIR = Path(__file__).resolve().parent


def _base_url(args: argparse.Namespace) -> str:
    return f"http://{args.host}:{args.port}"


def _request(args: argparse.Namespace, method: str, path: str) -> dict:
    """Call the terminal API; exit with a readable message on failure."""
    url = f"{_base_url(args)}{path}"
    try:
        response = httpx.request(method, url, timeout=args.timeout)
    except httpx.HTTPError as e:
        print(f"Error: terminal not reachable at {_base_url(args)} ({e}).")
        print("  Start it with: python manage.py serve")
        sys.exit(1)

    data = response.json()
    if response.is_error:
        print(f"Error [{data.get('error_code', response.status_code)}]: {data.get('message')}")
        if data.get("hint"):
            print(f"  {data['hint']}")
        sys.exit(1)
    return data


def _format_ms(ms: int | None) -> str:
    if not ms:
        return "-"
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def _print_report(report: dict) -> None:
    print(
        f"Sync ({report['trigger']}): attempted {report['attempted']}, "
        f"synced {len(report['synced'])}, failed {len(report['failed'])}"
    )
    if report["halted"]:
        print(f"  Halted on a network failure; {report['remaining']} ticket(s) left pending.")
    if report["skipped"]:
        print(f"  Skipped: {report['reason']}")


def _print_tickets(tickets: list[dict]) -> None:
    if not tickets:
        print("No tickets.")
        return
    for t in tickets:
        line = f"  {t['label']:<16} {t['status']:<8} {t['total']:>10.2f}  {_format_ms(t['created_at'])}"
        if t.get("attempts"):
            line += f"  attempts={t['attempts']}"
        print(line)
        if t.get("last_error"):
            print(f"      error: {t['last_error']}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the terminal API in the foreground."""
    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        "possync.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.reload:
        uvicorn_cmd.append("--reload")

    print(f"Starting terminal on {args.host}:{args.port}...")
    try:
        result = subprocess.run(uvicorn_cmd, cwd=str(ROOT_DIR))
    except KeyboardInterrupt:
        print("\nTerminal stopped.")
        return
    sys.exit(result.returncode)


def cmd_status(args: argparse.Namespace) -> None:
    """Print queue counts and whether a manual sync is possible."""
    data = _request(args, "GET", "/api/sync/status")
    print(f"Online:   {'yes' if data['online'] else 'no'}")
    print(f"Syncing:  {'yes' if data['syncing'] else 'no'}")
    print(f"Pending:  {data['pending']}")
    print(f"Synced:   {data['synced']}")
    print(f"Errors:   {data['errors']}")
    print(f"Can sync: {'yes' if data['can_sync'] else 'no'}")
    for alert in data["alerts"]:
        print(f"ALERT [{alert['code']}] {alert['message']} at {_format_ms(alert['raised_at'])}")
    if data["last_report"]:
        _print_report(data["last_report"])


def cmd_tickets(args: argparse.Namespace) -> None:
    """List queued tickets."""
    path = "/api/sales/tickets"
    if args.status:
        path += f"?status={args.status}"
    data = _request(args, "GET", path)
    _print_tickets(data["tickets"])
    print(f"{data['total']} ticket(s).")


def cmd_sync(args: argparse.Namespace) -> None:
    """Drain pending tickets now."""
    _print_report(_request(args, "POST", "/api/sync"))


def cmd_retry(args: argparse.Namespace) -> None:
    """Re-attempt one ticket or every failed ticket."""
    if args.failed:
        _print_report(_request(args, "POST", "/api/sync/retry-failed"))
    elif args.ticket_id:
        _print_report(_request(args, "POST", f"/api/sync/tickets/{args.ticket_id}/retry"))
    else:
        print("Error: give a ticket ID or --failed.")
        sys.exit(2)


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="POS sync terminal management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--host", default=settings.api.host, help=f"Terminal host (default: {settings.api.host})")
    parser.add_argument("--port", type=int, default=settings.api.port, help=f"Terminal port (default: {settings.api.port})")
    parser.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds")
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the terminal API")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # status
    p_status = sub.add_parser("status", help="Show queue status")
    p_status.set_defaults(func=cmd_status)

    # tickets
    p_tickets = sub.add_parser("tickets", help="List queued tickets")
    p_tickets.add_argument("--status", choices=["pending", "synced", "error"], help="Filter by status")
    p_tickets.set_defaults(func=cmd_tickets)

    # sync
    p_sync = sub.add_parser("sync", help="Sync pending tickets now")
    p_sync.set_defaults(func=cmd_sync)

    # retry
    p_retry = sub.add_parser("retry", help="Retry failed tickets")
    p_retry.add_argument("ticket_id", nargs="?", help="Ticket to retry")
    p_retry.add_argument("--failed", action="store_true", help="Retry every failed ticket")
    p_retry.set_defaults(func=cmd_retry)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
