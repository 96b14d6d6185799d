"""CLI entry point for storesync."""

import argparse
import asyncio
import json
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path

from .client import AuthorityClient
from .config import Config, load_config
from .models import Store
from .session import ActionOutcome, Session, SessionState


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = "".join(traceback.format_exception(*record.exc_info))

        try:
            return json.dumps(log_data)
        except (TypeError, ValueError):
            log_data["message"] = str(log_data["message"])
            if "exception" in log_data:
                log_data["exception"] = str(log_data["exception"])
            return json.dumps(log_data)


def setup_logging(verbose: bool = False, log_level: str | None = None, json_output: bool = False) -> None:
    """Configure logging.

    Args:
        verbose: Enable debug logging (ignored if log_level is set).
        log_level: Explicit log level (warning, info, debug).
        json_output: Output logs as JSON lines for machine parsing.
    """
    if log_level:
        level_map = {
            "warning": logging.WARNING,
            "info": logging.INFO,
            "debug": logging.DEBUG,
        }
        level = level_map.get(log_level, logging.WARNING)
    else:
        level = logging.DEBUG if verbose else logging.WARNING

    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )


def print_alert(message: str) -> None:
    print(f"\a!! {message}", file=sys.stderr)


async def prompt_confirm(prompt: str) -> bool:
    """Ask on the terminal without blocking the event loop."""
    try:
        answer = await asyncio.to_thread(input, f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def format_store(store: Store, storefront_url: str) -> str:
    created = store.created.astimezone().strftime("%Y-%m-%d %H:%M:%S")
    return f"  {store.name:<24} {store.status.upper():<14} created {created}  {storefront_url}"


def print_stores(stores: tuple[Store, ...], storefront_url: str) -> None:
    if not stores:
        print("No active store instances found.")
        return
    for store in stores:
        print(format_store(store, storefront_url))


def print_log(state: SessionState) -> None:
    # Oldest first reads better on a terminal
    for line in reversed(state.event_log.lines()):
        print(line)


def _build_session(config: Config) -> Session:
    return Session(config, alert=print_alert)


async def cmd_list(args: argparse.Namespace) -> int:
    """Reconcile once and print the store list."""
    config = load_config(args.config)
    session = _build_session(config)

    try:
        ok = await session.refresh()
    finally:
        await session.dispose()

    if not ok:
        print(f"Could not fetch stores from {config.authority.base_url}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(
            [
                {**s.to_dict(), "storefront_url": config.storefront.url}
                for s in session.stores
            ],
            indent=2,
        ))
    else:
        print_stores(session.stores, config.storefront.url)

    return 0


async def cmd_create(args: argparse.Namespace) -> int:
    """Provision a new store."""
    config = load_config(args.config)
    session = _build_session(config)

    try:
        result = await session.create()
    finally:
        await session.dispose()

    print_log(session.state)
    if result.ok:
        print_stores(session.stores, config.storefront.url)
    return 0 if result.ok else 1


async def cmd_delete(args: argparse.Namespace) -> int:
    """Delete a store after confirmation."""
    config = load_config(args.config)
    session = _build_session(config)

    async def confirm(prompt: str) -> bool:
        if args.yes:
            return True
        return await prompt_confirm(prompt)

    try:
        result = await session.delete(args.name, confirm)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        await session.dispose()

    if result.outcome == ActionOutcome.DECLINED:
        print("Aborted.")
        return 0

    print_log(session.state)
    return 0 if result.ok else 1


async def cmd_watch(args: argparse.Namespace) -> int:
    """Poll the authority and print changes until interrupted."""
    config = load_config(args.config)

    print(f"Watching stores at {config.authority.base_url} (Ctrl-C to stop)")

    last_stores: tuple[Store, ...] | None = None
    printed_logs = 0

    def on_change(state: SessionState) -> None:
        nonlocal last_stores, printed_logs
        entries = state.event_log.entries
        for entry in reversed(entries[: len(entries) - printed_logs]):
            print(entry.format())
        printed_logs = len(entries)

        if state.stores != last_stores:
            last_stores = state.stores
            print(f"--- {datetime.now().strftime('%H:%M:%S')} ---")
            print_stores(state.stores, config.storefront.url)

    session = _build_session(config)
    session.state.add_listener(on_change)

    # asyncio.run turns Ctrl-C into cancellation of this task
    try:
        async with session:
            await asyncio.Event().wait()
    except (KeyboardInterrupt, asyncio.CancelledError):
        print("\nStopped.")

    return 0


async def cmd_status(args: argparse.Namespace) -> int:
    """Check the authority is reachable."""
    config = load_config(args.config)

    client = AuthorityClient(
        config.authority.base_url, timeout=config.authority.timeout_seconds
    )
    try:
        reachable = await client.health_check()
    finally:
        await client.close()

    status_data = {
        "timestamp": datetime.now().isoformat(),
        "authority": {
            "url": config.authority.base_url,
            "timeout_seconds": config.authority.timeout_seconds,
            "reachable": reachable,
        },
        "storefront_url": config.storefront.url,
    }

    if args.json:
        print(json.dumps(status_data, indent=2))
    else:
        print("storesync Status Check")
        print("======================")
        print(f"Authority ({config.authority.base_url}):")
        if reachable:
            print("  Status: Reachable")
        else:
            print("  Status: Not reachable")
            print("  Make sure the provisioning service is running")
        print(f"Storefront: {config.storefront.url}")

    return 0 if reachable else 1


async def cmd_dashboard(args: argparse.Namespace) -> int:
    """Start the web dashboard."""
    config = load_config(args.config)

    try:
        from .dashboard import create_app

        import uvicorn
    except ImportError as e:
        print(f"Dashboard dependencies not installed: {e}", file=sys.stderr)
        print("Install with: pip install storesync[dashboard]", file=sys.stderr)
        return 1

    host = args.host or config.dashboard.host
    port = args.port or config.dashboard.port

    print("Starting storesync dashboard")
    print(f"Authority: {config.authority.base_url}")
    print(f"URL: http://{host}:{port}")

    app = create_app(config)

    verbose = getattr(args, "verbose", False)
    config_uvicorn = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level="info" if verbose else "warning",
    )
    server = uvicorn.Server(config_uvicorn)
    await server.serve()

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storesync",
        description="Watch and manage provisioned stores",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to config file (default: none, built-in defaults)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["warning", "info", "debug"],
        default=None,
        help="Set log level explicitly (overrides -v/--verbose)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON for machine parsing",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    list_parser = subparsers.add_parser("list", help="List stores once")
    list_parser.add_argument("--json", action="store_true", help="Output stores as JSON")
    list_parser.set_defaults(func=cmd_list)

    create_parser = subparsers.add_parser("create", help="Provision a new store")
    create_parser.set_defaults(func=cmd_create)

    delete_parser = subparsers.add_parser("delete", help="Delete a store")
    delete_parser.add_argument("name", help="Name of the store to delete")
    delete_parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )
    delete_parser.set_defaults(func=cmd_delete)

    watch_parser = subparsers.add_parser("watch", help="Poll and print changes")
    watch_parser.set_defaults(func=cmd_watch)

    status_parser = subparsers.add_parser("status", help="Check authority connectivity")
    status_parser.add_argument("--json", action="store_true", help="Output status as JSON")
    status_parser.set_defaults(func=cmd_status)

    dashboard_parser = subparsers.add_parser("dashboard", help="Start the web dashboard")
    dashboard_parser.add_argument(
        "-p", "--port",
        type=int,
        default=None,
        help="Port to run dashboard on (default: from config, 8080)",
    )
    dashboard_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind dashboard to (default: from config, 0.0.0.0)",
    )
    dashboard_parser.set_defaults(func=cmd_dashboard)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_level, args.json_logs)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
