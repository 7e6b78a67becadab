"""CLI entrypoint for plantlog."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from plantlog.api.plants_api import add_plant, list_plants
from plantlog.config.loader import get_logging_settings, get_storage_settings, load_config
from plantlog.database.document_store import SqliteDocumentStore, StoreError
from plantlog.database.sqlite_client import get_engine
from plantlog.output.plant_list import render_json, render_text
from plantlog.plants.coordinator import STATUS_FAILED
from plantlog.query.filters import FilterValidationError
from plantlog.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _load_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Load config from --config, or the default file if it exists."""
    config_path = getattr(args, "config", None)
    if config_path:
        return load_config(Path(config_path))
    try:
        return load_config()
    except FileNotFoundError:
        logger.debug("No plantlog.config.yaml found; using built-in defaults")
        return {}


def _open_store(storage: Dict[str, Any]) -> SqliteDocumentStore:
    return SqliteDocumentStore(get_engine(storage["sqlite_path"]))


def _print_state(state, output_format: str) -> None:
    if output_format == "json":
        print(render_json(state))
    else:
        print(render_text(state))
    if state.status == STATUS_FAILED:
        raise SystemExit(1)


def cmd_add(args: argparse.Namespace) -> None:
    """Add a plant."""
    storage = get_storage_settings(args.settings)
    store = _open_store(storage)
    try:
        doc_id = asyncio.run(
            add_plant(
                store,
                args.name,
                args.type or "",
                args.location or "",
                collection=storage["collection"],
                timestamp_field=storage["timestamp_field"],
            )
        )
    except ValueError as e:
        print(f"Error: {e}")
        raise SystemExit(2)
    except StoreError as e:
        logger.error(f"Error adding plant: {e}", exc_info=True)
        print("Error: Unable to save plant. Please try again.")
        raise SystemExit(1)

    print(f'Plant "{args.name}" in "{args.location or ""}" location inserted (id {doc_id}).')


def cmd_list(args: argparse.Namespace) -> None:
    """List all plants."""
    storage = get_storage_settings(args.settings)
    store = _open_store(storage)
    state = asyncio.run(
        list_plants(
            store,
            collection=storage["collection"],
            timestamp_field=storage["timestamp_field"],
        )
    )
    _print_state(state, args.format)


def cmd_filter(args: argparse.Namespace) -> None:
    """List plants matching every given filter."""
    storage = get_storage_settings(args.settings)
    store = _open_store(storage)
    try:
        state = asyncio.run(
            list_plants(
                store,
                args.name,
                args.type,
                args.location,
                require_filter=True,
                collection=storage["collection"],
                timestamp_field=storage["timestamp_field"],
            )
        )
    except FilterValidationError as e:
        print(f"Error: {e}")
        raise SystemExit(2)
    _print_state(state, args.format)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plantlog",
        description="Record plant observations and look them up by name, type or location",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to config YAML (default: plantlog.config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # add command
    add_parser = subparsers.add_parser("add", help="Add a plant")
    add_parser.add_argument("--name", type=str, required=True, help="Plant name")
    add_parser.add_argument("--type", type=str, default="", help="Plant type")
    add_parser.add_argument("--location", type=str, default="", help="Plant location")
    add_parser.set_defaults(func=cmd_add)

    # list command
    list_parser = subparsers.add_parser("list", help="Show all plants")
    list_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format: text or json (default: text)",
    )
    list_parser.set_defaults(func=cmd_list)

    # filter command
    filter_parser = subparsers.add_parser("filter", help="Show plants matching exact filters")
    filter_parser.add_argument("--name", type=str, default="", help="Exact plant name")
    filter_parser.add_argument("--type", type=str, default="", help="Exact plant type")
    filter_parser.add_argument("--location", type=str, default="", help="Exact plant location")
    filter_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format: text or json (default: text)",
    )
    filter_parser.set_defaults(func=cmd_filter)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    args.settings = _load_settings(args)
    log_settings = get_logging_settings(args.settings)
    configure_logging(args.log_level or log_settings["level"], log_settings.get("file"))

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main(sys.argv[1:])
