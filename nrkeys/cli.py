"""
nrkeys CLI — manage New Relic API keys through NerdGraph.

Usage:
    nrkeys query  --key-id ID --key-type USER
    nrkeys create --account-id 12345 --key-type INGEST --name svc-key [--notes TEXT]
    nrkeys update --key-id ID [--name NAME] [--notes TEXT | --clear-notes]
    nrkeys delete --key-id ID [--key-type INGEST|USER]
    nrkeys version

The API key comes from --api-key or NEW_RELIC_API_KEY.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from nrkeys import __version__
from nrkeys.client import NerdGraphClient
from nrkeys.config import OUTPUT_FORMATS, REGION_ENDPOINTS, Config, get_config
from nrkeys.errors import NerdGraphError
from nrkeys.operations import CLEAR, create_key, delete_key, query_key, update_key
from nrkeys.output import render_credential, render_mutation

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nrkeys",
        description="A CLI tool for interacting with New Relic's Nerdgraph API",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument(
        "--api-key", "-a", help="New Relic API key (default: $NEW_RELIC_API_KEY)"
    )
    parser.add_argument(
        "--endpoint", "-e", help="NerdGraph endpoint (default: https://api.newrelic.com/graphql)"
    )
    parser.add_argument(
        "--region", choices=sorted(REGION_ENDPOINTS), help="Use the endpoint for this region"
    )
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds (default: 30)")
    parser.add_argument(
        "--format", "-f", choices=OUTPUT_FORMATS, default="json", help="Output format"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command")

    # query
    query_parser = subparsers.add_parser("query", help="Query an API key")
    query_parser.add_argument("--key-type", "-k", help="Key type filter (e.g. USER, INGEST)")
    query_parser.add_argument("--key-id", "-i", help="Key ID to look up")

    # create
    create_parser = subparsers.add_parser("create", help="Create a new API key")
    create_parser.add_argument("--account-id", "-a", required=True, help="Account ID")
    create_parser.add_argument("--key-type", "-k", required=True, help="Key type")
    create_parser.add_argument("--name", "-n", required=True, help="Key name")
    create_parser.add_argument("--notes", help="Key notes/description")

    # update
    update_parser = subparsers.add_parser("update", help="Update an existing API key")
    update_parser.add_argument("--key-id", "-k", required=True, help="Key ID")
    update_parser.add_argument("--name", "-n", help="New name")
    notes_group = update_parser.add_mutually_exclusive_group()
    notes_group.add_argument("--notes", help="New notes/description")
    notes_group.add_argument(
        "--clear-notes", action="store_true", help="Remove the key's notes"
    )

    # delete
    delete_parser = subparsers.add_parser("delete", help="Delete an API key")
    delete_parser.add_argument("--key-id", "-k", required=True, help="Key ID")
    delete_parser.add_argument(
        "--key-type",
        "-t",
        type=str.upper,
        choices=["INGEST", "USER"],
        default="INGEST",
        help="Kind of key being deleted (default: INGEST)",
    )

    # version
    subparsers.add_parser("version", help="Show version")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        print(f"nrkeys {__version__}")
        return 0

    if args.command is None:
        parser.print_help(sys.stderr)
        return 2

    _configure_logging(args.verbose)

    try:
        config = get_config().with_overrides(
            api_key=args.api_key,
            endpoint=args.endpoint,
            region=args.region,
            timeout=args.timeout,
            format=args.format,
            verbose=args.verbose,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.api_key:
        print(
            "Error: no API key. Pass --api-key or set NEW_RELIC_API_KEY.",
            file=sys.stderr,
        )
        return 1

    if config.verbose:
        print(f"Using endpoint: {config.endpoint}")
        print(f"Output format: {config.format}")

    try:
        output = asyncio.run(_dispatch(args, config))
    except (NerdGraphError, ValueError) as e:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


async def _dispatch(args: argparse.Namespace, config: Config) -> str:
    async with NerdGraphClient(config) as client:
        if args.command == "query":
            return await _cmd_query(client, args, config)
        elif args.command == "create":
            return await _cmd_create(client, args, config)
        elif args.command == "update":
            return await _cmd_update(client, args, config)
        elif args.command == "delete":
            return await _cmd_delete(client, args, config)
    raise ValueError(f"Unknown command: {args.command}")


async def _cmd_query(client: NerdGraphClient, args: argparse.Namespace, config: Config) -> str:
    credential = await query_key(client, key_id=args.key_id, key_type=args.key_type)
    return render_credential(credential, config.format)


async def _cmd_create(client: NerdGraphClient, args: argparse.Namespace, config: Config) -> str:
    result = await create_key(
        client,
        account_id=args.account_id,
        key_type=args.key_type,
        name=args.name,
        notes=args.notes,
    )
    return render_mutation(result, config.format)


async def _cmd_update(client: NerdGraphClient, args: argparse.Namespace, config: Config) -> str:
    notes = CLEAR if args.clear_notes else args.notes
    result = await update_key(client, key_id=args.key_id, name=args.name, notes=notes)
    return render_mutation(result, config.format)


async def _cmd_delete(client: NerdGraphClient, args: argparse.Namespace, config: Config) -> str:
    result = await delete_key(client, key_id=args.key_id, key_type=args.key_type)
    return render_mutation(result, config.format)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    # Quiet per-request httpx logging
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def main_entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
