# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from thorbond.app import list_nodes, list_whitelist_requests, open_engine
from thorbond.config import ConfigurationError, configure_logging, require_env_vars
from thorbond.domain.errors import ThorBondError, ValidationError
from thorbond.domain.memo import encode_listing, encode_whitelist_request, format_number
from thorbond.domain.model import ListingMemo, WhitelistRequestMemo

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from thorbond.domain.model import Node, WhitelistRequest

log = logging.getLogger(__name__)

VIEWER_ENV_VAR = "THORBOND_VIEWER"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect THORChain bond listings and requests")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("nodes", help="List published node listings")

    requests = subparsers.add_parser("requests", help="List whitelist requests for a wallet")
    requests.add_argument(
        "--viewer",
        type=str,
        help=f"Wallet address viewing the requests (defaults to ${VIEWER_ENV_VAR})",
    )

    memo = subparsers.add_parser("memo", help="Encode a protocol memo")
    memo_sub = memo.add_subparsers(dest="memo_command", required=True)

    listing = memo_sub.add_parser("listing", help="Encode a node listing memo")
    listing.add_argument("--node", required=True, help="Node address")
    listing.add_argument("--operator", required=True, help="Operator address")
    listing.add_argument("--min-bond", type=float, required=True, help="Minimum bond in RUNE")
    listing.add_argument("--max-bond", type=float, required=True, help="Bonding capacity in RUNE")
    listing.add_argument("--fee", type=float, required=True, help="Fee percentage (0-100)")

    whitelist = memo_sub.add_parser("whitelist", help="Encode a whitelist request memo")
    whitelist.add_argument("--node", required=True, help="Node address")
    whitelist.add_argument("--user", required=True, help="User wallet address")
    whitelist.add_argument("--amount", type=float, required=True, help="Intended bond in RUNE")

    return parser.parse_args(list(argv))


def _format_node(node: Node) -> str:
    return (
        f"{node.node_address}  operator={node.operator_address}  "
        f"min={format_number(node.minimum_bond)}  "
        f"capacity={format_number(node.bonding_capacity)}  "
        f"fee={format_number(node.fee_percentage)}%  "
        f"listed={node.created_at.isoformat()}"
    )


def _format_request(request: WhitelistRequest) -> str:
    return (
        f"[{request.status}] {request.wallet_address} -> {request.node.node_address}  "
        f"amount={format_number(request.intended_bond_amount)}  "
        f"requested={request.created_at.isoformat()}"
    )


def _encode_memo(args: argparse.Namespace) -> str:
    if args.memo_command == "listing":
        return encode_listing(
            ListingMemo(
                node_address=args.node,
                operator_address=args.operator,
                min_bond=args.min_bond,
                max_bond=args.max_bond,
                fee_percentage=args.fee,
            )
        )
    return encode_whitelist_request(
        WhitelistRequestMemo(node_address=args.node, user_address=args.user, amount=args.amount)
    )


async def _show_nodes() -> None:
    async with open_engine() as engine:
        nodes = await list_nodes(engine)
    if not nodes:
        print("No node listings found.")
    for node in nodes:
        print(_format_node(node))


async def _show_requests(viewer: str) -> None:
    async with open_engine() as engine:
        partition = await list_whitelist_requests(engine, viewer)
    print(f"As operator ({len(partition.operator_requests)}):")
    for request in partition.operator_requests:
        print(f"  {_format_request(request)}")
    print(f"As user ({len(partition.user_requests)}):")
    for request in partition.user_requests:
        print(f"  {_format_request(request)}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        if parsed_args.command == "memo":
            print(_encode_memo(parsed_args))
        elif parsed_args.command == "nodes":
            asyncio.run(_show_nodes())
        elif parsed_args.command == "requests":
            viewer = parsed_args.viewer or require_env_vars((VIEWER_ENV_VAR,))[VIEWER_ENV_VAR]
            asyncio.run(_show_requests(viewer))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except (ThorBondError, TimeoutError):
        log.exception("Operation failed")
        print("Error: operation failed, see log for details", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
