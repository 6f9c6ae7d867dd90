# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from claimstack.app import (
    check_product_claims_permission,
    prepare_product_context,
    resolve_effective_claims,
)
from claimstack.config import configure_logging
from claimstack.domain.context import ClaimsContext
from claimstack.domain.model import parse_market

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from claimstack.domain.context import ClaimsResolution
    from claimstack.domain.permissions import PermissionVerdict

log = logging.getLogger(__name__)

EXIT_VALIDATION_ERROR = 2
EXIT_FATAL = 1
EXIT_DENIED = 3


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve product claims and permissions")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Print the effective claims of a product")
    resolve.add_argument("--product-id", type=str, required=True, help="Product id")
    resolve.add_argument(
        "--country",
        type=str,
        help="Two-letter market code; omit to include every market",
    )

    permission = subparsers.add_parser(
        "check-permission",
        help="Check whether a user may manage claims for products",
    )
    permission.add_argument("--user-id", type=str, required=True, help="User id")
    permission.add_argument(
        "--product-id",
        type=str,
        action="append",
        required=True,
        dest="product_ids",
        help="Product id (repeat for several products)",
    )

    context = subparsers.add_parser(
        "context",
        help="Print grouped and styled claims for a content prompt",
    )
    context.add_argument("--product-id", type=str, required=True, help="Product id")
    context.add_argument("--country", type=str, required=True, help="Two-letter market code")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _resolution_payload(resolution: ClaimsResolution) -> dict[str, object]:
    if not isinstance(resolution, ClaimsContext):
        return {
            "product_id": str(resolution.product_id),
            "market": str(resolution.market) if resolution.market else None,
            "claims": [],
            "reason": str(resolution.reason),
        }
    return {
        "product_id": str(resolution.product_id),
        "market": str(resolution.market) if resolution.market else None,
        "claims": [
            {
                "text": claim.text,
                "type": str(claim.type),
                "level": str(claim.level),
                "country": str(claim.country),
                "source_claim_id": str(claim.source_claim_id),
            }
            for claim in resolution.claims
        ],
        "blocked": [str(blocked.master_claim_id) for blocked in resolution.blocked],
        "ingredient_claims_omitted": resolution.ingredient_claims_omitted,
    }


def _print_verdict(verdict: PermissionVerdict) -> None:
    print(json.dumps(verdict.audit_record(), indent=2))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        if parsed_args.command == "check-permission":
            user_id = _parse_uuid(parsed_args.user_id)
            product_ids = [_parse_uuid(value) for value in parsed_args.product_ids]
        else:
            product_id = _parse_uuid(parsed_args.product_id)
            market = parse_market(parsed_args.country)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_VALIDATION_ERROR)

    try:
        if parsed_args.command == "resolve":
            resolution = resolve_effective_claims(product_id, market)
            print(json.dumps(_resolution_payload(resolution), indent=2))
        elif parsed_args.command == "check-permission":
            verdict = check_product_claims_permission(user_id, product_ids)
            _print_verdict(verdict)
            if not verdict.granted:
                sys.exit(EXIT_DENIED)
        elif parsed_args.command == "context":
            context = prepare_product_context(product_id, market)
            print(context.styled_text)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during claims resolution")
        sys.exit(EXIT_FATAL)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
