from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from dotenv import load_dotenv

from carrierbase.app import build_registry, read_recorded_calls
from carrierbase.config import configure_logging
from carrierbase.domain.model import EquipmentType

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from carrierbase.app import CarrierRegistry

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Carrier registry maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser("replay", help="Replay recorded call extractions")
    replay.add_argument("file", type=Path, help="JSON array or JSON-lines file of calls")
    replay.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to pause between calls (defaults to config)",
    )

    verify = subparsers.add_parser("verify", help="Verify a carrier against FMCSA")
    verify.add_argument("--mc", type=str, help="MC (docket) number")
    verify.add_argument("--dot", type=str, help="USDOT number")
    verify.add_argument(
        "--force",
        action="store_true",
        help="Ignore a cached verification and query FMCSA again",
    )

    stats = subparsers.add_parser("stats", help="Recompute statistics for a carrier")
    stats.add_argument("carrier_id", type=str, help="Carrier UUID")

    search = subparsers.add_parser("search", help="Search carriers of an organization")
    search.add_argument("organization_id", type=str, help="Organization id")
    search.add_argument("--query", type=str, help="Match on name, MC or DOT number")
    search.add_argument(
        "--equipment",
        type=str,
        choices=[item.value for item in EquipmentType],
        help="Required equipment type",
    )
    search.add_argument("--lane", type=str, help="Preferred lane such as TX-CA")
    search.add_argument("--min-score", type=int, help="Minimum performance score")
    search.add_argument("--limit", type=int, default=50, help="Maximum number of results")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))  # noqa: T201


def _run(registry: CarrierRegistry, args: argparse.Namespace) -> None:
    if args.command == "replay":
        summary = registry.replay_calls(read_recorded_calls(args.file), delay_seconds=args.delay)
        _emit(asdict(summary))
    elif args.command == "verify":
        if not args.mc and not args.dot:
            raise ValueError("Provide --mc or --dot")
        result = registry.verify_carrier(args.mc, args.dot, force_refresh=args.force)
        _emit(asdict(result))
    elif args.command == "stats":
        snapshot = registry.recompute_statistics(_parse_uuid(args.carrier_id))
        _emit(asdict(snapshot))
    elif args.command == "search":
        carriers = registry.search_carriers(
            args.organization_id,
            query=args.query,
            equipment=EquipmentType(args.equipment) if args.equipment else None,
            lane=args.lane,
            min_score=args.min_score,
            limit=args.limit,
        )
        _emit(
            [
                {
                    "id": carrier.id,
                    "name": carrier.name,
                    "mc_number": carrier.mc_number,
                    "dot_number": carrier.dot_number,
                    "performance_score": carrier.performance_score,
                    "status": carrier.status.value,
                }
                for carrier in carriers
            ]
        )
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(
    argv: Sequence[str] | None = None,
    *,
    registry_factory: Callable[[], CarrierRegistry] = build_registry,
) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        registry = registry_factory()
    except Exception:
        log.exception("Could not start the carrier registry")
        sys.exit(1)

    try:
        _run(registry, parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    finally:
        registry.close()


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
