from __future__ import annotations

import argparse
import asyncio
import json
import sys

from bulkstatus.config import Settings, get_settings
from bulkstatus.updater.pipeline import run_batch


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.target_status:
        overrides["target_status"] = args.target_status
    if args.max_retries is not None:
        overrides["max_retries"] = args.max_retries
    if args.min_delay is not None:
        overrides["min_delay"] = args.min_delay
    if args.max_delay is not None:
        overrides["max_delay"] = args.max_delay
    if not overrides:
        return settings
    # Re-validate so the delay range check still applies
    return Settings(**{**settings.model_dump(), **overrides})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Batch-update resource status via HTTP API")
    parser.add_argument(
        "identifiers",
        nargs="*",
        help="Resource identifiers to process (defaults to RESOURCE_IDENTIFIERS)",
    )
    parser.add_argument("--target-status", help="Literal status value to set")
    parser.add_argument("--max-retries", type=int)
    parser.add_argument("--min-delay", type=int, help="Minimum pause between resources, ms")
    parser.add_argument("--max-delay", type=int, help="Maximum pause between resources, ms")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the resolved configuration without sending requests",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    identifiers = args.identifiers or list(settings.resource_identifiers)

    if not identifiers:
        print("No resource identifiers given", file=sys.stderr)
        return 2

    if args.dry_run:
        print(
            json.dumps(
                {
                    "target_status": settings.effective_target_status,
                    "query_url": settings.query_url,
                    "update_url": settings.update_url,
                    "update_method": settings.update_method,
                    "status_fields": settings.status_fields,
                    "identifiers": identifiers,
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return 0

    summary = asyncio.run(run_batch(identifiers, settings))
    print(summary.model_dump_json(indent=2))
    return 0 if summary.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
