"""
Command line access to the worklog ledger.
"""

import argparse
import json
import sys

from .core.config import request_config_for
from .core.dispatcher import Operation, invoke, store_for
from .core.errors import UnknownOperation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Invoke worklog ledger functions")
    parser.add_argument(
        "function",
        help=f"Ledger function, one of: {', '.join(op.value for op in Operation)}"
    )
    parser.add_argument(
        "args",
        nargs="?",
        default="{}",
        help="Function arguments as a JSON object (default: {})"
    )
    parser.add_argument(
        "--event-type",
        default="SWTransmgmt",
        choices=["SWTransmgmt", "SWIdentity"],
        help="Selects the ledger the function runs against"
    )
    parser.add_argument(
        "--db-path",
        default=None,
        help="SQLite ledger path (default: $DB_PATH)"
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    request_config = request_config_for(args.event_type)

    try:
        response = invoke(
            args.function,
            args.args,
            request_config,
            store=store_for(request_config, args.db_path)
        )
    except UnknownOperation as e:
        print(f"❌ ERROR: {e.message}", file=sys.stderr)
        return 2

    if not response.ok:
        print(f"❌ {response.error_type}: {response.message}", file=sys.stderr)
        return 1

    if response.payload is not None:
        try:
            print(json.dumps(json.loads(response.payload), indent=2))
        except ValueError:
            print(response.payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
