"""Command line tool to extract 1Sat Ordinals inscriptions from a transaction."""

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from mcp_onesat_ordinals.errors import OrdinalError
from mcp_onesat_ordinals.inscription import scan_transaction
from mcp_onesat_ordinals.transaction import Transaction


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="examinetx",
        description="Extract 1Sat Ordinals inscriptions from a transaction.",
    )
    parser.add_argument("tx", help="The transaction in hex format.")
    parser.add_argument(
        "-t", "--trace", action="store_true", help="Log each scanning step."
    )
    parser.add_argument(
        "--json", action="store_true", help="Print inscriptions as JSON."
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.trace else logging.WARNING)

    try:
        tx = Transaction.from_hex(args.tx)
    except OrdinalError as e:
        print(f"Error parsing tx, {e}")
        return 1

    print(f"tx hash: {tx.hash}")
    try:
        inscriptions = scan_transaction(tx)
    except OrdinalError as e:
        print(f"Error scanning for inscriptions, {e}")
        return 1

    print(f"found {len(inscriptions)} inscriptions")
    for inscription in inscriptions:
        if args.json:
            print(json.dumps(inscription.to_dict(), indent=2))
        else:
            print(inscription)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
