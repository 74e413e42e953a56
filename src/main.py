import argparse
import logging
import sys
from decimal import Decimal
from typing import Iterable, List, Optional, TextIO

from models import AccountSnapshot
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

OUTPUT_HEADER = "client,available,held,total,locked"


def format_decimal(value: Decimal) -> str:
    """Format a rounded amount without trailing zeros, keeping one fractional digit."""
    text = f"{value.normalize():f}"
    if "." not in text:
        text += ".0"
    return text


def write_snapshot(snapshot: Iterable[AccountSnapshot], out: TextIO) -> None:
    print(OUTPUT_HEADER, file=out)
    for account in sorted(snapshot, key=lambda a: a.client_id):
        print(
            f"{account.client_id},"
            f"{format_decimal(account.available)},"
            f"{format_decimal(account.held)},"
            f"{format_decimal(account.total)},"
            f"{str(account.locked).lower()}",
            file=out,
        )


def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a CSV of transactions and print final client balances")
    parser.add_argument("file_path", type=str, help="Path to the transactions CSV file")
    parser.add_argument("-d", "--debug", action="store_true", help="Report dropped and rejected records on stderr")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine(debug=args.debug)
    try:
        engine.process_file(args.file_path)
    except OSError as e:
        logger.error(f"Cannot read {args.file_path}: {e}")
        return 1

    write_snapshot(engine.snapshot(), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
