import argparse
import csv
import logging
import sys
from typing import Mapping, Optional, Sequence, TextIO

from config import EngineConfig
from models import ClientAccount
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

OUTPUT_FIELDS = ["client", "available", "held", "total", "locked"]


def write_accounts(accounts: Mapping[int, ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per client, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_FIELDS)
    for client_id in sorted(accounts):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            str(account.available),
            str(account.held),
            str(account.total),
            str(account.locked).lower(),
        ])


def build_parser(defaults: EngineConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payments-engine",
        description="Apply a CSV of transactions and print the final client accounts.",
    )
    parser.add_argument("input", help="Path to the transactions CSV file.")
    parser.add_argument(
        "--pipelined",
        action=argparse.BooleanOptionalAction,
        default=defaults.pipelined,
        help="Read input in a separate thread (env: PAYMENTS_PIPELINED).",
    )
    parser.add_argument(
        "--queue-size",
        type=int,
        default=defaults.queue_max_size,
        help="Capacity of the reader queue when pipelined (env: PAYMENTS_QUEUE_SIZE).",
    )
    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level for stderr diagnostics (env: PAYMENTS_LOG_LEVEL).",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        defaults = EngineConfig.from_env()
    except ValueError as e:
        build_parser(EngineConfig()).error(f"Invalid environment configuration: {e}")

    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    try:
        config = EngineConfig(pipelined=args.pipelined, queue_max_size=args.queue_size, log_level=args.log_level)
    except ValueError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine(config)
    try:
        accounts = engine.process_file(args.input)
    except OSError as e:
        logger.error(f"Error reading input file: {e}")
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
