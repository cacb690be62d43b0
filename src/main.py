import logging
import os
import sys
from typing import List, Optional

from account_writer import write_accounts
from payments_engine import PaymentsEngine
from transaction_reader import decode_lines

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
STDIN_PATH = "-"


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: payments-ledger <transactions.csv | ->", file=sys.stderr)
        return 1

    configure_logging()

    filepath = args[0]
    engine = PaymentsEngine()
    if filepath == STDIN_PATH:
        accounts = engine.process_stream(decode_lines(sys.stdin.buffer))
    else:
        try:
            accounts = engine.process_file(filepath)
        except OSError as e:
            print(f"Cannot read {filepath}: {e.strerror or e}", file=sys.stderr)
            return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
