import logging
import sys
from typing import Iterable, List, Optional

from ledger import Ledger
from models import ClientAccount, Transaction
from transaction_reader import decode_lines, read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a transaction log into a ledger and returns the final accounts.

    Reading, applying and reporting all happen on the calling thread, one
    transaction at a time in file order.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self._ledger = ledger if ledger is not None else Ledger()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def process_file(self, filepath: str) -> List[ClientAccount]:
        """Process a UTF-8 CSV file and return final account states."""
        with open(filepath, "rb") as f:
            return self.process_stream(decode_lines(f))

    def process_stream(self, lines: Iterable[str]) -> List[ClientAccount]:
        """Process CSV text lines and return final account states."""
        logger.info("Starting processing")
        self.process_transactions(read_transactions(lines))
        logger.info("Processing complete")

        print(f"{self._ledger.stats}", file=sys.stderr)

        return self._ledger.get_all_accounts()

    def process_transactions(self, transactions: Iterable[Transaction]) -> None:
        for transaction in transactions:
            self._ledger.apply(transaction)
