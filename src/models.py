from dataclasses import dataclass, field
from decimal import Context, Decimal, DivisionByZero, InvalidOperation, Overflow
from enum import Enum
from typing import Dict, Optional

AMOUNT_PRECISION = Decimal("0.0001")
# Largest single amount accepted from input: 2**49 with four decimal places.
MAX_AMOUNT = Decimal("562949953421311.9999")

# Balance arithmetic runs in this context rather than the thread's default.
# Fifty digits leaves room for billions of maximum-sized amounts before
# a sum could round.
AMOUNT_CONTEXT = Context(prec=50, traps=[InvalidOperation, DivisionByZero, Overflow])

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    REJECTED = "rejected"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    """
    Balances for one client plus the transactions it may dispute.

    A transaction id lives in either `history` or `disputed`, never both.
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False
    history: Dict[int, Transaction] = field(default_factory=dict, repr=False)
    disputed: Dict[int, Transaction] = field(default_factory=dict, repr=False)

    @property
    def total(self) -> Decimal:
        return AMOUNT_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self.available = AMOUNT_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = AMOUNT_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        """Move `amount` from available to held. Available may go negative."""
        self.debit(amount)
        self.held = AMOUNT_CONTEXT.add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        """Move `amount` from held back to available."""
        self.held = AMOUNT_CONTEXT.subtract(self.held, amount)
        self.credit(amount)

    def remove_held(self, amount: Decimal) -> None:
        self.held = AMOUNT_CONTEXT.subtract(self.held, amount)


class ProcessingStats:
    """Counters for the end-of-run processing report."""

    def __init__(self):
        self.applied = 0
        self.rejected = 0

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.SUCCESS:
            self.applied += 1
        else:
            self.rejected += 1

    def __str__(self) -> str:
        return f"Applied: {self.applied}, Rejected: {self.rejected}"
