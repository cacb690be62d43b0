import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import Transaction, TransactionType, ClientAccount, ProcessingResult, ProcessingStats


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount=Decimal("100.0"),
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Decimal("100.0")

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_only_deposit_and_withdrawal_carry_amount(self):
        carrying = {t for t in TransactionType if t.carries_amount}
        assert carrying == {TransactionType.DEPOSIT, TransactionType.WITHDRAWAL}


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.locked is False
        assert account.history == {}
        assert account.disputed == {}

    def test_histories_not_shared_between_accounts(self):
        first = ClientAccount(client_id=1)
        second = ClientAccount(client_id=2)
        first.history[1] = Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("1"))
        assert second.history == {}

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Decimal("100"),
            held=Decimal("50"),
        )
        assert account.total == Decimal("150")

    def test_hold_and_release(self):
        account = ClientAccount(client_id=1, available=Decimal("10"))
        account.hold(Decimal("4"))
        assert account.available == Decimal("6")
        assert account.held == Decimal("4")
        assert account.total == Decimal("10")

        account.release_hold(Decimal("4"))
        assert account.available == Decimal("10")
        assert account.held == Decimal("0")

    def test_remove_held_reduces_total(self):
        account = ClientAccount(client_id=1, held=Decimal("4"))
        account.remove_held(Decimal("4"))
        assert account.held == Decimal("0")
        assert account.total == Decimal("0")

    def test_arithmetic_exact_beyond_default_precision(self):
        account = ClientAccount(client_id=1)
        account.credit(Decimal("900000000000000000000000"))
        account.credit(Decimal("900000000000000000000000"))
        account.credit(Decimal("0.0001"))
        account.hold(Decimal("0.0001"))

        assert account.available == Decimal("1800000000000000000000000.0000")
        assert account.total == Decimal("1800000000000000000000000.0001")


class TestProcessingStats:
    def test_enum_values(self):
        assert ProcessingResult.SUCCESS.value == "success"
        assert ProcessingResult.REJECTED.value == "rejected"

    def test_record(self):
        stats = ProcessingStats()
        stats.record(ProcessingResult.SUCCESS)
        stats.record(ProcessingResult.SUCCESS)
        stats.record(ProcessingResult.REJECTED)
        assert stats.applied == 2
        assert stats.rejected == 1
        assert str(stats) == "Applied: 2, Rejected: 1"
