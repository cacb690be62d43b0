import logging
from typing import Dict, List, Optional, Set

from models import Transaction, TransactionType, ClientAccount, ProcessingResult, ProcessingStats

logger = logging.getLogger(__name__)


class Ledger:
    """
    In-memory client accounts and the rules that move money between their
    available and held balances.

    Transactions are applied strictly in the order given. A transaction that
    breaks a rule is logged and dropped without touching any balance.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        # Ids of every deposit/withdrawal seen, applied or not.
        self._seen_transaction_ids: Set[int] = set()
        self.stats = ProcessingStats()

    def __len__(self) -> int:
        return len(self._accounts)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def get_all_accounts(self) -> List[ClientAccount]:
        """Return all accounts ordered by client id (for final output)."""
        return [self._accounts[client_id] for client_id in sorted(self._accounts)]

    def apply(self, transaction: Transaction) -> None:
        """Apply a single transaction to the account it addresses."""
        account = self.get_or_create_account(transaction.client_id)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                result = self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                result = self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                result = self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                result = self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                result = self._handle_chargeback(account, transaction)
            case _:
                logger.warning(f"Unsupported transaction type: {transaction}")
                result = ProcessingResult.REJECTED

        self.stats.record(result)

    def _reserve_transaction_id(self, transaction: Transaction) -> bool:
        if transaction.transaction_id in self._seen_transaction_ids:
            logger.warning(f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: duplicate transaction id, ignoring")
            return False
        self._seen_transaction_ids.add(transaction.transaction_id)
        return True

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if not self._reserve_transaction_id(transaction):
            return ProcessingResult.REJECTED

        account.credit(transaction.amount)
        account.history[transaction.transaction_id] = transaction
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if not self._reserve_transaction_id(transaction):
            return ProcessingResult.REJECTED

        if account.available < transaction.amount:
            logger.warning(
                f"Withdrawal tx {transaction.transaction_id}: insufficient funds for client {account.client_id} "
                f"(available {account.available}, requested {transaction.amount})"
            )
            return ProcessingResult.REJECTED

        account.debit(transaction.amount)
        account.history[transaction.transaction_id] = transaction
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.transaction_id in account.disputed:
            logger.warning(f"Dispute for tx {transaction.transaction_id}: transaction already disputed")
            return ProcessingResult.REJECTED

        original = account.history.get(transaction.transaction_id)
        if original is None:
            logger.warning(f"Dispute for tx {transaction.transaction_id}: no such transaction for client {account.client_id}")
            return ProcessingResult.REJECTED

        # May take available below zero if the funds were already withdrawn.
        account.hold(original.amount)
        account.disputed[transaction.transaction_id] = account.history.pop(transaction.transaction_id)
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = account.disputed.get(transaction.transaction_id)
        if original is None:
            logger.warning(f"Resolve for tx {transaction.transaction_id}: transaction is not under dispute for client {account.client_id}")
            return ProcessingResult.REJECTED

        account.release_hold(original.amount)
        account.history[transaction.transaction_id] = account.disputed.pop(transaction.transaction_id)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = account.disputed.get(transaction.transaction_id)
        if original is None:
            logger.warning(f"Chargeback for tx {transaction.transaction_id}: transaction is not under dispute for client {account.client_id}")
            return ProcessingResult.REJECTED

        account.remove_held(original.amount)
        account.locked = True
        account.history[transaction.transaction_id] = account.disputed.pop(transaction.transaction_id)
        return ProcessingResult.SUCCESS
