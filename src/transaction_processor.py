import logging
from typing import assert_never

from amount import Amount
from errors import BusinessRuleRejection, ClientMismatch, DuplicateTransactionId, MalformedRecord, SystemFailure
from models import ClientAccount, DisputeState, ProcessingResult, StoredTransaction, Transaction, TransactionType
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to state, one at a time, in the order received.
    Returns ProcessingResult to indicate success/failure type.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction.

        Returns:
            SUCCESS: Applied to the ledger and the account
            REJECTED: Refused by a business rule (duplicate id, unknown or foreign
                      dispute reference, illegal dispute transition, insufficient
                      funds, locked account)
            FAILED: Could not be applied because of a system failure (overflow)

        State is left untouched for anything other than SUCCESS.
        """
        account = self._state.get_or_create_account(transaction.client_id)

        try:
            self._dispatch(account, transaction)
        except BusinessRuleRejection as e:
            logger.info(f"Rejected {transaction}: {e}")
            return ProcessingResult.REJECTED
        except SystemFailure as e:
            logger.warning(f"Failed to apply {transaction}: {e}")
            return ProcessingResult.FAILED
        return ProcessingResult.SUCCESS

    def _dispatch(self, account: ClientAccount, transaction: Transaction) -> None:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(account, transaction)
            case _:
                assert_never(transaction.transaction_type)

    def _monetary_amount(self, transaction: Transaction) -> Amount:
        if transaction.amount is None or not transaction.amount.is_positive():
            raise MalformedRecord(f"{transaction.transaction_type.value} needs a positive amount, got {transaction.amount}")
        return transaction.amount

    def _ensure_new_id(self, transaction: Transaction) -> None:
        if transaction.transaction_id in self._state.ledger:
            raise DuplicateTransactionId(f"Transaction {transaction.transaction_id} already exists")

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> None:
        # Deposits are accepted on locked accounts too
        amount = self._monetary_amount(transaction)
        self._ensure_new_id(transaction)
        account.deposit(amount)
        self._record(transaction)

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> None:
        amount = self._monetary_amount(transaction)
        self._ensure_new_id(transaction)
        account.withdraw(amount)
        self._record(transaction)

    def _record(self, transaction: Transaction) -> None:
        self._state.ledger.insert(
            transaction.transaction_id,
            transaction.transaction_type,
            transaction.client_id,
            transaction.amount,
        )

    def _referenced(self, transaction: Transaction, new_state: DisputeState) -> StoredTransaction:
        original = self._state.ledger.check_transition(transaction.transaction_id, new_state)
        if original.client_id != transaction.client_id:
            raise ClientMismatch(
                f"Transaction {transaction.transaction_id} belongs to client {original.client_id}, not {transaction.client_id}"
            )
        return original

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> None:
        # A dispute always moves the amount from available into held,
        # whether the original was a deposit or a withdrawal.
        original = self._referenced(transaction, DisputeState.DISPUTED)
        account.hold(original.amount)
        self._state.ledger.mark(original, DisputeState.DISPUTED)

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> None:
        original = self._referenced(transaction, DisputeState.NORMAL)
        account.release_to_available(original.amount)
        self._state.ledger.mark(original, DisputeState.NORMAL)

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> None:
        original = self._referenced(transaction, DisputeState.CHARGED_BACK)
        account.release_from_held(original.amount)
        account.lock()
        self._state.ledger.mark(original, DisputeState.CHARGED_BACK)
