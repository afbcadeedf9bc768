from typing import Dict

from amount import Amount
from errors import DuplicateTransactionId, InvalidDisputeTransition, UnknownTransactionId
from models import DisputeState, StoredTransaction, TransactionType

# Legal dispute-state edges. CHARGED_BACK is terminal.
_TRANSITIONS = {
    (DisputeState.NORMAL, DisputeState.DISPUTED),
    (DisputeState.DISPUTED, DisputeState.NORMAL),
    (DisputeState.DISPUTED, DisputeState.CHARGED_BACK),
}


class TransactionLedger:
    """
    Deposits and withdrawals indexed by transaction id, with their dispute state.
    Dispute, resolve and chargeback records are never stored here.
    """

    def __init__(self):
        self._transactions: Dict[int, StoredTransaction] = {}

    def insert(self, transaction_id: int, transaction_type: TransactionType, client_id: int, amount: Amount) -> StoredTransaction:
        if transaction_id in self._transactions:
            raise DuplicateTransactionId(f"Transaction {transaction_id} already exists")
        stored = StoredTransaction(transaction_type=transaction_type, client_id=client_id, amount=amount)
        self._transactions[transaction_id] = stored
        return stored

    def lookup(self, transaction_id: int) -> StoredTransaction:
        try:
            return self._transactions[transaction_id]
        except KeyError:
            raise UnknownTransactionId(f"Transaction {transaction_id} not found") from None

    def check_transition(self, transaction_id: int, new_state: DisputeState) -> StoredTransaction:
        """Return the stored transaction if it may move to new_state, else raise."""
        stored = self.lookup(transaction_id)
        if (stored.state, new_state) not in _TRANSITIONS:
            raise InvalidDisputeTransition(
                f"Transaction {transaction_id} cannot go from {stored.state.value} to {new_state.value}"
            )
        return stored

    def mark(self, stored: StoredTransaction, new_state: DisputeState) -> None:
        """Move a transaction returned by check_transition to new_state."""
        stored.state = new_state

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def __len__(self) -> int:
        return len(self._transactions)
