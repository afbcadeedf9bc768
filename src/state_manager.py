from typing import Dict

from models import ClientAccount
from transaction_ledger import TransactionLedger


class StateManager:
    """
    All state of one processing run: client accounts and the transaction ledger.
    Owned by a single processor; nothing here is shared between runs or threads.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self.ledger = TransactionLedger()

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create an empty, unlocked one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts ordered by client id (for final output)."""
        return {client_id: self._accounts[client_id] for client_id in sorted(self._accounts)}
