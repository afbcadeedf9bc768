from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from amount import Amount
from errors import AccountLocked, InsufficientFunds


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def is_monetary(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Amount] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class StoredTransaction:
    """A deposit or withdrawal kept for later dispute lookups."""

    transaction_type: TransactionType
    client_id: int
    amount: Amount
    state: DisputeState = DisputeState.NORMAL


@dataclass
class ClientAccount:
    """
    Per-client balances. Total is always derived from available + held.
    Every operation computes all new balances before assigning any of them,
    so an AmountOverflow leaves the account untouched.
    """

    client_id: int
    available: Amount = field(default_factory=Amount.zero)
    held: Amount = field(default_factory=Amount.zero)
    locked: bool = False

    @property
    def total(self) -> Amount:
        return self.available + self.held

    def deposit(self, amount: Amount) -> None:
        self.available = self.available + amount

    def withdraw(self, amount: Amount) -> None:
        if self.locked:
            raise AccountLocked(f"Client {self.client_id} is locked")
        if self.available < amount:
            raise InsufficientFunds(f"Client {self.client_id} has {self.available} available, needs {amount}")
        self.available = self.available - amount

    def hold(self, amount: Amount) -> None:
        available, held = self.available - amount, self.held + amount
        self.available, self.held = available, held

    def release_to_available(self, amount: Amount) -> None:
        available, held = self.available + amount, self.held - amount
        self.available, self.held = available, held

    def release_from_held(self, amount: Amount) -> None:
        self.held = self.held - amount

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counters for one processing run."""

    def __init__(self):
        self.applied = 0
        self.rejected = 0
        self.failed = 0
        self.malformed = 0

    def record(self, result: ProcessingResult) -> None:
        match result:
            case ProcessingResult.SUCCESS:
                self.applied += 1
            case ProcessingResult.REJECTED:
                self.rejected += 1
            case ProcessingResult.FAILED:
                self.failed += 1

    def record_malformed(self) -> None:
        self.malformed += 1

    def __str__(self) -> str:
        return f"Applied: {self.applied}, Rejected: {self.rejected}, Failed: {self.failed}, Malformed: {self.malformed}"
