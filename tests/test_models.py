import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amount import Amount, MAX_RAW
from errors import AccountLocked, AmountOverflow, InsufficientFunds
from models import Transaction, TransactionType, ClientAccount, ProcessingResult, ProcessingStats


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount=Amount.parse("100.0"),
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Amount(1000000)

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_monetary_types(self):
        assert TransactionType.DEPOSIT.is_monetary
        assert TransactionType.WITHDRAWAL.is_monetary
        assert not TransactionType.DISPUTE.is_monetary
        assert not TransactionType.RESOLVE.is_monetary
        assert not TransactionType.CHARGEBACK.is_monetary


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Amount.zero()
        assert account.held == Amount.zero()
        assert account.locked is False

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Amount.parse("100"),
            held=Amount.parse("50"),
        )
        assert account.total == Amount.parse("150")

    def test_withdraw_insufficient_funds(self):
        account = ClientAccount(client_id=1, available=Amount.parse("1"))
        with pytest.raises(InsufficientFunds):
            account.withdraw(Amount.parse("1.0001"))
        assert account.available == Amount.parse("1")

    def test_withdraw_locked(self):
        account = ClientAccount(client_id=1, available=Amount.parse("10"))
        account.lock()
        with pytest.raises(AccountLocked):
            account.withdraw(Amount.parse("1"))
        assert account.available == Amount.parse("10")

    def test_deposit_allowed_when_locked(self):
        account = ClientAccount(client_id=1)
        account.lock()
        account.deposit(Amount.parse("3"))
        assert account.available == Amount.parse("3")

    def test_hold_and_release(self):
        account = ClientAccount(client_id=1, available=Amount.parse("10"))
        account.hold(Amount.parse("4"))
        assert (account.available, account.held) == (Amount.parse("6"), Amount.parse("4"))
        account.release_to_available(Amount.parse("4"))
        assert (account.available, account.held) == (Amount.parse("10"), Amount.zero())

    def test_hold_overflow_leaves_account_untouched(self):
        account = ClientAccount(client_id=1, available=Amount.parse("10"), held=Amount(MAX_RAW))
        with pytest.raises(AmountOverflow):
            account.hold(Amount.parse("1"))
        assert account.available == Amount.parse("10")
        assert account.held == Amount(MAX_RAW)


class TestProcessingStats:
    def test_counts(self):
        stats = ProcessingStats()
        stats.record(ProcessingResult.SUCCESS)
        stats.record(ProcessingResult.SUCCESS)
        stats.record(ProcessingResult.REJECTED)
        stats.record(ProcessingResult.FAILED)
        stats.record_malformed()
        assert str(stats) == "Applied: 2, Rejected: 1, Failed: 1, Malformed: 1"
