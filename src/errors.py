class PaymentsError(Exception):
    """Base class for every error raised by the payments engine."""


class SystemFailure(PaymentsError):
    """
    A row could not be processed because its data is broken.
    The row is rejected and reported; the run continues.
    """


class MalformedAmount(SystemFailure):
    pass


class AmountOverflow(SystemFailure):
    pass


class MalformedRecord(SystemFailure):
    pass


class BusinessRuleRejection(PaymentsError):
    """
    A well-formed transaction that the ledger rules refuse.
    These are expected and discarded without affecting any account.
    """


class DuplicateTransactionId(BusinessRuleRejection):
    pass


class UnknownTransactionId(BusinessRuleRejection):
    pass


class ClientMismatch(BusinessRuleRejection):
    pass


class InvalidDisputeTransition(BusinessRuleRejection):
    pass


class InsufficientFunds(BusinessRuleRejection):
    pass


class AccountLocked(BusinessRuleRejection):
    pass
