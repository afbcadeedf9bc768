from typing import Mapping, Optional

from amount import Amount
from errors import MalformedAmount, MalformedRecord
from models import Transaction, TransactionType

MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


def _parse_id(value: Optional[str], name: str, maximum: int) -> int:
    if not value:
        raise MalformedRecord(f"Missing {name}")
    # Plain ASCII digits only: int() would also take signs, underscores and other scripts
    if not (value.isascii() and value.isdigit()):
        raise MalformedRecord(f"Invalid {name}: {value!r}")
    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise MalformedRecord(f"{name} out of range: {parsed}")
    return parsed


def parse_record(row: Mapping[str, Optional[str]]) -> Transaction:
    """
    Parse one input row (type, client, tx, optional amount) into a Transaction.

    Deposits and withdrawals need a strictly positive amount. Disputes, resolves
    and chargebacks ignore any amount they carry, since the referenced
    transaction supplies it. Raises MalformedRecord on anything else.
    """
    # csv.DictReader files surplus columns under a None key
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

    type_tag = normalized.get("type", "").lower()
    try:
        transaction_type = TransactionType(type_tag)
    except ValueError:
        raise MalformedRecord(f"Unknown transaction type: {type_tag!r}") from None

    client_id = _parse_id(normalized.get("client"), "client", MAX_CLIENT_ID)
    transaction_id = _parse_id(normalized.get("tx"), "tx", MAX_TRANSACTION_ID)

    amount = None
    if transaction_type.is_monetary:
        amount_str = normalized.get("amount", "")
        if not amount_str:
            raise MalformedRecord(f"{transaction_type.value} tx {transaction_id} has no amount")
        try:
            amount = Amount.parse(amount_str)
        except MalformedAmount as e:
            raise MalformedRecord(f"{transaction_type.value} tx {transaction_id}: {e}") from e
        if not amount.is_positive():
            raise MalformedRecord(f"{transaction_type.value} tx {transaction_id} has non-positive amount {amount}")

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )
