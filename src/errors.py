from decimal import Decimal


class MalformedRecordError(ValueError):
    """Raised by the input adapter for rows that must never reach the processor."""


class TransactionError(Exception):
    """Base class for per-record rejections raised by the processor."""


class DuplicateTransactionError(TransactionError):
    def __init__(self, transaction_id: int):
        super().__init__(f"Transaction {transaction_id} already exists")
        self.transaction_id = transaction_id


class LockedAccountError(TransactionError):
    def __init__(self, client_id: int):
        super().__init__(f"Client account {client_id} is locked")
        self.client_id = client_id


class UnknownClientError(TransactionError):
    def __init__(self, client_id: int):
        super().__init__(f"Can't find client {client_id}")
        self.client_id = client_id


class UnknownTransactionError(TransactionError):
    def __init__(self, transaction_id: int):
        super().__init__(f"Can't find transaction {transaction_id}")
        self.transaction_id = transaction_id


class ClientMismatchError(TransactionError):
    def __init__(self, transaction_id: int, client_id: int, owner_id: int):
        super().__init__(
            f"Transaction {transaction_id} belongs to client {owner_id}, not client {client_id}"
        )
        self.transaction_id = transaction_id
        self.client_id = client_id
        self.owner_id = owner_id


class InsufficientFundsError(TransactionError):
    def __init__(self, client_id: int, requested: Decimal, available: Decimal):
        super().__init__(
            f"Not enough funds for client {client_id}: requested {requested}, available {available}"
        )
        self.client_id = client_id
        self.requested = requested
        self.available = available


class InsufficientHeldFundsError(TransactionError):
    def __init__(self, client_id: int, requested: Decimal, held: Decimal):
        super().__init__(
            f"Not enough held funds for client {client_id}: requested {requested}, held {held}"
        )
        self.client_id = client_id
        self.requested = requested
        self.held = held


class WrongTransactionStateError(TransactionError):
    def __init__(self, transaction_id: int, claim_kind: str, disputed: bool):
        state = "disputed" if disputed else "undisputed"
        super().__init__(f"Wrong transaction state: cannot {claim_kind} {state} transaction {transaction_id}")
        self.transaction_id = transaction_id
        self.claim_kind = claim_kind
        self.disputed = disputed
