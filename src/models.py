from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

from errors import InsufficientHeldFundsError, MalformedRecordError

DISPLAY_PRECISION = Decimal("0.0001")
# largest single amount; balances summed from these stay far inside AMOUNT_CONTEXT
MAX_AMOUNT = Decimal("1e18")
AMOUNT_CONTEXT = Context(prec=64, rounding=ROUND_HALF_UP)


class TransactionKind(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class OperationKind(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class ClaimKind(Enum):
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


@dataclass
class MoneyOperation:
    """A deposit or withdrawal. Only `disputed` changes once recorded."""

    client_id: int
    transaction_id: int
    kind: OperationKind
    amount: Decimal
    disputed: bool = False

    def __repr__(self) -> str:
        return (
            f"MoneyOperation({self.kind.value}, client={self.client_id}, "
            f"tx={self.transaction_id}, amount={self.amount}, disputed={self.disputed})"
        )


@dataclass
class ClientClaim:
    client_id: int
    transaction_id: int
    kind: ClaimKind

    def __repr__(self) -> str:
        return f"ClientClaim({self.kind.value}, client={self.client_id}, tx={self.transaction_id})"


TransactionOrder = Union[MoneyOperation, ClientClaim]


def build_transaction_order(
    kind: TransactionKind,
    client_id: int,
    transaction_id: int,
    amount: Optional[Decimal] = None,
) -> TransactionOrder:
    """
    Split a validated record into a money operation or a client claim.

    Deposits and withdrawals require a finite amount between 0 and MAX_AMOUNT.
    Claims carry no amount; one supplied anyway is ignored.
    """
    if kind in (TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL):
        if amount is None:
            raise MalformedRecordError(f"{kind.value} tx {transaction_id}: missing amount")
        if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
            raise MalformedRecordError(f"{kind.value} tx {transaction_id}: invalid amount {amount}")
        return MoneyOperation(
            client_id=client_id,
            transaction_id=transaction_id,
            kind=OperationKind(kind.value),
            amount=amount,
        )
    return ClientClaim(
        client_id=client_id,
        transaction_id=transaction_id,
        kind=ClaimKind(kind.value),
    )


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return AMOUNT_CONTEXT.add(self.available, self.held)

    def has_enough_funds(self, amount: Decimal) -> bool:
        return self.available >= amount

    def credit(self, amount: Decimal) -> None:
        self.available = AMOUNT_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = AMOUNT_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        # available may go negative when part of the deposit was already spent
        self.available = AMOUNT_CONTEXT.subtract(self.available, amount)
        self.held = AMOUNT_CONTEXT.add(self.held, amount)

    def reclaim(self, amount: Decimal) -> None:
        self.held = AMOUNT_CONTEXT.add(self.held, amount)

    def release(self, amount: Decimal) -> None:
        self._check_held(amount)
        self.held = AMOUNT_CONTEXT.subtract(self.held, amount)
        self.available = AMOUNT_CONTEXT.add(self.available, amount)

    def clear_held(self, amount: Decimal) -> None:
        self._check_held(amount)
        self.held = AMOUNT_CONTEXT.subtract(self.held, amount)

    def lock(self) -> None:
        self.locked = True

    def _check_held(self, amount: Decimal) -> None:
        if self.held < amount:
            raise InsufficientHeldFundsError(self.client_id, amount, self.held)


def round_amount(value: Decimal) -> Decimal:
    """Round to display precision, half away from zero, without negative zero."""
    rounded = value.quantize(DISPLAY_PRECISION, context=AMOUNT_CONTEXT)
    if rounded.is_zero():
        return abs(rounded)
    return rounded


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def from_account(cls, account: ClientAccount) -> "AccountSnapshot":
        return cls(
            client_id=account.client_id,
            available=round_amount(account.available),
            held=round_amount(account.held),
            total=round_amount(account.total),
            locked=account.locked,
        )


class ProcessingStats:
    """Counters for one run."""

    def __init__(self):
        self.processed = 0
        self.rejected = 0
        self.dropped = 0

    def record_success(self):
        self.processed += 1

    def record_rejection(self):
        self.rejected += 1

    def record_dropped(self):
        self.dropped += 1
