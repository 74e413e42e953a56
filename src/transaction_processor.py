import logging

from account_ledger import AccountLedger
from errors import (
    ClientMismatchError,
    DuplicateTransactionError,
    InsufficientFundsError,
    LockedAccountError,
    UnknownClientError,
    UnknownTransactionError,
    WrongTransactionStateError,
)
from models import ClaimKind, ClientAccount, ClientClaim, MoneyOperation, OperationKind, TransactionOrder
from operation_registry import OperationRegistry

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies one order at a time to the ledger and the registry.
    Every check runs before the first mutation, so a rejected order leaves
    both untouched. Rejections are raised as TransactionError subclasses.
    """

    def __init__(self, ledger: AccountLedger, registry: OperationRegistry):
        self._ledger = ledger
        self._registry = registry

    def process_transaction(self, order: TransactionOrder) -> None:
        match order:
            case MoneyOperation():
                self._handle_money_operation(order)
            case ClientClaim():
                self._handle_claim(order)
            case _:
                raise TypeError(f"Unsupported transaction order: {order!r}")

    def _handle_money_operation(self, operation: MoneyOperation) -> None:
        if self._registry.exists(operation.transaction_id):
            raise DuplicateTransactionError(operation.transaction_id)

        account = self._ledger.lookup(operation.client_id)
        if account is not None and account.locked:
            raise LockedAccountError(operation.client_id)

        match operation.kind:
            case OperationKind.WITHDRAWAL:
                if account is None:
                    raise UnknownClientError(operation.client_id)
                if not account.has_enough_funds(operation.amount):
                    raise InsufficientFundsError(operation.client_id, operation.amount, account.available)
                account.debit(operation.amount)
            case OperationKind.DEPOSIT:
                if account is None:
                    self._ledger.create(operation.client_id, operation.amount)
                else:
                    account.credit(operation.amount)

        operation.disputed = False
        self._registry.record(operation)

    def _handle_claim(self, claim: ClientClaim) -> None:
        operation = self._registry.lookup(claim.transaction_id)
        if operation is None:
            raise UnknownTransactionError(claim.transaction_id)

        account = self._ledger.lookup(operation.client_id)
        if account is None:
            # operations are only recorded after their account exists
            raise UnknownClientError(operation.client_id)
        if account.locked:
            raise LockedAccountError(operation.client_id)

        claimant = self._ledger.lookup(claim.client_id)
        if claimant is not None and claimant.locked:
            raise LockedAccountError(claim.client_id)

        if operation.client_id != claim.client_id:
            raise ClientMismatchError(claim.transaction_id, claim.client_id, operation.client_id)

        match (claim.kind, operation.disputed):
            case (ClaimKind.DISPUTE, False):
                self._dispute(account, operation)
            case (ClaimKind.RESOLVE, True):
                self._resolve(account, operation)
            case (ClaimKind.CHARGEBACK, False):
                self._chargeback(account, operation)
            case _:
                raise WrongTransactionStateError(claim.transaction_id, claim.kind.value, operation.disputed)

        logger.debug("Applied %r, operation now %r", claim, operation)

    def _dispute(self, account: ClientAccount, operation: MoneyOperation) -> None:
        if operation.kind == OperationKind.DEPOSIT:
            account.hold(operation.amount)
        else:
            # the money already left; held grows and available stays as is
            account.reclaim(operation.amount)
        operation.disputed = True

    def _resolve(self, account: ClientAccount, operation: MoneyOperation) -> None:
        if operation.kind == OperationKind.DEPOSIT:
            account.release(operation.amount)
        else:
            account.clear_held(operation.amount)
        operation.disputed = False

    def _chargeback(self, account: ClientAccount, operation: MoneyOperation) -> None:
        # accepted only on an undisputed operation
        if operation.kind == OperationKind.DEPOSIT:
            account.clear_held(operation.amount)
        else:
            account.release(operation.amount)
        operation.disputed = False
        account.lock()
