from typing import Dict, Optional

from models import MoneyOperation


class OperationRegistry:
    """
    History of deposits and withdrawals keyed by transaction id.
    Kept for the whole run so later claims can find the operation they reference.
    """

    def __init__(self):
        self._operations: Dict[int, MoneyOperation] = {}

    def exists(self, transaction_id: int) -> bool:
        return transaction_id in self._operations

    def record(self, operation: MoneyOperation) -> None:
        """Store an operation. Callers check `exists` first; a repeated id overwrites."""
        self._operations[operation.transaction_id] = operation

    def lookup(self, transaction_id: int) -> Optional[MoneyOperation]:
        """Retrieve a stored operation; the returned object is live, not a copy."""
        return self._operations.get(transaction_id)

    def __contains__(self, transaction_id: int) -> bool:
        return self.exists(transaction_id)

    def __len__(self) -> int:
        return len(self._operations)
