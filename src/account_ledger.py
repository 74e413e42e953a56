from decimal import Decimal
from typing import Dict, List, Optional

from models import AccountSnapshot, ClientAccount


class AccountLedger:
    """
    Owns every client account.
    Accounts are created on the first accepted deposit and never removed.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def lookup(self, client_id: int) -> Optional[ClientAccount]:
        """Return the account for a client, or None if it was never created."""
        return self._accounts.get(client_id)

    def create(self, client_id: int, initial_available: Decimal) -> ClientAccount:
        """Open a new unlocked account with nothing held."""
        if client_id in self._accounts:
            raise ValueError(f"Account for client {client_id} already exists")
        account = ClientAccount(client_id=client_id, available=initial_available)
        self._accounts[client_id] = account
        return account

    def accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def snapshot(self) -> List[AccountSnapshot]:
        """Rounded, read-only view of every account."""
        return [AccountSnapshot.from_account(account) for account in self._accounts.values()]

    def __len__(self) -> int:
        return len(self._accounts)
