"""Transaction repository protocol."""

from typing import Protocol

from fincore.domain.models import Transaction


class TransactionRepository(Protocol):
    """Interface for transaction (ledger) data access."""

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        ...

    def list_by_user(self, user_id: str) -> list[Transaction]:
        """List all transactions for a user, newest first."""
        ...

    def page_by_user(self, user_id: str, page: int, size: int) -> list[Transaction]:
        """One page (0-based) of a user's transactions, newest first."""
        ...

    def count_by_user(self, user_id: str) -> int:
        """Count a user's transactions."""
        ...
