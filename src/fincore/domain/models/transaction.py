"""Transaction domain model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from fincore.domain.models.enums import TransactionType


@dataclass
class Transaction:
    """
    Ledger transaction entry (source of truth for positions).

    - price is the execution-time snapshot, never re-derived from the asset
    - total_value = quantity * price, without extra rounding
    - append-only; the ledger exposes no update or delete path
    """

    txn_id: str
    user_id: str
    ticker: str
    txn_type: TransactionType
    quantity: Decimal
    price: Decimal
    total_value: Decimal
    timestamp: datetime

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            self.txn_type = TransactionType(self.txn_type)

    @property
    def signed_quantity(self) -> Decimal:
        """Quantity with sign: positive for BUY, negative for SELL."""
        if self.txn_type == TransactionType.BUY:
            return self.quantity
        return -self.quantity
