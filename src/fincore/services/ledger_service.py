"""Ledger service for transaction recording and reporting."""

import logging
import uuid
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Callable

from fincore.core.timezone import now_market
from fincore.core.exceptions import AssetNotFoundError, ValidationError
from fincore.core.numeric import PRICE_SCALE, QUANTITY_SCALE, fractional_digits
from fincore.domain.models import Transaction, TransactionType
from fincore.domain.views import Page, TransactionReport
from fincore.repositories.protocols import AssetRepository, TransactionRepository

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Service for the append-only transaction ledger.

    record_transaction is the only write path; there is no update or
    delete. Positions and totals are recomputed from the ledger on every
    call.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        transaction_repo: TransactionRepository,
        clock: Callable[[], datetime] = now_market,
    ):
        self._asset_repo = asset_repo
        self._transaction_repo = transaction_repo
        self._clock = clock

    def record_transaction(
        self,
        user_id: str,
        ticker: str,
        txn_type: TransactionType,
        quantity: Decimal,
        price: Decimal,
    ) -> Transaction:
        """
        Append a BUY or SELL to the ledger.

        price is stored as given (the execution snapshot). Not idempotent:
        repeating a call records a second transaction.
        """
        try:
            txn_type = TransactionType(txn_type)
        except ValueError:
            raise ValidationError(f"Invalid transaction type: {txn_type}")
        ticker = (ticker or "").strip().upper()
        self._validate(user_id, ticker, quantity, price)

        if self._asset_repo.find_by_ticker(ticker) is None:
            raise AssetNotFoundError(ticker)

        transaction = Transaction(
            txn_id=str(uuid.uuid4()),
            user_id=user_id,
            ticker=ticker,
            txn_type=txn_type,
            quantity=quantity,
            price=price,
            total_value=quantity * price,
            timestamp=self._clock(),
        )
        created = self._transaction_repo.create(transaction)
        logger.info(
            f"Transaction created: {txn_type.value} {quantity} of {ticker} "
            f"for user {user_id}"
        )
        return created

    def list_transactions(self, user_id: str, page: int = 0, size: int = 20) -> Page[Transaction]:
        """One page of a user's transactions, newest first."""
        items = self._transaction_repo.page_by_user(user_id, page, size)
        total = self._transaction_repo.count_by_user(user_id)
        return Page(items=items, page=page, size=size, total_items=total)

    def generate_report(self, user_id: str) -> TransactionReport:
        """
        Summarize a user's ledger.

        net_amount = total sold - total bought. Every ticker the user has
        traded appears in current_positions, including fully closed ones.
        """
        transactions = self._transaction_repo.list_by_user(user_id)

        total_bought = Decimal("0")
        total_sold = Decimal("0")
        buy_count = 0
        sell_count = 0
        positions: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))

        for txn in transactions:
            positions[txn.ticker] += txn.signed_quantity
            if txn.txn_type == TransactionType.BUY:
                total_bought += txn.total_value
                buy_count += 1
            else:
                total_sold += txn.total_value
                sell_count += 1

        return TransactionReport(
            user_id=user_id,
            total_transactions=len(transactions),
            total_buy_transactions=buy_count,
            total_sell_transactions=sell_count,
            total_amount_bought=total_bought,
            total_amount_sold=total_sold,
            net_amount=total_sold - total_bought,
            current_positions=dict(positions),
            generated_at=self._clock(),
        )

    def get_position(self, user_id: str, ticker: str) -> Decimal:
        """Signed net quantity a user holds in one ticker."""
        ticker = ticker.upper()
        position = Decimal("0")
        for txn in self._transaction_repo.list_by_user(user_id):
            if txn.ticker == ticker:
                position += txn.signed_quantity
        return position

    @staticmethod
    def _validate(user_id: str, ticker: str, quantity: Decimal, price: Decimal) -> None:
        if not user_id or not user_id.strip():
            raise ValidationError("user_id is required")
        if not ticker:
            raise ValidationError("ticker is required")
        if quantity is None or quantity <= 0:
            raise ValidationError("quantity must be > 0")
        if price is None or price <= 0:
            raise ValidationError("price must be > 0")
        if fractional_digits(quantity) > QUANTITY_SCALE:
            raise ValidationError(f"quantity allows at most {QUANTITY_SCALE} decimal places")
        if fractional_digits(price) > PRICE_SCALE:
            raise ValidationError(f"price allows at most {PRICE_SCALE} decimal places")
