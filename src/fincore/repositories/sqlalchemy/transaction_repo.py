"""SQLAlchemy implementation of TransactionRepository."""

from decimal import Decimal

from sqlalchemy.orm import Session

from fincore.core.timezone import to_market, to_naive_market
from fincore.domain.models import Transaction
from fincore.repositories.sqlalchemy.database import store_operation
from fincore.repositories.sqlalchemy.orm_models import TransactionORM


class SqlAlchemyTransactionRepository:
    """SQLAlchemy-backed transaction repository."""

    def __init__(self, db: Session):
        self._db = db

    @store_operation
    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        orm_txn = self._to_orm(transaction)
        self._db.add(orm_txn)
        self._db.commit()
        self._db.refresh(orm_txn)
        return self._to_domain(orm_txn)

    @store_operation
    def list_by_user(self, user_id: str) -> list[Transaction]:
        """List all transactions for a user, newest first."""
        query = self._user_query(user_id)
        return [self._to_domain(t) for t in query.all()]

    @store_operation
    def page_by_user(self, user_id: str, page: int, size: int) -> list[Transaction]:
        """One 0-based page of a user's transactions, newest first."""
        query = self._user_query(user_id).offset(page * size).limit(size)
        return [self._to_domain(t) for t in query.all()]

    @store_operation
    def count_by_user(self, user_id: str) -> int:
        """Count a user's transactions."""
        return self._db.query(TransactionORM).filter(
            TransactionORM.user_id == user_id
        ).count()

    def _user_query(self, user_id: str):
        return (
            self._db.query(TransactionORM)
            .filter(TransactionORM.user_id == user_id)
            .order_by(TransactionORM.timestamp.desc(), TransactionORM.txn_id)
        )

    @staticmethod
    def _to_orm(txn: Transaction) -> TransactionORM:
        """Convert domain model to ORM model."""
        return TransactionORM(
            txn_id=txn.txn_id,
            user_id=txn.user_id,
            ticker=txn.ticker,
            txn_type=txn.txn_type,
            quantity=txn.quantity,
            price=txn.price,
            total_value=txn.total_value,
            timestamp=to_naive_market(txn.timestamp),
        )

    @staticmethod
    def _to_domain(orm: TransactionORM) -> Transaction:
        """Convert ORM model to domain model."""
        return Transaction(
            txn_id=orm.txn_id,
            user_id=orm.user_id,
            ticker=orm.ticker,
            txn_type=orm.txn_type,
            quantity=Decimal(str(orm.quantity)),
            price=Decimal(str(orm.price)),
            total_value=Decimal(str(orm.total_value)),
            timestamp=to_market(orm.timestamp),
        )
