import logging

from sqlalchemy.orm import Session, joinedload

from tracker.auth.models import User
from tracker.errors import NotFoundError, ValidationError
from tracker.investments.models import Investment
from tracker.investments.ownership import get_owned_investment
from tracker.investments.reconciliation import record_sell_if_available, validate_sell
from tracker.portfolios.models import Portfolio
from tracker.transactions.models import Transaction, TransactionType
from tracker.transactions.schemas import TransactionCreate

logger = logging.getLogger(__name__)

SELL_RACE_MESSAGE = "Available quantity changed while recording the sell. Please retry."


def _require_user(db: Session, email: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_transactions(db: Session, email: str) -> list[Transaction]:
    """Every transaction across the user's investments, newest first."""
    user = _require_user(db, email)
    return (
        db.query(Transaction)
        .join(Transaction.investment)
        .join(Investment.portfolio)
        .filter(Portfolio.user_id == user.id)
        .options(joinedload(Transaction.investment))
        .order_by(Transaction.date.desc())
        .all()
    )


def create_transaction(db: Session, email: str, data: TransactionCreate) -> Transaction:
    """
    Append a BUY or SELL to an investment the caller owns.

    A sell is checked against the ledger, then written with an insert that
    repeats the check in the same statement. Where the backend supports it the
    investment row is also locked for the duration.
    """
    _require_user(db, email)
    is_sell = data.type == TransactionType.SELL
    investment = get_owned_investment(db, data.investment_id, email, for_update=is_sell)

    if is_sell:
        decision = validate_sell(db, investment.id, data.quantity)
        if not decision.accepted:
            raise ValidationError(decision.reason)

        transaction = record_sell_if_available(db, investment.id, data.quantity, data.price, data.date)
        if transaction is None:
            # another sell landed between the check and the insert
            db.rollback()
            decision = validate_sell(db, investment.id, data.quantity)
            raise ValidationError(decision.reason or SELL_RACE_MESSAGE)
    else:
        transaction = Transaction(
            investment_id=investment.id,
            type=data.type,
            quantity=data.quantity,
            price=data.price,
        )
        if data.date is not None:
            transaction.date = data.date
        db.add(transaction)

    db.commit()
    db.refresh(transaction)

    logger.info(f"Recorded {data.type.value} of {data.quantity} on investment {investment.id}")
    return transaction
