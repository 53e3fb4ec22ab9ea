"""
Quantity reconciliation for an investment's ledger.

The available (unsold) quantity is never stored. It is derived from the
transactions every time it is needed:

    available = sum(BUY quantities) - sum(SELL quantities)

and a sell is only accepted when it does not exceed that figure. The final
sell insert re-checks the figure inside the INSERT statement itself, so two
sells that both passed validate_sell cannot both land.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import case, func, insert, literal, select
from sqlalchemy.orm import Session

from tracker.investments.ownership import get_owned_investment
from tracker.transactions.models import Transaction, TransactionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuantitySummary:
    available: int
    total_bought: int
    total_sold: int


@dataclass(frozen=True)
class SellDecision:
    accepted: bool
    requested: int
    available: int
    reason: str | None = None


def summarize(transactions: Iterable[Transaction]) -> QuantitySummary:
    """Sum a ledger. Order does not matter."""
    total_bought = 0
    total_sold = 0
    for tx in transactions:
        if tx.type == TransactionType.BUY:
            total_bought += tx.quantity
        elif tx.type == TransactionType.SELL:
            total_sold += tx.quantity
    return QuantitySummary(
        available=total_bought - total_sold,
        total_bought=total_bought,
        total_sold=total_sold,
    )


def check_sell(summary: QuantitySummary, requested_quantity: int) -> SellDecision:
    if requested_quantity > summary.available:
        return SellDecision(
            accepted=False,
            requested=requested_quantity,
            available=summary.available,
            reason=f"Cannot sell {requested_quantity} units. Only {summary.available} units available.",
        )
    return SellDecision(accepted=True, requested=requested_quantity, available=summary.available)


def load_ledger(db: Session, investment_id: str) -> list[Transaction]:
    # Always a fresh query: a ledger collection already loaded on the
    # investment may predate another request's write
    return db.query(Transaction).filter(Transaction.investment_id == investment_id).all()


def get_available_quantity(db: Session, investment_id: str, email: str) -> QuantitySummary:
    investment = get_owned_investment(db, investment_id, email)
    return summarize(load_ledger(db, investment.id))


def validate_sell(db: Session, investment_id: str, requested_quantity: int) -> SellDecision:
    """
    Re-derive the available quantity from the store and decide on a sell.

    Ownership must already have been established by the caller.
    """
    decision = check_sell(summarize(load_ledger(db, investment_id)), requested_quantity)
    if not decision.accepted:
        logger.info(
            f"Rejected sell of {requested_quantity} on investment {investment_id} "
            f"({decision.available} available)"
        )
    return decision


def _available_subquery(investment_id: str):
    signed = case(
        (Transaction.type == TransactionType.BUY, Transaction.quantity),
        else_=-Transaction.quantity,
    )
    return (
        select(func.coalesce(func.sum(signed), 0))
        .where(Transaction.investment_id == investment_id)
        .correlate(None)
        .scalar_subquery()
    )


def record_sell_if_available(
    db: Session,
    investment_id: str,
    quantity: int,
    price: float,
    date: datetime | None = None,
) -> Transaction | None:
    """
    Insert a SELL only if the ledger still covers it, as a single
    INSERT ... SELECT ... WHERE available >= quantity.

    Returns None when nothing was inserted. The caller owns the commit.
    """
    table = Transaction.__table__
    transaction_id = str(uuid.uuid4())
    row = select(
        literal(transaction_id, table.c.id.type),
        literal(investment_id, table.c.investment_id.type),
        literal(TransactionType.SELL, table.c.type.type),
        literal(quantity, table.c.quantity.type),
        literal(price, table.c.price.type),
        literal(date if date is not None else datetime.now(timezone.utc), table.c.date.type),
    ).where(_available_subquery(investment_id) >= quantity)

    result = db.execute(
        insert(table).from_select(["id", "investment_id", "type", "quantity", "price", "date"], row)
    )
    if result.rowcount == 0:
        logger.info(f"Sell of {quantity} on investment {investment_id} lost to a concurrent sell")
        return None
    return db.get(Transaction, transaction_id)
