# service.py - create/update/delete of investments and listing for the owner

import logging

from sqlalchemy import delete
from sqlalchemy.orm import Session, joinedload, selectinload

from tracker.auth.models import User
from tracker.errors import NotFoundError
from tracker.investments.models import Investment
from tracker.investments.ownership import get_owned_investment, owned_investments_query
from tracker.investments.schemas import InvestmentCreate, InvestmentUpdate
from tracker.portfolios.service import get_or_create_default_portfolio
from tracker.transactions.models import Transaction

logger = logging.getLogger(__name__)

# Fields an owner may change after creation
EDITABLE_FIELDS = ("ticker", "type", "purchase_price", "current_value")


def list_investments(db: Session, email: str) -> list[Investment]:
    return (
        owned_investments_query(db, email)
        .options(joinedload(Investment.portfolio), selectinload(Investment.transactions))
        .order_by(Investment.name)
        .all()
    )


def create_investment(db: Session, email: str, data: InvestmentCreate) -> Investment:
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise NotFoundError("User not found")

    portfolio = get_or_create_default_portfolio(db, user)
    investment = Investment(
        name=data.name,
        ticker=data.ticker.upper(),
        type=data.type,
        purchase_price=data.purchase_price,
        current_value=data.current_value,
        portfolio_id=portfolio.id,
    )
    db.add(investment)
    db.commit()
    db.refresh(investment)

    logger.info(f"Created investment {investment.id} ({investment.ticker}) in portfolio {portfolio.id}")
    return investment


def update_investment(db: Session, investment_id: str, email: str, data: InvestmentUpdate) -> Investment:
    investment = get_owned_investment(db, investment_id, email)

    changes = data.model_dump(include=set(EDITABLE_FIELDS), exclude_none=True)
    if "ticker" in changes:
        changes["ticker"] = changes["ticker"].upper()
    for field, value in changes.items():
        setattr(investment, field, value)

    db.commit()
    db.refresh(investment)

    logger.info(f"Updated investment {investment.id}: {sorted(changes)}")
    return investment


def delete_investment(db: Session, investment_id: str, email: str) -> None:
    """
    Remove an investment and its whole ledger.

    Both deletes run in the session's transaction and are committed together;
    if anything fails before the commit, neither takes effect.
    """
    investment = get_owned_investment(db, investment_id, email)

    db.execute(delete(Transaction).where(Transaction.investment_id == investment.id))
    db.execute(delete(Investment).where(Investment.id == investment.id))
    db.commit()

    logger.info(f"Deleted investment {investment_id} and its transactions")
