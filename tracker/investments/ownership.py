# ownership.py - binds investments to the identity that owns them
#
# Lookups filter on the resource id AND the owner's email in one query, so a
# missing investment and somebody else's investment are the same miss.

from sqlalchemy.orm import Session

from tracker.auth.models import User
from tracker.errors import NotFoundError
from tracker.investments.models import Investment
from tracker.portfolios.models import Portfolio

INVESTMENT_NOT_FOUND = "Investment not found"


def owned_investments_query(db: Session, email: str):
    """All investments whose portfolio belongs to the user with ``email``."""
    return db.query(Investment).join(Investment.portfolio).join(Portfolio.user).filter(User.email == email)


def find_owned_investment(db: Session, investment_id: str, email: str, for_update: bool = False) -> Investment | None:
    query = owned_investments_query(db, email).filter(Investment.id == investment_id)
    if for_update:
        # Row lock on backends that support it; SQLite ignores it
        query = query.with_for_update(of=Investment)
    return query.first()


def verify_ownership(db: Session, investment_id: str, email: str) -> bool:
    return find_owned_investment(db, investment_id, email) is not None


def get_owned_investment(db: Session, investment_id: str, email: str, for_update: bool = False) -> Investment:
    investment = find_owned_investment(db, investment_id, email, for_update=for_update)
    if investment is None:
        raise NotFoundError(INVESTMENT_NOT_FOUND)
    return investment
