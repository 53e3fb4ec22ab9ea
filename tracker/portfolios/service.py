from sqlalchemy.orm import Session

from tracker.portfolios.models import Portfolio

REGISTRATION_PORTFOLIO_NAME = "My First Portfolio"
DEFAULT_PORTFOLIO_NAME = "My Portfolio"


def create_portfolio(db: Session, user, name: str) -> Portfolio:
    """Stage a new portfolio for ``user``; the caller owns the commit."""
    portfolio = Portfolio(user_id=user.id, name=name)
    db.add(portfolio)
    db.flush()
    return portfolio


def get_or_create_default_portfolio(db: Session, user) -> Portfolio:
    # The user's oldest portfolio is their default one
    portfolio = (
        db.query(Portfolio)
        .filter(Portfolio.user_id == user.id)
        .order_by(Portfolio.created_at, Portfolio.id)
        .first()
    )
    if portfolio is None:
        portfolio = create_portfolio(db, user, DEFAULT_PORTFOLIO_NAME)
    return portfolio
