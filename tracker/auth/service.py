# service.py - registration and credential checks

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tracker.auth.models import User
from tracker.auth.schemas import Identity
from tracker.errors import ConflictError
from tracker.portfolios.service import REGISTRATION_PORTFOLIO_NAME, create_portfolio

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def register(db: Session, name: str, email: str, password: str) -> User:
    """
    Create a user together with their first portfolio.

    Both rows go out in a single commit: if the portfolio cannot be created the
    user is not created either.
    """
    email = normalize_email(email)
    if get_user_by_email(db, email):
        raise ConflictError("User with this email already exists")

    user = User(email=email, name=name, hashed_password=User.hash_password(password))
    try:
        db.add(user)
        db.flush()  # assigns user.id for the portfolio's foreign key
        create_portfolio(db, user, REGISTRATION_PORTFOLIO_NAME)
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise ConflictError("User with this email already exists")

    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def authenticate(db: Session, email: str | None, password: str | None) -> Identity | None:
    """
    Return the session identity for valid credentials, otherwise None.

    Unknown email and wrong password are indistinguishable to the caller, in
    the return value and in time spent hashing.
    """
    if not email or not password:
        return None

    user = get_user_by_email(db, email)
    if user is None:
        User.dummy_verify()
        return None
    if not user.verify_password(password):
        return None

    return Identity(id=user.id, email=user.email, name=user.name)
