# jwt.py - handles creation and decoding of JWT access tokens

from datetime import datetime, timedelta, timezone

import jwt
import pydantic
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tracker.auth.schemas import Identity
from tracker.config import settings
from tracker.errors import UnauthorizedError

# auto_error=False so a missing header goes through UnauthorizedError (401)
# rather than HTTPBearer's own response
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(identity: Identity) -> str:
    # sub (subject) = user UUID; email and name ride along as the session identity
    payload = {
        "sub": identity.id,
        "email": identity.email,
        "name": identity.name,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Identity:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    # Claims are checked against the schema instead of being trusted as-is
    try:
        return Identity(id=payload.get("sub"), email=payload.get("email"), name=payload.get("name"))
    except pydantic.ValidationError:
        raise UnauthorizedError("Invalid token")


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    # FastAPI dependency: add to any protected route with Depends(get_current_identity)
    if credentials is None:
        raise UnauthorizedError("Unauthorized")
    return decode_access_token(credentials.credentials)
