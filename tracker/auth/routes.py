import logging

import pydantic
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tracker.auth import service
from tracker.auth.jwt import create_access_token, get_current_identity
from tracker.auth.schemas import Identity, LoginRequest, RegisterRequest, TokenResponse, UserResponse
from tracker.config import settings
from tracker.database import get_db
from tracker.errors import UnauthorizedError
from tracker.limiter import limiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# --- Helpers ---

async def login_credentials(request: Request) -> LoginRequest:
    # No body, bad JSON, or wrongly typed fields all count as absent
    # credentials, so they fail the same way as a wrong password
    try:
        payload = await request.json()
    except ValueError:
        return LoginRequest()
    if not isinstance(payload, dict):
        return LoginRequest()
    try:
        return LoginRequest.model_validate(payload)
    except pydantic.ValidationError:
        return LoginRequest()


# --- Routes ---

# slowapi needs the raw Request in the signature to key the limit

@router.post("/register", response_model=UserResponse, status_code=201)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(request: Request, body: RegisterRequest, db: Session = Depends(get_db)):
    return service.register(db, name=body.name, email=body.email, password=body.password)


@router.post(
    "/auth",
    response_model=TokenResponse,
    openapi_extra={
        "requestBody": {"content": {"application/json": {"schema": LoginRequest.model_json_schema()}}}
    },
)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(
    request: Request,
    credentials: LoginRequest = Depends(login_credentials),
    db: Session = Depends(get_db),
):
    identity = service.authenticate(db, credentials.email, credentials.password)
    if identity is None:
        logger.info("Rejected login attempt")
        raise UnauthorizedError("Invalid email or password")

    return TokenResponse(access_token=create_access_token(identity))


@router.get("/auth/me", response_model=Identity)
def me(identity: Identity = Depends(get_current_identity)):
    return identity
