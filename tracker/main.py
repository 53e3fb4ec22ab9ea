from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException

from tracker.config import settings
from tracker.database import Base, engine
from tracker.errors import (
    TrackerError,
    http_exception_handler,
    request_validation_handler,
    tracker_error_handler,
    unhandled_exception_handler,
)
from tracker.limiter import limiter
from tracker.logger import configure_logging
from tracker.auth.routes import router as auth_router
from tracker.investments.routes import router as investments_router
from tracker.transactions.routes import router as transactions_router

# Import models so Base.metadata knows about all tables before create_all() runs
import tracker.auth.models  # noqa: F401
import tracker.portfolios.models  # noqa: F401
import tracker.investments.models  # noqa: F401
import tracker.transactions.models  # noqa: F401

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables on startup; no-op for tables that already exist
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Investment Tracker", lifespan=lifespan)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Every failure leaves as {"error": "<message>"}
app.add_exception_handler(TrackerError, tracker_error_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # restrict to frontend URL in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(investments_router)
app.include_router(transactions_router)


@app.get("/health")
def health():
    return {"status": "ok", "service": "investment-tracker"}


def run():
    """Entry point for the `investment-tracker` console script."""
    uvicorn.run("tracker.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
