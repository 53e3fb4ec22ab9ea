from datetime import timezone

from sqlalchemy import DateTime, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.types import TypeDecorator

from tracker.config import settings

# check_same_thread only applies to SQLite; FastAPI runs sync routes in a threadpool
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# pool_pre_ping tests pooled connections before use so dropped ones are replaced
engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)

# one session per request; nothing is written until the caller commits
SessionLocal = sessionmaker(bind=engine)


class Base(DeclarativeBase):
    pass


class UTCDateTime(TypeDecorator):
    """
    Timestamp column stored as naive UTC and read back as aware UTC.

    SQLite keeps no zone information, so offsets are resolved before the value
    is written. Naive input is taken to already be UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def get_db():
    # Uncommitted work is discarded by close(), so a request that fails halfway
    # through a multi-step write leaves the database untouched.
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
