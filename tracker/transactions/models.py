import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker.database import Base, UTCDateTime


class TransactionType(str, enum.Enum):
    BUY = "BUY"
    SELL = "SELL"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(Base):
    """One entry of an investment's append-only ledger."""

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    investment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("investments.id"), nullable=False, index=True
    )
    type: Mapped[TransactionType] = mapped_column(Enum(TransactionType, name="transaction_type"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    # Python-side default keeps sub-second precision, which orders the ledger;
    # stored as UTC so dates sent with different offsets still sort correctly
    date: Mapped[datetime] = mapped_column(UTCDateTime, default=_utcnow, nullable=False)

    investment: Mapped["Investment"] = relationship("Investment", back_populates="transactions")  # noqa: F821
