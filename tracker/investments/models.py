import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Float, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker.database import Base


class InvestmentType(str, enum.Enum):
    STOCK = "Stock"
    BOND = "Bond"
    MUTUAL_FUND = "Mutual Fund"


class Investment(Base):
    __tablename__ = "investments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    portfolio_id: Mapped[str] = mapped_column(String(36), ForeignKey("portfolios.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    ticker: Mapped[str] = mapped_column(String(20), nullable=False)
    # store the display values ("Mutual Fund"), not the member names
    type: Mapped[InvestmentType] = mapped_column(
        Enum(InvestmentType, name="investment_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # Floats are kept unrounded; rounding to cents is a display concern
    purchase_price: Mapped[float] = mapped_column(Float, nullable=False)
    current_value: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    portfolio: Mapped["Portfolio"] = relationship("Portfolio", back_populates="investments")  # noqa: F821

    # Newest first. Deleting the rows is done explicitly in the investment
    # service so it happens in the same unit of work as the parent delete.
    transactions: Mapped[list["Transaction"]] = relationship(  # noqa: F821
        "Transaction",
        back_populates="investment",
        order_by="desc(Transaction.date)",
        passive_deletes=True,
    )
