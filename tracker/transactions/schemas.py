from datetime import datetime, timezone

from pydantic import Field, field_validator

from tracker.schemas import CamelModel
from tracker.transactions.models import TransactionType


class TransactionCreate(CamelModel):
    investment_id: str = Field(min_length=1)
    type: TransactionType
    quantity: int = Field(gt=0)
    price: float = Field(ge=0, allow_inf_nan=False)
    # defaults to the time of creation when omitted
    date: datetime | None = None

    @field_validator("date")
    @classmethod
    def date_in_utc(cls, value: datetime | None) -> datetime | None:
        # naive dates are taken as UTC
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class TransactionResponse(CamelModel):
    id: str
    investment_id: str
    type: TransactionType
    quantity: int
    price: float
    date: datetime


class InvestmentRef(CamelModel):
    name: str
    ticker: str


class TransactionWithInvestment(TransactionResponse):
    investment: InvestmentRef
