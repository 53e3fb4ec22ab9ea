from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints

from tracker.investments.models import InvestmentType
from tracker.portfolios.schemas import PortfolioSummary
from tracker.schemas import CamelModel
from tracker.transactions.schemas import TransactionResponse

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Ticker = Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True, min_length=1, max_length=20)]


class InvestmentCreate(CamelModel):
    name: NonEmptyStr
    ticker: Ticker
    type: InvestmentType
    purchase_price: float = Field(ge=0, allow_inf_nan=False)
    current_value: float = Field(ge=0, allow_inf_nan=False)


class InvestmentUpdate(CamelModel):
    # name is fixed at creation; a "name" key in the body is ignored
    ticker: Ticker | None = None
    type: InvestmentType | None = None
    purchase_price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    current_value: float | None = Field(default=None, ge=0, allow_inf_nan=False)


class InvestmentResponse(CamelModel):
    id: str
    name: str
    ticker: str
    type: InvestmentType
    purchase_price: float
    current_value: float
    portfolio_id: str
    created_at: datetime | None = None
    portfolio: PortfolioSummary


class InvestmentWithTransactions(InvestmentResponse):
    transactions: list[TransactionResponse] = []


class QuantityResponse(CamelModel):
    available: int
    total_bought: int
    total_sold: int
