from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tracker.auth.jwt import get_current_identity
from tracker.auth.schemas import Identity
from tracker.database import get_db
from tracker.investments import reconciliation, service
from tracker.investments.schemas import (
    InvestmentCreate,
    InvestmentResponse,
    InvestmentUpdate,
    InvestmentWithTransactions,
    QuantityResponse,
)

router = APIRouter(prefix="/investments", tags=["investments"])


@router.get("", response_model=list[InvestmentWithTransactions])
def list_investments(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return service.list_investments(db, identity.email)


@router.post("", response_model=InvestmentResponse, status_code=201)
def create_investment(
    body: InvestmentCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return service.create_investment(db, identity.email, body)


@router.put("/{investment_id}", response_model=InvestmentResponse)
def update_investment(
    investment_id: str,
    body: InvestmentUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return service.update_investment(db, investment_id, identity.email, body)


@router.delete("/{investment_id}", status_code=204)
def delete_investment(
    investment_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    service.delete_investment(db, investment_id, identity.email)


@router.get("/{investment_id}/quantity", response_model=QuantityResponse)
def get_quantity(
    investment_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return reconciliation.get_available_quantity(db, investment_id, identity.email)
