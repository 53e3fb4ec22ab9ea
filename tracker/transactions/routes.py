from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tracker.auth.jwt import get_current_identity
from tracker.auth.schemas import Identity
from tracker.database import get_db
from tracker.transactions import service
from tracker.transactions.schemas import TransactionCreate, TransactionResponse, TransactionWithInvestment

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionWithInvestment])
def list_transactions(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return service.list_transactions(db, identity.email)


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    body: TransactionCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return service.create_transaction(db, identity.email, body)
