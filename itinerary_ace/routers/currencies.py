from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from itinerary_ace.db.dal import Database
from itinerary_ace.models.rates import CustomCurrencyIn, ManagedCurrency
from itinerary_ace.services import currencies as svc
from .deps import get_db

router = APIRouter(prefix="/currencies", tags=["currencies"])


@router.get("/", response_model=List[ManagedCurrency], summary="List system and custom currencies")
async def list_currencies(db: Database = Depends(get_db)):
    return svc.list_managed_currencies(db)


@router.post(
    "/",
    response_model=ManagedCurrency,
    status_code=status.HTTP_201_CREATED,
    summary="Add a custom currency",
)
async def add_currency(payload: CustomCurrencyIn, db: Database = Depends(get_db)):
    try:
        return svc.add_custom_currency(db, payload.code)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete(
    "/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a custom currency",
)
async def delete_currency(code: str, db: Database = Depends(get_db)):
    if not svc.delete_custom_currency(db, code):
        raise HTTPException(status_code=404, detail=f"custom currency {code.upper()} not found")
