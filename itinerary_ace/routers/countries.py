from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from itinerary_ace.core.errors import ReferenceInUseError
from itinerary_ace.db.dal import Database
from itinerary_ace.models.geo import CountryIn, CountryItem
from itinerary_ace.services import countries as svc
from .deps import get_db

router = APIRouter(prefix="/countries", tags=["countries"])


@router.get("/", response_model=List[CountryItem], summary="List countries")
async def list_countries(db: Database = Depends(get_db)):
    return svc.list_countries(db)


@router.get("/by-name", response_model=CountryItem, summary="Find a country by name")
async def find_country(name: str = Query(..., min_length=1), db: Database = Depends(get_db)):
    country = svc.get_country_by_name(db, name)
    if country is None:
        raise HTTPException(status_code=404, detail="country not found")
    return country


@router.get("/{country_id}", response_model=CountryItem, summary="Get country")
async def get_country(country_id: str, db: Database = Depends(get_db)):
    country = svc.get_country(db, country_id)
    if country is None:
        raise HTTPException(status_code=404, detail="country not found")
    return country


@router.post(
    "/",
    response_model=CountryItem,
    status_code=status.HTTP_201_CREATED,
    summary="Create country",
)
async def create_country(payload: CountryIn, db: Database = Depends(get_db)):
    try:
        return svc.add_country(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{country_id}", response_model=CountryItem, summary="Update country")
async def update_country(country_id: str, payload: CountryIn, db: Database = Depends(get_db)):
    try:
        country = svc.update_country(db, country_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if country is None:
        raise HTTPException(status_code=404, detail="country not found")
    return country


@router.delete(
    "/{country_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete country",
)
async def delete_country(country_id: str, db: Database = Depends(get_db)):
    try:
        deleted = svc.delete_country(db, country_id)
    except ReferenceInUseError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=404, detail="country not found")
