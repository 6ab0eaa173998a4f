from typing import Annotated, List, Optional, Union

from fastapi import APIRouter, Body, Depends, HTTPException, status

from itinerary_ace.core.config import Settings
from itinerary_ace.core.errors import RateUnavailableError
from itinerary_ace.db.dal import Database
from itinerary_ace.models.itinerary import (
    ActivityItem,
    CostSummary,
    HotelItem,
    ItineraryCreate,
    ItineraryMetadata,
    ItineraryUpdate,
    MealItem,
    MiscItem,
    PaxUpdate,
    TransferItem,
    TripData,
    TripSettingsUpdate,
)
from itinerary_ace.services import itineraries as svc
from .deps import get_app_settings, get_db

router = APIRouter(prefix="/itineraries", tags=["itineraries"])

ItemPayload = Annotated[
    Union[TransferItem, ActivityItem, HotelItem, MealItem, MiscItem],
    Body(discriminator="type"),
]


def _found(trip: Optional[TripData]) -> TripData:
    if trip is None:
        raise HTTPException(status_code=404, detail="itinerary not found")
    return trip


@router.get("/", response_model=List[ItineraryMetadata], summary="List saved itineraries")
async def list_itineraries(db: Database = Depends(get_db)):
    return svc.list_itineraries(db)


@router.get("/last-active", response_model=TripData, summary="Most recently saved itinerary")
async def last_active(db: Database = Depends(get_db)):
    last_id = svc.get_last_active_id(db)
    if last_id is None:
        raise HTTPException(status_code=404, detail="no active itinerary")
    return _found(svc.get_itinerary(db, last_id))


@router.post(
    "/",
    response_model=TripData,
    status_code=status.HTTP_201_CREATED,
    summary="Create itinerary (blank or from a quotation request)",
)
async def create_itinerary(
    payload: ItineraryCreate = Body(default=ItineraryCreate()),
    db: Database = Depends(get_db),
):
    try:
        return svc.create_itinerary(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/{itinerary_id}", response_model=TripData, summary="Get itinerary")
async def get_itinerary(itinerary_id: str, db: Database = Depends(get_db)):
    return _found(svc.get_itinerary(db, itinerary_id))


@router.patch("/{itinerary_id}", response_model=TripData, summary="Update itinerary metadata")
async def update_itinerary(
    itinerary_id: str, payload: ItineraryUpdate, db: Database = Depends(get_db)
):
    return _found(svc.update_itinerary(db, itinerary_id, payload))


@router.put("/{itinerary_id}", response_model=TripData, summary="Save a full itinerary document")
async def save_itinerary(itinerary_id: str, payload: TripData, db: Database = Depends(get_db)):
    if payload.id != itinerary_id:
        raise HTTPException(status_code=400, detail="itinerary id in body does not match path")
    try:
        return svc.replace_itinerary(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete(
    "/{itinerary_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete itinerary",
)
async def delete_itinerary(itinerary_id: str, db: Database = Depends(get_db)):
    if not svc.delete_itinerary(db, itinerary_id):
        raise HTTPException(status_code=404, detail="itinerary not found")


@router.patch("/{itinerary_id}/settings", response_model=TripData, summary="Update trip settings")
async def update_settings(
    itinerary_id: str, payload: TripSettingsUpdate, db: Database = Depends(get_db)
):
    return _found(svc.update_settings(db, itinerary_id, payload))


@router.patch("/{itinerary_id}/pax", response_model=TripData, summary="Update travelers and billing currency")
async def update_pax(itinerary_id: str, payload: PaxUpdate, db: Database = Depends(get_db)):
    return _found(svc.update_pax(db, itinerary_id, payload))


@router.post(
    "/{itinerary_id}/items",
    response_model=TripData,
    status_code=status.HTTP_201_CREATED,
    summary="Add a day item",
)
async def add_item(itinerary_id: str, item: ItemPayload, db: Database = Depends(get_db)):
    try:
        return _found(svc.add_item(db, itinerary_id, item))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{itinerary_id}/items/{item_id}", response_model=TripData, summary="Replace a day item")
async def replace_item(
    itinerary_id: str, item_id: str, item: ItemPayload, db: Database = Depends(get_db)
):
    try:
        trip = svc.replace_item(db, itinerary_id, item_id, item)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if trip is None:
        raise HTTPException(status_code=404, detail="itinerary or item not found")
    return trip


@router.delete(
    "/{itinerary_id}/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a day item",
)
async def remove_item(itinerary_id: str, item_id: str, db: Database = Depends(get_db)):
    removed = svc.remove_item(db, itinerary_id, item_id)
    if removed is None:
        raise HTTPException(status_code=404, detail="itinerary not found")
    if not removed:
        raise HTTPException(status_code=404, detail="item not found")


@router.get("/{itinerary_id}/costs", response_model=CostSummary, summary="Calculate itinerary costs")
async def get_costs(
    itinerary_id: str,
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_db),
):
    try:
        summary = svc.calculate_costs(db, itinerary_id, settings.reference_currency)
    except RateUnavailableError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    if summary is None:
        raise HTTPException(status_code=404, detail="itinerary not found")
    return summary
