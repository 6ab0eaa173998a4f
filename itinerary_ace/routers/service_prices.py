from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from itinerary_ace.db.dal import Database
from itinerary_ace.models.pricing import ServiceCategory, ServicePriceIn, ServicePriceItem
from itinerary_ace.services import service_prices as svc
from .deps import get_db

router = APIRouter(prefix="/service-prices", tags=["service-prices"])


@router.get("/", response_model=List[ServicePriceItem], summary="List master service prices")
async def list_service_prices(
    category: Optional[ServiceCategory] = Query(None),
    province: Optional[str] = Query(None, description="Province name; province-less services always match"),
    currency: Optional[str] = Query(None, min_length=3, max_length=3),
    db: Database = Depends(get_db),
):
    return svc.list_service_prices(db, category=category, province=province, currency=currency)


@router.get("/{service_id}", response_model=ServicePriceItem, summary="Get service price")
async def get_service_price(service_id: str, db: Database = Depends(get_db)):
    item = svc.get_service_price(db, service_id)
    if item is None:
        raise HTTPException(status_code=404, detail="service price not found")
    return item


@router.post(
    "/",
    response_model=ServicePriceItem,
    status_code=status.HTTP_201_CREATED,
    summary="Create service price",
)
async def create_service_price(payload: ServicePriceIn, db: Database = Depends(get_db)):
    try:
        return svc.add_service_price(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{service_id}", response_model=ServicePriceItem, summary="Replace service price")
async def update_service_price(
    service_id: str, payload: ServicePriceIn, db: Database = Depends(get_db)
):
    try:
        item = svc.update_service_price(db, service_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if item is None:
        raise HTTPException(status_code=404, detail="service price not found")
    return item


@router.delete(
    "/{service_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete service price",
)
async def delete_service_price(service_id: str, db: Database = Depends(get_db)):
    if not svc.delete_service_price(db, service_id):
        raise HTTPException(status_code=404, detail="service price not found")
