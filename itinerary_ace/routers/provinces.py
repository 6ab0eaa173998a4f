from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from itinerary_ace.db.dal import Database
from itinerary_ace.models.geo import ProvinceIn, ProvinceItem
from itinerary_ace.services import provinces as svc
from .deps import get_db

router = APIRouter(prefix="/provinces", tags=["provinces"])


@router.get("/", response_model=List[ProvinceItem], summary="List provinces")
async def list_provinces(
    country_id: Optional[str] = Query(None, description="Only provinces of this country"),
    db: Database = Depends(get_db),
):
    return svc.list_provinces(db, country_id=country_id)


@router.get("/{province_id}", response_model=ProvinceItem, summary="Get province")
async def get_province(province_id: str, db: Database = Depends(get_db)):
    province = svc.get_province(db, province_id)
    if province is None:
        raise HTTPException(status_code=404, detail="province not found")
    return province


@router.post(
    "/",
    response_model=ProvinceItem,
    status_code=status.HTTP_201_CREATED,
    summary="Create province",
)
async def create_province(payload: ProvinceIn, db: Database = Depends(get_db)):
    try:
        return svc.add_province(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{province_id}", response_model=ProvinceItem, summary="Update province")
async def update_province(province_id: str, payload: ProvinceIn, db: Database = Depends(get_db)):
    try:
        province = svc.update_province(db, province_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if province is None:
        raise HTTPException(status_code=404, detail="province not found")
    return province


@router.delete(
    "/{province_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete province",
)
async def delete_province(province_id: str, db: Database = Depends(get_db)):
    if not svc.delete_province(db, province_id):
        raise HTTPException(status_code=404, detail="province not found")
