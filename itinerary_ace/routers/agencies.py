from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from itinerary_ace.core.errors import ReferenceInUseError
from itinerary_ace.db.dal import Database
from itinerary_ace.models.agent import Agency, AgencyIn, AgentProfile
from itinerary_ace.services import agencies as svc
from .deps import get_db

router = APIRouter(prefix="/agencies", tags=["agencies"])


@router.get("/", response_model=List[Agency], summary="List agencies")
async def list_agencies(db: Database = Depends(get_db)):
    return svc.list_agencies(db)


@router.get("/{agency_id}", response_model=Agency, summary="Get agency")
async def get_agency(agency_id: str, db: Database = Depends(get_db)):
    agency = svc.get_agency(db, agency_id)
    if agency is None:
        raise HTTPException(status_code=404, detail="agency not found")
    return agency


@router.get("/{agency_id}/agents", response_model=List[AgentProfile], summary="List agents of an agency")
async def list_agency_agents(agency_id: str, db: Database = Depends(get_db)):
    if svc.get_agency(db, agency_id) is None:
        raise HTTPException(status_code=404, detail="agency not found")
    return svc.list_agents(db, agency_id=agency_id)


@router.post(
    "/",
    response_model=Agency,
    status_code=status.HTTP_201_CREATED,
    summary="Create agency",
)
async def create_agency(payload: AgencyIn, db: Database = Depends(get_db)):
    return svc.add_agency(db, payload)


@router.put("/{agency_id}", response_model=Agency, summary="Update agency")
async def update_agency(agency_id: str, payload: AgencyIn, db: Database = Depends(get_db)):
    agency = svc.update_agency(db, agency_id, payload)
    if agency is None:
        raise HTTPException(status_code=404, detail="agency not found")
    return agency


@router.delete(
    "/{agency_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete agency",
)
async def delete_agency(agency_id: str, db: Database = Depends(get_db)):
    try:
        deleted = svc.delete_agency(db, agency_id)
    except ReferenceInUseError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=404, detail="agency not found")
