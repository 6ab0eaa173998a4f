from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from itinerary_ace.db.dal import Database
from itinerary_ace.models.quotation import (
    QuotationRequest,
    QuotationRequestIn,
    QuotationStatus,
    QuotationStatusUpdate,
    RevisionNotes,
)
from itinerary_ace.services import quotations as svc
from .deps import get_db

router = APIRouter(prefix="/quotations", tags=["quotations"])


def _found(request: Optional[QuotationRequest]) -> QuotationRequest:
    if request is None:
        raise HTTPException(status_code=404, detail="quotation request not found")
    return request


@router.get("/", response_model=List[QuotationRequest], summary="List quotation requests")
async def list_quotations(
    agent_id: Optional[str] = Query(None, description="Only requests of this agent"),
    status_filter: Optional[QuotationStatus] = Query(None, alias="status"),
    db: Database = Depends(get_db),
):
    return svc.list_quotations(db, agent_id=agent_id, status=status_filter)


@router.get("/{quotation_id}", response_model=QuotationRequest, summary="Get quotation request")
async def get_quotation(quotation_id: str, db: Database = Depends(get_db)):
    return _found(svc.get_quotation(db, quotation_id))


@router.post(
    "/",
    response_model=QuotationRequest,
    status_code=status.HTTP_201_CREATED,
    summary="Submit quotation request",
)
async def submit_quotation(payload: QuotationRequestIn, db: Database = Depends(get_db)):
    try:
        return svc.submit_quotation(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{quotation_id}", response_model=QuotationRequest, summary="Update quotation request")
async def update_quotation(
    quotation_id: str, payload: QuotationRequestIn, db: Database = Depends(get_db)
):
    try:
        return _found(svc.update_quotation(db, quotation_id, payload))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete(
    "/{quotation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete quotation request",
)
async def delete_quotation(quotation_id: str, db: Database = Depends(get_db)):
    if not svc.delete_quotation(db, quotation_id):
        raise HTTPException(status_code=404, detail="quotation request not found")


@router.put(
    "/{quotation_id}/status",
    response_model=QuotationRequest,
    summary="Set quotation status",
)
async def set_status(
    quotation_id: str, payload: QuotationStatusUpdate, db: Database = Depends(get_db)
):
    return _found(svc.set_status(db, quotation_id, payload.status))


@router.post(
    "/{quotation_id}/send",
    response_model=QuotationRequest,
    summary="Send (or re-send) the linked itinerary as a quote",
)
async def send_quote(quotation_id: str, db: Database = Depends(get_db)):
    try:
        return _found(svc.send_quote(db, quotation_id))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.post(
    "/{quotation_id}/revision",
    response_model=QuotationRequest,
    summary="Agent requests a revision of the quote",
)
async def request_revision(
    quotation_id: str,
    payload: RevisionNotes = Body(default=RevisionNotes()),
    db: Database = Depends(get_db),
):
    return _found(svc.request_revision(db, quotation_id, payload.notes))
