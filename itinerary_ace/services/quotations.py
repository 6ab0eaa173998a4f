"""Quotation requests submitted by agents and their status workflow.

Status moves driven by actions (any status may also be set directly):
    link itinerary    New Request Submitted -> Quoted: Revision In Progress
    send quote        -> Quoted: Waiting for TA Feedback (first send)
                      -> Quoted: Re-quoted (later sends); version + 1
    request revision  -> Quoted: Revision Requested (agent notes stored)
"""

from __future__ import annotations

import logging
from typing import List, Optional

from itinerary_ace.db.dal import QUOTATION_REQUESTS_KEY, Database
from itinerary_ace.db.seed import default_quotations
from itinerary_ace.models.common import utc_now
from itinerary_ace.models.quotation import (
    QuotationRequest,
    QuotationRequestIn,
    make_quotation_id,
)
from .agencies import get_agency, get_agent

logger = logging.getLogger("itinerary_ace.quotations")

DEFAULT_INITIALS = "AGY"


def list_quotations(
    db: Database, agent_id: Optional[str] = None, status: Optional[str] = None
) -> List[QuotationRequest]:
    items = db.read_collection(QUOTATION_REQUESTS_KEY, QuotationRequest, seed=default_quotations)
    if agent_id is not None:
        items = [q for q in items if q.agent_id == agent_id]
    if status is not None:
        items = [q for q in items if q.status == status]
    return sorted(items, key=lambda q: q.request_date, reverse=True)


def get_quotation(db: Database, quotation_id: str) -> Optional[QuotationRequest]:
    return next((q for q in list_quotations(db) if q.id == quotation_id), None)


def _save(db: Database, items: List[QuotationRequest]) -> None:
    db.write_collection(QUOTATION_REQUESTS_KEY, items)


def agency_initials_for(db: Database, agent_id: Optional[str]) -> str:
    if not agent_id:
        return DEFAULT_INITIALS
    agent = get_agent(db, agent_id)
    agency = get_agency(db, agent.agency_id) if agent else None
    return agency.initials() if agency else DEFAULT_INITIALS


def submit_quotation(db: Database, payload: QuotationRequestIn) -> QuotationRequest:
    if payload.agent_id and get_agent(db, payload.agent_id) is None:
        raise ValueError(f"agent '{payload.agent_id}' does not exist")
    items = list_quotations(db)
    taken = {q.id for q in items}
    initials = agency_initials_for(db, payload.agent_id)
    new_id = make_quotation_id(initials)
    while new_id in taken:
        new_id = make_quotation_id(initials)
    request = QuotationRequest(id=new_id, **payload.model_dump())
    _save(db, items + [request])
    logger.info("quotation request %s submitted", new_id, extra={"quotation_id": new_id})
    return request


def _mutate(db: Database, quotation_id: str, **changes) -> Optional[QuotationRequest]:
    items = list_quotations(db)
    for i, q in enumerate(items):
        if q.id == quotation_id:
            changes["updated_at"] = utc_now()
            items[i] = q.model_copy(update=changes)
            _save(db, items)
            return items[i]
    return None


def update_quotation(
    db: Database, quotation_id: str, payload: QuotationRequestIn
) -> Optional[QuotationRequest]:
    if payload.agent_id and get_agent(db, payload.agent_id) is None:
        raise ValueError(f"agent '{payload.agent_id}' does not exist")
    # model_copy skips validation; pass the parsed sub-models through as-is
    fields = {k: getattr(payload, k) for k in QuotationRequestIn.model_fields}
    return _mutate(db, quotation_id, **fields)


def delete_quotation(db: Database, quotation_id: str) -> bool:
    items = list_quotations(db)
    remaining = [q for q in items if q.id != quotation_id]
    if len(remaining) == len(items):
        return False
    _save(db, remaining)
    return True


def set_status(db: Database, quotation_id: str, status: str) -> Optional[QuotationRequest]:
    return _mutate(db, quotation_id, status=status)


def link_itinerary(db: Database, quotation_id: str, itinerary_id: str) -> Optional[QuotationRequest]:
    current = get_quotation(db, quotation_id)
    if current is None:
        return None
    if current.linked_itinerary_id == itinerary_id and current.status != "New Request Submitted":
        return current
    changes = {"linked_itinerary_id": itinerary_id}
    if current.status == "New Request Submitted":
        changes["status"] = "Quoted: Revision In Progress"
    return _mutate(db, quotation_id, **changes)


def send_quote(db: Database, quotation_id: str) -> Optional[QuotationRequest]:
    current = get_quotation(db, quotation_id)
    if current is None:
        return None
    if not current.linked_itinerary_id:
        raise ValueError("no itinerary is linked to this quotation request yet")
    status = "Quoted: Waiting for TA Feedback" if current.version == 0 else "Quoted: Re-quoted"
    return _mutate(db, quotation_id, status=status, version=current.version + 1)


def request_revision(
    db: Database, quotation_id: str, notes: Optional[str]
) -> Optional[QuotationRequest]:
    return _mutate(
        db,
        quotation_id,
        status="Quoted: Revision Requested",
        agent_revision_notes=notes,
    )
