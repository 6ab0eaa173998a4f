from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from itinerary_ace.db.dal import Database
from itinerary_ace.models.agent import AgentProfile, AgentProfileIn
from itinerary_ace.services import agencies as svc
from .deps import get_db

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("/", response_model=List[AgentProfile], summary="List agents")
async def list_agents(
    agency_id: Optional[str] = Query(None), db: Database = Depends(get_db)
):
    return svc.list_agents(db, agency_id=agency_id)


@router.get("/{agent_id}", response_model=AgentProfile, summary="Get agent profile")
async def get_agent(agent_id: str, db: Database = Depends(get_db)):
    agent = svc.get_agent(db, agent_id)
    if agent is None:
        raise HTTPException(status_code=404, detail="agent not found")
    return agent


@router.post(
    "/",
    response_model=AgentProfile,
    status_code=status.HTTP_201_CREATED,
    summary="Create agent profile",
)
async def create_agent(payload: AgentProfileIn, db: Database = Depends(get_db)):
    try:
        return svc.add_agent(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{agent_id}", response_model=AgentProfile, summary="Update agent profile")
async def update_agent(agent_id: str, payload: AgentProfileIn, db: Database = Depends(get_db)):
    try:
        agent = svc.update_agent(db, agent_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if agent is None:
        raise HTTPException(status_code=404, detail="agent not found")
    return agent


@router.delete(
    "/{agent_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete agent profile",
)
async def delete_agent(agent_id: str, db: Database = Depends(get_db)):
    if not svc.delete_agent(db, agent_id):
        raise HTTPException(status_code=404, detail="agent not found")
