"""Agencies and their agents.

Agents must belong to an existing agency; an agency cannot be deleted while
agents still reference it.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from itinerary_ace.core.errors import ReferenceInUseError
from itinerary_ace.db.dal import AGENCIES_KEY, AGENTS_KEY, Database
from itinerary_ace.db.seed import default_agencies, default_agents
from itinerary_ace.models.agent import Agency, AgencyIn, AgentProfile, AgentProfileIn

logger = logging.getLogger("itinerary_ace.agencies")


# ------------- Agencies -------------


def list_agencies(db: Database) -> List[Agency]:
    return db.read_collection(AGENCIES_KEY, Agency, seed=default_agencies)


def get_agency(db: Database, agency_id: str) -> Optional[Agency]:
    return next((a for a in list_agencies(db) if a.id == agency_id), None)


def add_agency(db: Database, payload: AgencyIn) -> Agency:
    agencies = list_agencies(db)
    agency = Agency(**payload.model_dump())
    db.write_collection(AGENCIES_KEY, agencies + [agency])
    return agency


def update_agency(db: Database, agency_id: str, payload: AgencyIn) -> Optional[Agency]:
    agencies = list_agencies(db)
    for i, a in enumerate(agencies):
        if a.id == agency_id:
            agencies[i] = Agency(id=agency_id, **payload.model_dump())
            db.write_collection(AGENCIES_KEY, agencies)
            return agencies[i]
    return None


def delete_agency(db: Database, agency_id: str) -> bool:
    agencies = list_agencies(db)
    if not any(a.id == agency_id for a in agencies):
        return False
    members = list_agents(db, agency_id=agency_id)
    if members:
        raise ReferenceInUseError(
            f"agency still has {len(members)} agent(s); reassign or delete them first"
        )
    db.write_collection(AGENCIES_KEY, [a for a in agencies if a.id != agency_id])
    logger.info("deleted agency %s", agency_id)
    return True


# ------------- Agents -------------


def list_agents(db: Database, agency_id: Optional[str] = None) -> List[AgentProfile]:
    agents = db.read_collection(AGENTS_KEY, AgentProfile, seed=default_agents)
    if agency_id is not None:
        agents = [a for a in agents if a.agency_id == agency_id]
    return agents


def get_agent(db: Database, agent_id: str) -> Optional[AgentProfile]:
    return next((a for a in list_agents(db) if a.id == agent_id), None)


def _require_agency(db: Database, agency_id: str) -> None:
    if get_agency(db, agency_id) is None:
        raise ValueError(f"agency '{agency_id}' does not exist")


def add_agent(db: Database, payload: AgentProfileIn) -> AgentProfile:
    _require_agency(db, payload.agency_id)
    agents = list_agents(db)
    if any(a.email.lower() == payload.email.lower() for a in agents):
        raise ValueError(f"an agent with email {payload.email} already exists")
    agent = AgentProfile(**payload.model_dump())
    db.write_collection(AGENTS_KEY, agents + [agent])
    return agent


def update_agent(db: Database, agent_id: str, payload: AgentProfileIn) -> Optional[AgentProfile]:
    agents = list_agents(db)
    for i, a in enumerate(agents):
        if a.id == agent_id:
            _require_agency(db, payload.agency_id)
            email = payload.email.lower()
            if any(o.id != agent_id and o.email.lower() == email for o in agents):
                raise ValueError(f"an agent with email {payload.email} already exists")
            agents[i] = AgentProfile(id=agent_id, **payload.model_dump())
            db.write_collection(AGENTS_KEY, agents)
            return agents[i]
    return None


def delete_agent(db: Database, agent_id: str) -> bool:
    agents = list_agents(db)
    remaining = [a for a in agents if a.id != agent_id]
    if len(remaining) == len(agents):
        return False
    db.write_collection(AGENTS_KEY, remaining)
    return True
