"""Itinerary documents: one storage key per trip plus an index of metadata.

Keys:
    itineraryAce_index          JSON array of ItineraryMetadata
    itineraryAce_data_<id>      full TripData document
    lastActiveItineraryId       id of the most recently saved trip
"""

from __future__ import annotations

import logging
import secrets
import time
from datetime import date, datetime
from typing import Dict, List, Optional

from itinerary_ace.db.dal import (
    ITINERARY_DATA_PREFIX,
    ITINERARY_INDEX_KEY,
    LAST_ACTIVE_ITINERARY_KEY,
    Database,
)
from itinerary_ace.models.common import utc_now
from itinerary_ace.models.itinerary import (
    ActivityItem,
    CostSummary,
    DayItinerary,
    HotelItem,
    ItineraryCreate,
    ItineraryMetadata,
    ItineraryUpdate,
    PaxDetails,
    PaxUpdate,
    Traveler,
    TripData,
    TripSettings,
    TripSettingsUpdate,
)
from itinerary_ace.models.quotation import QuotationRequest
from .agencies import get_agency, get_agent
from .calculation import calculate_all_costs
from .quotations import get_quotation, link_itinerary
from .rates.rate_store import build_converter
from .service_prices import list_service_prices

logger = logging.getLogger("itinerary_ace.itineraries")

DEFAULT_NUM_DAYS = 3
DEFAULT_ADULTS = 2
DEFAULT_BILLING_CURRENCY = "THB"


def make_itinerary_id(now: Optional[datetime] = None) -> str:
    """`ITN-YYYYMMDD-NNNNNNN`: 5 digits of the ms clock and 2 random digits."""
    now = now or utc_now()
    millis = str(int(time.time() * 1000))[-5:]
    return f"ITN-{now:%Y%m%d}-{millis}{secrets.randbelow(100):02d}"


def build_travelers(adults: int, children: int) -> List[Traveler]:
    travelers = [Traveler(id=f"A{i}", label=f"Adult {i}", type="adult") for i in range(1, adults + 1)]
    travelers += [
        Traveler(id=f"C{i}", label=f"Child {i}", type="child") for i in range(1, children + 1)
    ]
    return travelers


def _data_key(itinerary_id: str) -> str:
    return f"{ITINERARY_DATA_PREFIX}{itinerary_id}"


# ------------------------------------------------------------------
# Reading


def list_itineraries(db: Database) -> List[ItineraryMetadata]:
    index = db.read_collection(ITINERARY_INDEX_KEY, ItineraryMetadata)
    return sorted(index, key=lambda m: m.updated_at, reverse=True)


def get_itinerary(db: Database, itinerary_id: str) -> Optional[TripData]:
    return db.read_model(_data_key(itinerary_id), TripData)


def get_last_active_id(db: Database) -> Optional[str]:
    last = db.read_scalar(LAST_ACTIVE_ITINERARY_KEY)
    if last and db.get_item(_data_key(last)) is None:
        # stale pointer to a deleted trip
        db.remove_item(LAST_ACTIVE_ITINERARY_KEY)
        return None
    return last


# ------------------------------------------------------------------
# Writing


def save_itinerary(db: Database, trip: TripData) -> TripData:
    trip = trip.model_copy(update={"updated_at": utc_now()})
    db.write_model(_data_key(trip.id), trip)

    index = [m for m in list_itineraries(db) if m.id != trip.id]
    index.append(
        ItineraryMetadata(
            id=trip.id,
            itinerary_name=trip.itinerary_name,
            client_name=trip.client_name,
            created_at=trip.created_at,
            updated_at=trip.updated_at,
        )
    )
    db.write_collection(ITINERARY_INDEX_KEY, index)
    db.write_scalar(LAST_ACTIVE_ITINERARY_KEY, trip.id)

    if trip.quotation_request_id:
        if link_itinerary(db, trip.quotation_request_id, trip.id) is None:
            logger.warning(
                "itinerary %s references missing quotation %s",
                trip.id,
                trip.quotation_request_id,
            )
    return trip


def _client_name_for(db: Database, request: QuotationRequest) -> Optional[str]:
    if not request.agent_id:
        return None
    agent = get_agent(db, request.agent_id)
    if agent is None:
        return f"Agent ID: {request.agent_id}"
    agency = get_agency(db, agent.agency_id)
    if agency is None:
        return f"Agent: {agent.full_name} (Agency ID: {agent.agency_id})"
    return f"{agency.name} - {agent.full_name}"


def create_itinerary(db: Database, payload: Optional[ItineraryCreate] = None) -> TripData:
    payload = payload or ItineraryCreate()
    new_id = make_itinerary_id()
    request: Optional[QuotationRequest] = None
    if payload.quotation_request_id:
        request = get_quotation(db, payload.quotation_request_id)
        if request is None:
            raise ValueError(f"quotation request '{payload.quotation_request_id}' does not exist")

    if payload.settings is not None:
        settings = payload.settings
    elif request is not None:
        details = request.trip_details
        settings = TripSettings(
            num_days=details.duration_days or DEFAULT_NUM_DAYS,
            start_date=details.preferred_start_date or date.today(),
            selected_countries=list(details.preferred_country_ids),
            selected_provinces=list(details.preferred_province_names),
            budget=details.budget_amount,
        )
    else:
        settings = TripSettings(num_days=DEFAULT_NUM_DAYS, start_date=date.today())

    if payload.pax is not None:
        pax = payload.pax
    elif request is not None:
        pax = PaxDetails(
            adults=request.client_info.adults,
            children=request.client_info.children,
            currency=request.trip_details.budget_currency,
        )
    else:
        pax = PaxDetails(adults=DEFAULT_ADULTS, children=0, currency=DEFAULT_BILLING_CURRENCY)

    if payload.itinerary_name:
        name = payload.itinerary_name
    elif request is not None:
        name = f"Proposal for Quotation {request.id.split('-')[-1]}"
    else:
        name = f"New Itinerary {new_id.split('-')[-1]}"

    client_name = payload.client_name
    if client_name is None and request is not None:
        client_name = _client_name_for(db, request)

    trip = TripData(
        id=new_id,
        itinerary_name=name,
        client_name=client_name,
        settings=settings,
        pax=pax,
        travelers=build_travelers(pax.adults, pax.children),
        days={day: DayItinerary() for day in range(1, settings.num_days + 1)},
        quotation_request_id=request.id if request else None,
    )
    logger.info("created itinerary %s", trip.id, extra={"itinerary_id": trip.id})
    return save_itinerary(db, trip)


def delete_itinerary(db: Database, itinerary_id: str) -> bool:
    removed = db.remove_item(_data_key(itinerary_id))
    index = list_itineraries(db)
    remaining = [m for m in index if m.id != itinerary_id]
    if len(remaining) != len(index):
        db.write_collection(ITINERARY_INDEX_KEY, remaining)
        removed = True
    if db.read_scalar(LAST_ACTIVE_ITINERARY_KEY) == itinerary_id:
        db.remove_item(LAST_ACTIVE_ITINERARY_KEY)
    return removed


# ------------------------------------------------------------------
# Edits


def update_itinerary(db: Database, itinerary_id: str, payload: ItineraryUpdate) -> Optional[TripData]:
    trip = get_itinerary(db, itinerary_id)
    if trip is None:
        return None
    changes = payload.model_dump(exclude_none=True)
    return save_itinerary(db, trip.model_copy(update=changes))


def _resize_days(days: Dict[int, DayItinerary], num_days: int) -> Dict[int, DayItinerary]:
    resized = {d: v for d, v in days.items() if d <= num_days}
    for d in range(1, num_days + 1):
        resized.setdefault(d, DayItinerary())
    return dict(sorted(resized.items()))


def _clamp_spans(trip: TripData) -> int:
    """Pull activity end days and hotel checkouts back inside the trip."""
    num_days = trip.settings.num_days
    clamped = 0
    for item in trip.iter_items():
        if isinstance(item, ActivityItem) and item.end_day is not None and item.end_day > num_days:
            item.end_day = num_days
            clamped += 1
        elif isinstance(item, HotelItem) and item.checkout_day > num_days + 1:
            item.checkout_day = num_days + 1
            clamped += 1
    return clamped


def update_settings(
    db: Database, itinerary_id: str, payload: TripSettingsUpdate
) -> Optional[TripData]:
    trip = get_itinerary(db, itinerary_id)
    if trip is None:
        return None
    settings = trip.settings.model_copy(update=payload.model_dump(exclude_none=True))
    dropped = sum(len(v.items) for d, v in trip.days.items() if d > settings.num_days)
    if dropped:
        logger.info("dropping %d item(s) beyond day %d of %s", dropped, settings.num_days, trip.id)
    trip = trip.model_copy(
        update={"settings": settings, "days": _resize_days(trip.days, settings.num_days)}
    )
    clamped = _clamp_spans(trip)
    if clamped:
        logger.info("shortened %d multi-day item(s) to fit %d day(s) of %s", clamped, settings.num_days, trip.id)
    return save_itinerary(db, trip)


def _prune_traveler_refs(trip: TripData) -> None:
    valid = {t.id for t in trip.travelers}
    for item in trip.iter_items():
        item.excluded_traveler_ids = [i for i in item.excluded_traveler_ids if i in valid]
        for room in getattr(item, "selected_rooms", []):
            room.assigned_traveler_ids = [i for i in room.assigned_traveler_ids if i in valid]


def update_pax(db: Database, itinerary_id: str, payload: PaxUpdate) -> Optional[TripData]:
    trip = get_itinerary(db, itinerary_id)
    if trip is None:
        return None
    pax = trip.pax.model_copy(update=payload.model_dump(exclude_none=True))
    trip = trip.model_copy(update={"pax": pax})
    if (pax.adults, pax.children) != (
        sum(t.type == "adult" for t in trip.travelers),
        sum(t.type == "child" for t in trip.travelers),
    ):
        trip.travelers = build_travelers(pax.adults, pax.children)
        _prune_traveler_refs(trip)
    return save_itinerary(db, trip)


def _check_item_fits(trip: TripData, item) -> None:
    num_days = trip.settings.num_days
    if item.day > num_days:
        raise ValueError(f"day {item.day} is outside the trip (1..{num_days})")
    end_day = getattr(item, "end_day", None)
    if end_day is not None and end_day > num_days:
        raise ValueError(f"end_day {end_day} is outside the trip (1..{num_days})")
    checkout_day = getattr(item, "checkout_day", None)
    if checkout_day is not None and checkout_day > num_days + 1:
        raise ValueError(f"checkout_day {checkout_day} is past the day after the trip ({num_days + 1})")
    valid = {t.id for t in trip.travelers}
    unknown = [i for i in item.excluded_traveler_ids if i not in valid]
    if unknown:
        raise ValueError(f"unknown traveler id(s): {', '.join(unknown)}")


def add_item(db: Database, itinerary_id: str, item) -> Optional[TripData]:
    trip = get_itinerary(db, itinerary_id)
    if trip is None:
        return None
    _check_item_fits(trip, item)
    if trip.find_item(item.id) is not None:
        raise ValueError(f"item '{item.id}' already exists")
    trip.days.setdefault(item.day, DayItinerary()).items.append(item)
    return save_itinerary(db, trip)


def replace_item(db: Database, itinerary_id: str, item_id: str, item) -> Optional[TripData]:
    """Swap in a new version of an item; moving days is allowed.

    Returns None when the trip or the item does not exist.
    """
    trip = get_itinerary(db, itinerary_id)
    if trip is None or trip.find_item(item_id) is None:
        return None
    item = item.model_copy(update={"id": item_id})
    _check_item_fits(trip, item)
    for day_number, day in trip.days.items():
        for i, existing in enumerate(day.items):
            if existing.id != item_id:
                continue
            if day_number == item.day:
                day.items[i] = item
            else:
                del day.items[i]
                trip.days.setdefault(item.day, DayItinerary()).items.append(item)
            return save_itinerary(db, trip)
    return None


def remove_item(db: Database, itinerary_id: str, item_id: str) -> Optional[bool]:
    trip = get_itinerary(db, itinerary_id)
    if trip is None:
        return None
    for day in trip.days.values():
        kept = [i for i in day.items if i.id != item_id]
        if len(kept) != len(day.items):
            day.items = kept
            save_itinerary(db, trip)
            return True
    return False


def replace_itinerary(db: Database, trip: TripData) -> TripData:
    """Save a whole document sent by a client.

    Travelers are rebuilt from `pax` and stale traveler references pruned.
    Every item must sit under its own day and fit the trip, otherwise
    ValueError is raised and nothing is written.
    """
    trip.travelers = build_travelers(trip.pax.adults, trip.pax.children)
    _prune_traveler_refs(trip)
    seen = set()
    for day_number, day in trip.days.items():
        for item in day.items:
            if item.day != day_number:
                raise ValueError(f"item '{item.id}' has day {item.day} but is stored under day {day_number}")
            if item.id in seen:
                raise ValueError(f"item '{item.id}' appears more than once")
            seen.add(item.id)
            _check_item_fits(trip, item)
    trip.days = _resize_days(trip.days, trip.settings.num_days)
    return save_itinerary(db, trip)


# ------------------------------------------------------------------
# Costs


def calculate_costs(
    db: Database, itinerary_id: str, reference_currency: str = "USD"
) -> Optional[CostSummary]:
    trip = get_itinerary(db, itinerary_id)
    if trip is None:
        return None
    converter = build_converter(db, reference_currency)
    return calculate_all_costs(trip, list_service_prices(db), converter)
