"""Itinerary cost engine.

Every item is priced in its source currency (the selected master service's
currency, else the item's own currency, else the billing currency) and then
scaled by the final conversion rate into the billing currency. Per-traveler
contributions are accumulated unrounded; rounding happens once when the
summary is assembled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from itinerary_ace.models.constants import CATEGORY_LABELS
from itinerary_ace.models.itinerary import (
    ActivityItem,
    CostSummary,
    DetailedSummaryItem,
    HotelItem,
    HotelOccupancyDetail,
    MealItem,
    MiscItem,
    TransferItem,
    Traveler,
    TripData,
)
from itinerary_ace.models.pricing import ServicePriceItem
from itinerary_ace.services.money import format_money, round2
from itinerary_ace.services.pricing_rules import (
    day_to_date,
    package_available,
    seasonal_price_for,
    select_package,
    surcharge_for,
)
from itinerary_ace.services.rates.conversion import SupportsRateLookup

logger = logging.getLogger("itinerary_ace.calculation")


@dataclass
class _Participants:
    adults: List[Traveler]
    children: List[Traveler]
    excluded_labels: List[str]

    @property
    def all(self) -> List[Traveler]:
        return self.adults + self.children


@dataclass
class _Occupancy:
    room_type_name: str
    num_rooms: int
    nights: int
    extra_beds: int
    characteristics: Optional[str]
    assigned_traveler_labels: str
    block_cost: float


@dataclass
class _ItemCost:
    adult_cost: float = 0.0
    child_cost: float = 0.0
    total_cost: float = 0.0
    contributions: Dict[str, float] = field(default_factory=dict)
    details: str = ""
    occupancy: Optional[List[_Occupancy]] = None
    warnings: List[str] = field(default_factory=list)

    def add(self, traveler_id: str, amount: float) -> None:
        self.contributions[traveler_id] = self.contributions.get(traveler_id, 0.0) + amount


def _participants(item, travelers: Iterable[Traveler]) -> _Participants:
    excluded = set(item.excluded_traveler_ids)
    adults: List[Traveler] = []
    children: List[Traveler] = []
    labels: List[str] = []
    for t in travelers:
        if t.id in excluded:
            labels.append(t.label)
        elif t.type == "adult":
            adults.append(t)
        else:
            children.append(t)
    return _Participants(adults, children, labels)


def _with_province(details: str, province: Optional[str]) -> str:
    return f"Prov: {province}; {details}" if province else details


def _per_head(cost: _ItemCost, who: _Participants, adult_price: float, child_price: float) -> None:
    cost.adult_cost = adult_price * len(who.adults)
    cost.child_cost = child_price * len(who.children)
    cost.total_cost = cost.adult_cost + cost.child_cost
    for t in who.adults:
        cost.add(t.id, adult_price)
    for t in who.children:
        cost.add(t.id, child_price)


def _split_equally(cost: _ItemCost, who: _Participants, total: float) -> None:
    cost.total_cost = total
    head_count = len(who.all)
    if head_count == 0:
        if total > 0:
            cost.warnings.append("No participating travelers to share the cost.")
        return
    share = total / head_count
    cost.adult_cost = share * len(who.adults)
    cost.child_cost = share * len(who.children)
    for t in who.all:
        cost.add(t.id, share)


# ------------------------------------------------------------------
# Per-category pricing


def _transfer_cost(
    item: TransferItem, service: Optional[ServicePriceItem], who: _Participants, on: date, currency: str
) -> _ItemCost:
    cost = _ItemCost()
    mode = item.mode
    if service is not None and service.transfer_mode:
        mode = service.transfer_mode
    if mode == "ticket":
        if service is not None and service.price1 is not None:
            adult_price = service.price1
            child_price = service.price2 if service.price2 is not None else adult_price
        else:
            adult_price = item.adult_ticket_price or 0.0
            child_price = (
                item.child_ticket_price if item.child_ticket_price is not None else adult_price
            )
        _per_head(cost, who, adult_price, child_price)
        cost.details = (
            f"Mode: ticket; Ad: {format_money(adult_price, currency)}, "
            f"Ch: {format_money(child_price, currency)}"
        )
        return cost

    option = service.find_vehicle_option(item.selected_vehicle_option_id) if service else None
    if service is not None and option is None and item.selected_vehicle_option_id:
        cost.warnings.append("Selected vehicle option no longer exists; using item price.")
    if option is not None:
        per_vehicle = option.price
        vehicle_type = option.vehicle_type
    else:
        per_vehicle = item.cost_per_vehicle or 0.0
        vehicle_type = item.vehicle_type or "N/A"
    surcharge = surcharge_for(service.surcharge_periods, on) if service else 0.0
    vehicles = item.vehicles or 1
    total = (per_vehicle + surcharge) * vehicles
    _split_equally(cost, who, total)
    cost.details = (
        f"Mode: vehicle; Type: {vehicle_type}; #Veh: {vehicles}; "
        f"Cost/V: {format_money(per_vehicle, currency)}"
    )
    if surcharge:
        cost.details += f"; Surcharge/V: {format_money(surcharge, currency)}"
    cost.details += f"; Total: {format_money(total, currency)}"
    return cost


def _activity_cost(
    item: ActivityItem, service: Optional[ServicePriceItem], who: _Participants, on: date, currency: str
) -> _ItemCost:
    cost = _ItemCost()
    package = None
    if service is not None and service.activity_packages:
        package = select_package(service, item.selected_package_id, on)
        if package is None:
            cost.warnings.append(f"No package available on {on.isoformat()}.")
        elif not package_available(package, on):
            cost.warnings.append(f"Package '{package.name}' is not available on {on.isoformat()}.")

    if package is not None:
        adult_price = package.price1
        child_price = package.price2 if package.price2 is not None else adult_price
    elif service is not None and service.price1 is not None:
        adult_price = service.price1
        child_price = service.price2 if service.price2 is not None else adult_price
    else:
        adult_price = item.adult_price
        child_price = item.child_price if item.child_price is not None else adult_price
    _per_head(cost, who, adult_price, child_price)

    end_day = item.end_day or item.day
    duration = max(1, end_day - item.day + 1)
    span = f"Day {item.day}" + (f"-{end_day}" if duration > 1 else "")
    cost.details = (
        f"{span} (Dur: {duration}d). Ad: {format_money(adult_price, currency)}, "
        f"Ch: {format_money(child_price, currency)}. Fixed Price."
    )
    if package is not None:
        cost.details = f"Pkg: {package.name}; {cost.details}"
    return cost


def _hotel_cost(
    item: HotelItem,
    service: Optional[ServicePriceItem],
    who: _Participants,
    travelers: List[Traveler],
    start_date: date,
) -> _ItemCost:
    cost = _ItemCost(occupancy=[])
    nights = item.checkout_day - item.day
    cost.details = (
        f"In: Day {item.day}, Out: Day {item.checkout_day} ({max(nights, 0)}n). "
        f"Child Share: {'Yes' if item.children_sharing_bed else 'No'}"
    )
    if nights <= 0:
        cost.details += f". Invalid nights: {nights}. No cost."
        cost.warnings.append("Checkout day must be after check-in day.")
        return cost

    by_id = {t.id: t for t in travelers}
    participating = {t.id for t in who.all}
    assigned_ids: set = set()
    pool = 0.0

    for room in item.selected_rooms:
        room_type = (
            service.find_room_type(room.room_type_definition_id)
            if service is not None and room.room_type_definition_id
            else None
        )
        block = 0.0
        missing_rate = False
        for night in range(nights):
            night_date = day_to_date(start_date, item.day + night)
            season = seasonal_price_for(room_type, night_date) if room_type else None
            if season is not None:
                room_rate = season.rate
                bed_rate = season.extra_bed_rate or 0.0
            else:
                if room.room_rate is None:
                    missing_rate = True
                room_rate = room.room_rate or 0.0
                bed_rate = room.extra_bed_rate or 0.0
            block += (room_rate + room.extra_beds * bed_rate) * room.num_rooms
        name = room_type.name if room_type else (room.room_type_name_cache or "N/A")
        if missing_rate:
            cost.warnings.append(f"No rate found for '{name}' on one or more nights.")

        labels = [by_id[i].label if i in by_id else i for i in room.assigned_traveler_ids]
        characteristics = None
        if room_type is not None and room_type.characteristics:
            characteristics = ", ".join(f"{c.key}: {c.value}" for c in room_type.characteristics)
        cost.occupancy.append(
            _Occupancy(
                room_type_name=name,
                num_rooms=room.num_rooms,
                nights=nights,
                extra_beds=room.extra_beds,
                characteristics=characteristics,
                assigned_traveler_labels=", ".join(labels) or "None",
                block_cost=block,
            )
        )
        cost.total_cost += block

        room_adults = [
            i
            for i in room.assigned_traveler_ids
            if i in participating and by_id[i].type == "adult"
        ]
        if room_adults and block > 0:
            share = block / len(room_adults)
            for i in room_adults:
                cost.add(i, share)
                assigned_ids.add(i)
            cost.adult_cost += block
        elif block > 0:
            pool += block

    if pool > 0:
        pool_adults = [t for t in who.adults if t.id not in assigned_ids]
        pool_children = [t for t in who.children if t.id not in assigned_ids]
        payers_children = pool_children if (not item.children_sharing_bed or not pool_adults) else []
        payers = len(pool_adults) + len(payers_children)
        if payers > 0:
            share = pool / payers
            for t in pool_adults:
                cost.add(t.id, share)
                cost.adult_cost += share
            for t in payers_children:
                cost.add(t.id, share)
                cost.child_cost += share
        elif who.adults:
            share = pool / len(who.adults)
            for t in who.adults:
                cost.add(t.id, share)
            cost.adult_cost += pool
        elif who.children and not item.children_sharing_bed:
            share = pool / len(who.children)
            for t in who.children:
                cost.add(t.id, share)
            cost.child_cost += pool
        else:
            cost.warnings.append("Room cost could not be assigned to any traveler.")
    return cost


def _meal_cost(
    item: MealItem, service: Optional[ServicePriceItem], who: _Participants, currency: str
) -> _ItemCost:
    cost = _ItemCost()
    if service is not None and service.price1 is not None:
        adult_price = service.price1
        child_price = service.price2 if service.price2 is not None else adult_price
    else:
        adult_price = item.adult_meal_price
        child_price = item.child_meal_price if item.child_meal_price is not None else adult_price
    meals = item.total_meals
    _per_head(cost, who, adult_price * meals, child_price * meals)
    cost.details = (
        f"# Meals: {meals}, Ad: {format_money(adult_price, currency)}, "
        f"Ch: {format_money(child_price, currency)}"
    )
    return cost


def _misc_cost(
    item: MiscItem, service: Optional[ServicePriceItem], who: _Participants, currency: str
) -> _ItemCost:
    cost = _ItemCost()
    unit = service.price1 if service is not None and service.price1 is not None else item.unit_cost
    line_total = unit * item.quantity
    if item.cost_assignment == "perPerson":
        _per_head(cost, who, line_total, line_total)
        suffix = f"Total: {format_money(cost.total_cost, currency)} (Per Pers)"
    else:
        _split_equally(cost, who, line_total)
        suffix = f"Total Shared: {format_money(line_total, currency)}"
    cost.details = (
        f"Assign: {item.cost_assignment}, Cost: {format_money(unit, currency)}, "
        f"Qty: {item.quantity}; {suffix}"
    )
    return cost


# ------------------------------------------------------------------
# Entry point


def calculate_all_costs(
    trip: TripData,
    service_prices: Iterable[ServicePriceItem],
    converter: SupportsRateLookup,
) -> CostSummary:
    """Price every item of the trip in the billing currency.

    Raises RateUnavailableError when an item's source currency cannot be
    converted into the billing currency.
    """
    billing = trip.pax.currency
    services = {s.id: s for s in service_prices}
    per_person: Dict[str, float] = {t.id: 0.0 for t in trip.travelers}
    categories: Dict[str, float] = {label: 0.0 for label in CATEGORY_LABELS.values()}
    grand_total = 0.0
    detailed: List[DetailedSummaryItem] = []

    for item in trip.iter_items():
        service = services.get(item.selected_service_price_id) if item.selected_service_price_id else None
        warnings: List[str] = []
        if item.selected_service_price_id and service is None:
            warnings.append("Selected service price no longer exists; using item prices.")
        if service is not None and service.category != item.type:
            warnings.append(
                f"Selected service is a {service.category}, not a {item.type}; using item prices."
            )
            service = None

        source = service.currency if service is not None else (item.currency or billing)
        rate = converter.get_rate(source, billing).final_rate
        who = _participants(item, trip.travelers)
        on = day_to_date(trip.settings.start_date, item.day)

        if isinstance(item, TransferItem):
            cost = _transfer_cost(item, service, who, on, source)
        elif isinstance(item, ActivityItem):
            cost = _activity_cost(item, service, who, on, source)
        elif isinstance(item, HotelItem):
            cost = _hotel_cost(item, service, who, trip.travelers, trip.settings.start_date)
        elif isinstance(item, MealItem):
            cost = _meal_cost(item, service, who, source)
        elif isinstance(item, MiscItem):
            cost = _misc_cost(item, service, who, source)
        else:  # pragma: no cover
            logger.warning("skipping item %s of unknown type", item.id)
            continue

        total = cost.total_cost * rate
        grand_total += total
        label = CATEGORY_LABELS[item.type]
        categories[label] += total
        for traveler_id, amount in cost.contributions.items():
            if traveler_id in per_person:
                per_person[traveler_id] += amount * rate

        province = item.province or (service.province if service is not None else None)
        occupancy = None
        if cost.occupancy is not None:
            occupancy = [
                HotelOccupancyDetail(
                    room_type_name=o.room_type_name,
                    num_rooms=o.num_rooms,
                    nights=o.nights,
                    extra_beds=o.extra_beds,
                    characteristics=o.characteristics,
                    assigned_traveler_labels=o.assigned_traveler_labels,
                    total_room_block_cost=round2(o.block_cost * rate),
                )
                for o in cost.occupancy
            ]
        detailed.append(
            DetailedSummaryItem(
                id=item.id,
                type=label,
                day=item.day if trip.settings.num_days > 1 else None,
                name=item.name,
                note=item.note,
                province=province,
                configuration_details=_with_province(cost.details, province),
                excluded_travelers=", ".join(who.excluded_labels) or "None",
                adult_cost=round2(cost.adult_cost * rate),
                child_cost=round2(cost.child_cost * rate),
                total_cost=round2(total),
                source_currency=source,
                conversion_rate=rate,
                occupancy_details=occupancy,
                warnings=warnings + cost.warnings,
            )
        )

    return CostSummary(
        billing_currency=billing,
        grand_total=round2(grand_total),
        per_person_totals={k: round2(v) for k, v in per_person.items()},
        category_totals={k: round2(v) for k, v in categories.items()},
        detailed_items=detailed,
    )
