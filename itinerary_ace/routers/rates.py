from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from itinerary_ace.core.config import Settings
from itinerary_ace.core.errors import RateUnavailableError
from itinerary_ace.db.dal import Database
from itinerary_ace.models.rates import (
    ConversionOut,
    ExchangeRate,
    ExchangeRateIn,
    GlobalMarkup,
    MarkupUpdate,
    RateUpdate,
    RefreshReport,
    SpecificMarkupIn,
    SpecificMarkupRate,
)
from itinerary_ace.services.rates import rate_store
from .deps import get_app_settings, get_db

"""Exchange rates router.

Endpoints:
    - GET/POST /rates, PUT/DELETE /rates/{rate_id}     base rates
    - GET/PUT /rates/markup                            global markup
    - /rates/specific-markups[/{markup_id}]            pair-specific markups
    - GET /rates/convert                               convert an amount
    - POST /rates/refresh                              pull rates from ExchangeRate-API

Static paths are registered before /{rate_id} so they are not captured by it.
"""

router = APIRouter(prefix="/rates", tags=["rates"])


# ------------- Global markup -------------


@router.get("/markup", response_model=GlobalMarkup, summary="Get global conversion markup")
async def get_markup(db: Database = Depends(get_db)):
    return GlobalMarkup(markup_percentage=rate_store.get_global_markup(db))


@router.put("/markup", response_model=GlobalMarkup, summary="Set global conversion markup")
async def set_markup(payload: GlobalMarkup, db: Database = Depends(get_db)):
    try:
        value = rate_store.set_global_markup(db, payload.markup_percentage)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return GlobalMarkup(markup_percentage=value)


# ------------- Specific markups -------------


@router.get(
    "/specific-markups",
    response_model=List[SpecificMarkupRate],
    summary="List currency-pair markups",
)
async def list_specific_markups(db: Database = Depends(get_db)):
    return rate_store.list_specific_markups(db)


@router.post(
    "/specific-markups",
    response_model=SpecificMarkupRate,
    status_code=status.HTTP_201_CREATED,
    summary="Add a currency-pair markup",
)
async def add_specific_markup(payload: SpecificMarkupIn, db: Database = Depends(get_db)):
    try:
        return rate_store.add_specific_markup(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put(
    "/specific-markups/{markup_id}",
    response_model=SpecificMarkupRate,
    summary="Update a currency-pair markup",
)
async def update_specific_markup(
    markup_id: str, payload: MarkupUpdate, db: Database = Depends(get_db)
):
    try:
        markup = rate_store.update_specific_markup(db, markup_id, payload.markup_percentage)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if markup is None:
        raise HTTPException(status_code=404, detail="specific markup not found")
    return markup


@router.delete(
    "/specific-markups/{markup_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a currency-pair markup",
)
async def delete_specific_markup(markup_id: str, db: Database = Depends(get_db)):
    if not rate_store.delete_specific_markup(db, markup_id):
        raise HTTPException(status_code=404, detail="specific markup not found")


# ------------- Conversion / refresh -------------


@router.get("/convert", response_model=ConversionOut, summary="Convert an amount between currencies")
async def convert(
    amount: float = Query(..., ge=0),
    from_currency: str = Query(..., alias="from", min_length=3, max_length=3),
    to_currency: str = Query(..., alias="to", min_length=3, max_length=3),
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_db),
):
    converter = rate_store.build_converter(db, settings.reference_currency)
    try:
        result = converter.convert_amount(amount, from_currency, to_currency)
    except RateUnavailableError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return ConversionOut(**asdict(result))


@router.post("/refresh", response_model=RefreshReport, summary="Refresh rates from ExchangeRate-API")
async def refresh(
    settings: Settings = Depends(get_app_settings), db: Database = Depends(get_db)
):
    return rate_store.refresh_rates(db, settings)


# ------------- Base rates -------------


@router.get("/", response_model=List[ExchangeRate], summary="List base exchange rates")
async def list_rates(db: Database = Depends(get_db)):
    return rate_store.list_rates(db)


@router.post(
    "/",
    response_model=ExchangeRate,
    status_code=status.HTTP_201_CREATED,
    summary="Add a base exchange rate",
)
async def add_rate(payload: ExchangeRateIn, db: Database = Depends(get_db)):
    try:
        return rate_store.add_rate(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{rate_id}", response_model=ExchangeRate, summary="Update a base exchange rate")
async def update_rate(rate_id: str, payload: RateUpdate, db: Database = Depends(get_db)):
    rate = rate_store.update_rate(db, rate_id, payload.rate)
    if rate is None:
        raise HTTPException(status_code=404, detail="exchange rate not found")
    return rate


@router.delete(
    "/{rate_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a base exchange rate",
)
async def delete_rate(rate_id: str, db: Database = Depends(get_db)):
    if not rate_store.delete_rate(db, rate_id):
        raise HTTPException(status_code=404, detail="exchange rate not found")
