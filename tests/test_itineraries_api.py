import pytest


@pytest.fixture
def trip(client):
    r = client.post(
        "/itineraries/",
        json={
            "itinerary_name": "Bangkok long weekend",
            "settings": {"num_days": 3, "start_date": "2025-06-02"},
            "pax": {"adults": 2, "children": 1, "currency": "THB"},
        },
    )
    assert r.status_code == 201
    return r.json()


def _add(client, trip_id, item):
    r = client.post(f"/itineraries/{trip_id}/items", json=item)
    assert r.status_code == 201, r.text
    return r.json()


def _items(trip, day):
    return trip["days"][str(day)]["items"]


def test_blank_itinerary_defaults(client):
    r = client.post("/itineraries/")
    assert r.status_code == 201
    trip = r.json()
    assert trip["id"].startswith("ITN-")
    assert trip["itinerary_name"].startswith("New Itinerary ")
    assert trip["pax"] == {"adults": 2, "children": 0, "currency": "THB"}
    assert sorted(trip["days"]) == ["1", "2", "3"]
    assert trip["overall_booking_status"] == "NotStarted"


def test_create_from_missing_quotation_fails(client):
    r = client.post("/itineraries/", json={"quotation_request_id": "GTE-250101-0000"})
    assert r.status_code == 400


def test_index_and_last_active(client, trip):
    assert client.get("/itineraries/last-active").json()["id"] == trip["id"]
    index = client.get("/itineraries/").json()
    assert [m["id"] for m in index] == [trip["id"]]
    assert index[0]["itinerary_name"] == "Bangkok long weekend"

    assert client.delete(f"/itineraries/{trip['id']}").status_code == 204
    assert client.get("/itineraries/").json() == []
    assert client.get("/itineraries/last-active").status_code == 404
    assert client.get(f"/itineraries/{trip['id']}").status_code == 404
    assert client.delete(f"/itineraries/{trip['id']}").status_code == 404


def test_costs_for_catalogue_items(client, trip):
    _add(client, trip["id"], {
        "type": "meal",
        "day": 1,
        "name": "Street food",
        "selected_service_price_id": "svc_street_food_tour",
    })
    _add(client, trip["id"], {
        "type": "misc",
        "day": 2,
        "name": "Massage",
        "selected_service_price_id": "svc_thai_massage",
        "excluded_traveler_ids": ["C1"],
    })
    _add(client, trip["id"], {
        "type": "transfer",
        "day": 3,
        "name": "Skytrain",
        "selected_service_price_id": "svc_bts_day_pass",
    })

    r = client.get(f"/itineraries/{trip['id']}/costs")
    assert r.status_code == 200
    summary = r.json()
    assert summary["billing_currency"] == "THB"
    assert summary["category_totals"] == {
        "Transfers": 450.0,
        "Activities": 0.0,
        "Hotels": 0.0,
        "Meals": 2100.0,
        "Miscs": 600.0,
    }
    assert summary["grand_total"] == 3150.0
    assert summary["per_person_totals"] == {"A1": 1250.0, "A2": 1250.0, "C1": 650.0}
    assert [d["day"] for d in summary["detailed_items"]] == [1, 2, 3]


def test_costs_in_another_billing_currency(client, trip):
    _add(client, trip["id"], {"type": "misc", "day": 1, "name": "Tips", "unit_cost": 365, "cost_assignment": "total"})
    client.patch(f"/itineraries/{trip['id']}/pax", json={"currency": "USD"})
    summary = client.get(f"/itineraries/{trip['id']}/costs").json()
    # custom prices are in the trip's billing currency unless the item says otherwise
    assert summary["grand_total"] == 365.0

    client.patch(f"/itineraries/{trip['id']}/pax", json={"currency": "THB"})
    _add(client, trip["id"], {"type": "misc", "day": 1, "name": "Visa", "unit_cost": 10, "currency": "USD"})
    summary = client.get(f"/itineraries/{trip['id']}/costs").json()
    assert summary["grand_total"] == 365.0 + 3 * 365.0


def test_costs_with_unconvertible_currency(client, trip):
    _add(client, trip["id"], {"type": "meal", "day": 1, "name": "Fish", "adult_meal_price": 50, "currency": "BDT"})
    r = client.get(f"/itineraries/{trip['id']}/costs")
    assert r.status_code == 422
    assert client.get("/itineraries/ITN-missing/costs").status_code == 404


def test_item_validation(client, trip):
    r = client.post(f"/itineraries/{trip['id']}/items", json={"type": "meal", "day": 5, "name": "Late"})
    assert r.status_code == 400
    r = client.post(
        f"/itineraries/{trip['id']}/items",
        json={"type": "meal", "day": 1, "name": "Ghost", "excluded_traveler_ids": ["A9"]},
    )
    assert r.status_code == 400
    r = client.post(f"/itineraries/{trip['id']}/items", json={"type": "cruise", "day": 1, "name": "?"})
    assert r.status_code == 422
    r = client.post("/itineraries/ITN-missing/items", json={"type": "meal", "day": 1, "name": "Lunch"})
    assert r.status_code == 404


def test_replace_moves_item_between_days(client, trip):
    updated = _add(client, trip["id"], {"type": "activity", "day": 1, "name": "Palace", "adult_price": 500})
    item_id = _items(updated, 1)[0]["id"]

    r = client.put(
        f"/itineraries/{trip['id']}/items/{item_id}",
        json={"type": "activity", "day": 2, "name": "Palace (morning)", "adult_price": 500},
    )
    assert r.status_code == 200
    moved = r.json()
    assert _items(moved, 1) == []
    assert _items(moved, 2)[0]["id"] == item_id
    assert _items(moved, 2)[0]["name"] == "Palace (morning)"

    assert client.put(
        f"/itineraries/{trip['id']}/items/nope",
        json={"type": "activity", "day": 2, "name": "x"},
    ).status_code == 404

    assert client.delete(f"/itineraries/{trip['id']}/items/{item_id}").status_code == 204
    assert client.delete(f"/itineraries/{trip['id']}/items/{item_id}").status_code == 404


def test_shrinking_trip_drops_later_days(client, trip):
    _add(client, trip["id"], {"type": "meal", "day": 3, "name": "Farewell dinner"})
    r = client.patch(f"/itineraries/{trip['id']}/settings", json={"num_days": 2})
    assert r.status_code == 200
    assert sorted(r.json()["days"]) == ["1", "2"]

    r = client.patch(f"/itineraries/{trip['id']}/settings", json={"num_days": 4})
    assert sorted(r.json()["days"]) == ["1", "2", "3", "4"]
    assert _items(r.json(), 3) == []


def test_pax_change_rebuilds_travelers_and_prunes_exclusions(client, trip):
    _add(client, trip["id"], {"type": "meal", "day": 1, "name": "Lunch", "excluded_traveler_ids": ["C1"]})
    r = client.patch(f"/itineraries/{trip['id']}/pax", json={"children": 0, "adults": 3})
    assert r.status_code == 200
    updated = r.json()
    assert [t["id"] for t in updated["travelers"]] == ["A1", "A2", "A3"]
    assert _items(updated, 1)[0]["excluded_traveler_ids"] == []


def test_metadata_and_full_save(client, trip):
    r = client.patch(f"/itineraries/{trip['id']}", json={"overall_booking_status": "InProgress"})
    assert r.json()["overall_booking_status"] == "InProgress"
    assert client.patch(f"/itineraries/{trip['id']}", json={"itinerary_name": "  "}).status_code == 422

    doc = client.get(f"/itineraries/{trip['id']}").json()
    doc["client_name"] = "Walk-in client"
    assert client.put("/itineraries/ITN-other", json=doc).status_code == 400
    r = client.put(f"/itineraries/{trip['id']}", json=doc)
    assert r.status_code == 200
    assert client.get("/itineraries/").json()[0]["client_name"] == "Walk-in client"


def test_shrinking_trip_shortens_multi_day_items(client, trip):
    _add(client, trip["id"], {"type": "activity", "day": 1, "end_day": 3, "name": "Rail pass", "adult_price": 900})
    _add(client, trip["id"], {"type": "hotel", "day": 2, "checkout_day": 4, "name": "Riverside"})

    r = client.patch(f"/itineraries/{trip['id']}/settings", json={"num_days": 2})
    assert r.status_code == 200
    updated = r.json()
    assert _items(updated, 1)[0]["end_day"] == 2
    assert _items(updated, 2)[0]["checkout_day"] == 3

    r = client.post(
        f"/itineraries/{trip['id']}/items",
        json={"type": "hotel", "day": 1, "checkout_day": 4, "name": "Too long"},
    )
    assert r.status_code == 400


def _two_day_doc(client):
    r = client.post(
        "/itineraries/",
        json={
            "itinerary_name": "Quick stopover",
            "settings": {"num_days": 2, "start_date": "2025-06-02"},
            "pax": {"adults": 2, "children": 0, "currency": "THB"},
        },
    )
    return r.json()


def test_full_save_rejects_items_outside_their_day(client):
    doc = _two_day_doc(client)
    doc["travelers"] = []
    doc["days"]["1"]["items"] = [{"type": "meal", "day": 9, "name": "Lunch", "adult_meal_price": 100}]
    r = client.put(f"/itineraries/{doc['id']}", json=doc)
    assert r.status_code == 400

    doc["days"]["1"]["items"] = [{"type": "meal", "day": 2, "name": "Lunch", "adult_meal_price": 100}]
    assert client.put(f"/itineraries/{doc['id']}", json=doc).status_code == 400

    stored = client.get(f"/itineraries/{doc['id']}").json()
    assert [t["id"] for t in stored["travelers"]] == ["A1", "A2"]
    assert _items(stored, 1) == []


def test_full_save_rebuilds_travelers_from_pax(client):
    doc = _two_day_doc(client)
    doc["travelers"] = []
    doc["days"]["1"]["items"] = [
        {
            "type": "meal",
            "day": 1,
            "name": "Lunch",
            "adult_meal_price": 100,
            "excluded_traveler_ids": ["A2", "A7"],
        }
    ]
    r = client.put(f"/itineraries/{doc['id']}", json=doc)
    assert r.status_code == 200
    saved = r.json()
    assert [t["id"] for t in saved["travelers"]] == ["A1", "A2"]
    assert _items(saved, 1)[0]["excluded_traveler_ids"] == ["A2"]

    summary = client.get(f"/itineraries/{doc['id']}/costs").json()
    assert summary["grand_total"] == 100.0
    assert summary["per_person_totals"] == {"A1": 100.0, "A2": 0.0}
