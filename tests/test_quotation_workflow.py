import pytest

from itinerary_ace.db.seed import AGENT_JOHN_ID, THAILAND_ID


def _request_body(**overrides):
    body = {
        "agent_id": AGENT_JOHN_ID,
        "client_info": {"adults": 2, "children": 1, "child_ages": "7"},
        "trip_details": {
            "preferred_country_ids": [THAILAND_ID],
            "preferred_province_names": ["Bangkok"],
            "preferred_start_date": "2025-06-02",
            "duration_days": 4,
            "budget_currency": "THB",
        },
        "flight_prefs": {"airport_transfers_required": True},
    }
    body.update(overrides)
    return body


@pytest.fixture
def quotation(client):
    r = client.post("/quotations/", json=_request_body())
    assert r.status_code == 201
    return r.json()


def test_seeded_requests_are_newest_first(client):
    requests = client.get("/quotations/").json()
    assert len(requests) == 3
    dates = [q["request_date"] for q in requests]
    assert dates == sorted(dates, reverse=True)


def test_submit_uses_agency_initials(quotation):
    assert quotation["id"].startswith("GTE-")
    assert quotation["status"] == "New Request Submitted"
    assert quotation["version"] == 0
    assert quotation["linked_itinerary_id"] is None


def test_submit_validation(client):
    no_ages = _request_body(client_info={"adults": 2, "children": 1})
    assert client.post("/quotations/", json=no_ages).status_code == 422

    no_country = _request_body(trip_details={"preferred_country_ids": []})
    assert client.post("/quotations/", json=no_country).status_code == 422

    r = client.post("/quotations/", json=_request_body(agent_id="agent_missing"))
    assert r.status_code == 400


def test_anonymous_request_gets_default_prefix(client):
    r = client.post("/quotations/", json=_request_body(agent_id=None))
    assert r.status_code == 201
    assert r.json()["id"].startswith("AGY-")


def test_cannot_send_without_itinerary(client, quotation):
    r = client.post(f"/quotations/{quotation['id']}/send")
    assert r.status_code == 400


def test_full_quote_cycle(client, quotation):
    qid = quotation["id"]
    r = client.post("/itineraries/", json={"quotation_request_id": qid})
    assert r.status_code == 201
    trip = r.json()
    assert trip["itinerary_name"] == f"Proposal for Quotation {qid.split('-')[-1]}"
    assert trip["client_name"] == "Global Travel Experts - John Doe (GTE)"
    assert trip["settings"]["num_days"] == 4
    assert trip["settings"]["start_date"] == "2025-06-02"
    assert trip["pax"] == {"adults": 2, "children": 1, "currency": "THB"}
    assert [t["id"] for t in trip["travelers"]] == ["A1", "A2", "C1"]

    linked = client.get(f"/quotations/{qid}").json()
    assert linked["linked_itinerary_id"] == trip["id"]
    assert linked["status"] == "Quoted: Revision In Progress"

    sent = client.post(f"/quotations/{qid}/send").json()
    assert sent["status"] == "Quoted: Waiting for TA Feedback"
    assert sent["version"] == 1

    # saving the itinerary again must not reset the workflow
    client.patch(f"/itineraries/{trip['id']}", json={"itinerary_name": "Bangkok family week"})
    assert client.get(f"/quotations/{qid}").json()["status"] == "Quoted: Waiting for TA Feedback"

    revised = client.post(f"/quotations/{qid}/revision", json={"notes": "Cheaper hotel please"}).json()
    assert revised["status"] == "Quoted: Revision Requested"
    assert revised["agent_revision_notes"] == "Cheaper hotel please"

    resent = client.post(f"/quotations/{qid}/send").json()
    assert resent["status"] == "Quoted: Re-quoted"
    assert resent["version"] == 2

    r = client.put(f"/quotations/{qid}/status", json={"status": "Confirmed"})
    assert r.status_code == 200
    confirmed = client.get("/quotations/", params={"status": "Confirmed"}).json()
    assert [q["id"] for q in confirmed] == [qid]


def test_unknown_status_is_rejected(client, quotation):
    r = client.put(f"/quotations/{quotation['id']}/status", json={"status": "Lost"})
    assert r.status_code == 422


def test_filter_by_agent_and_delete(client, quotation):
    mine = client.get("/quotations/", params={"agent_id": AGENT_JOHN_ID}).json()
    assert quotation["id"] in [q["id"] for q in mine]
    assert client.delete(f"/quotations/{quotation['id']}").status_code == 204
    assert client.get(f"/quotations/{quotation['id']}").status_code == 404
    assert client.post(f"/quotations/{quotation['id']}/send").status_code == 404
