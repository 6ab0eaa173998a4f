import os, sys, tempfile, json
from fastapi.testclient import TestClient

"""Smoke test for the quote cycle.
Submits a quotation request, builds the linked itinerary with catalogue items,
prints the cost summary in THB and USD and sends the quote.
"""


def run():
    from itinerary_ace.core.config import Settings
    from itinerary_ace.db.seed import AGENT_JOHN_ID, THAILAND_ID
    from itinerary_ace.main import create_app

    with tempfile.TemporaryDirectory() as d:
        s = Settings(data_dir=d, db_filename="smoke.sqlite3")
        c = TestClient(create_app(settings_override=s))

        q = c.post(
            "/quotations/",
            json={
                "agent_id": AGENT_JOHN_ID,
                "client_info": {"adults": 2, "children": 1, "child_ages": "9"},
                "trip_details": {
                    "preferred_country_ids": [THAILAND_ID],
                    "preferred_province_names": ["Bangkok"],
                    "duration_days": 2,
                    "budget_currency": "THB",
                },
            },
        ).json()
        trip = c.post("/itineraries/", json={"quotation_request_id": q["id"]}).json()
        for item in (
            {"type": "activity", "day": 1, "name": "Grand Palace", "selected_service_price_id": "svc_grand_palace"},
            {"type": "meal", "day": 1, "name": "Street food", "selected_service_price_id": "svc_street_food_tour"},
            {"type": "misc", "day": 2, "name": "Massage", "selected_service_price_id": "svc_thai_massage"},
        ):
            c.post(f"/itineraries/{trip['id']}/items", json=item)

        thb = c.get(f"/itineraries/{trip['id']}/costs").json()
        c.patch(f"/itineraries/{trip['id']}/pax", json={"currency": "USD"})
        usd = c.get(f"/itineraries/{trip['id']}/costs").json()
        sent = c.post(f"/quotations/{q['id']}/send").json()

        print(
            json.dumps(
                {
                    "quotation": {"id": sent["id"], "status": sent["status"], "version": sent["version"]},
                    "THB": {"grand_total": thb["grand_total"], "per_person": thb["per_person_totals"]},
                    "USD": {"grand_total": usd["grand_total"], "per_person": usd["per_person_totals"]},
                },
                indent=2,
            )
        )


if __name__ == "__main__":
    sys.path.append(os.getcwd())
    run()
