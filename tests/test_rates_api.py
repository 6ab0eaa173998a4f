def test_default_rates_seeded_on_startup(client):
    rates = client.get("/rates/").json()
    pairs = {(r["from_currency"], r["to_currency"]): r["rate"] for r in rates}
    assert pairs[("USD", "THB")] == 36.5


def test_convert_with_global_and_specific_markup(client):
    r = client.get("/rates/convert", params={"amount": 10, "from": "usd", "to": "thb"})
    assert r.status_code == 200
    body = r.json()
    assert body["converted_amount"] == 365.0
    assert body["markup_type"] == "none"

    assert client.put("/rates/markup", json={"markup_percentage": 2}).status_code == 200
    assert client.get("/rates/markup").json() == {"markup_percentage": 2.0}
    body = client.get("/rates/convert", params={"amount": 10, "from": "USD", "to": "THB"}).json()
    assert body["markup_type"] == "global"
    assert body["converted_amount"] == 372.3

    r = client.post(
        "/rates/specific-markups",
        json={"from_currency": "USD", "to_currency": "THB", "markup_percentage": 5},
    )
    assert r.status_code == 201
    markup_id = r.json()["id"]
    body = client.get("/rates/convert", params={"amount": 10, "from": "USD", "to": "THB"}).json()
    assert body["markup_type"] == "specific"
    assert body["converted_amount"] == 383.25

    assert client.delete(f"/rates/specific-markups/{markup_id}").status_code == 204
    assert client.get("/rates/specific-markups").json() == []


def test_markup_is_capped(client):
    assert client.put("/rates/markup", json={"markup_percentage": 75}).status_code == 422


def test_convert_cross_rate_and_unavailable(client):
    body = client.get("/rates/convert", params={"amount": 100, "from": "EUR", "to": "GBP"}).json()
    assert body["converted_amount"] == 85.87

    r = client.get("/rates/convert", params={"amount": 1, "from": "BDT", "to": "THB"})
    assert r.status_code == 422
    assert "BDT" in r.json()["detail"]


def test_rate_crud(client):
    r = client.post("/rates/", json={"from_currency": "BDT", "to_currency": "USD", "rate": 0.0085})
    assert r.status_code == 201
    rate_id = r.json()["id"]
    assert client.post("/rates/", json={"from_currency": "BDT", "to_currency": "USD", "rate": 1}).status_code == 400
    assert client.post("/rates/", json={"from_currency": "USD", "to_currency": "USD", "rate": 1}).status_code == 422

    r = client.put(f"/rates/{rate_id}", json={"rate": 0.009})
    assert r.status_code == 200
    assert r.json()["source"] == "manual"

    body = client.get("/rates/convert", params={"amount": 1000, "from": "BDT", "to": "THB"}).json()
    assert body["converted_amount"] == 328.5

    assert client.delete(f"/rates/{rate_id}").status_code == 204
    assert client.delete(f"/rates/{rate_id}").status_code == 404


def test_refresh_without_api_key_reports_fallback(client):
    r = client.post("/rates/refresh")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "fallback"
    assert body["seeded_defaults"] is False
