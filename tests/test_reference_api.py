from itinerary_ace.db.seed import AGENCY_GLOBAL_ID, AGENT_JOHN_ID, THAILAND_ID


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["schema_version"] == 2
    assert body["stored_keys"] >= 1


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_countries_are_seeded_and_searchable(client):
    names = [c["name"] for c in client.get("/countries/").json()]
    assert "Thailand" in names
    r = client.get("/countries/by-name", params={"name": "thailand"})
    assert r.status_code == 200
    assert r.json()["id"] == THAILAND_ID


def test_country_crud_and_unique_names(client):
    r = client.post("/countries/", json={"name": "Laos", "default_currency": "usd"})
    assert r.status_code == 201
    laos = r.json()
    assert laos["default_currency"] == "USD"

    dup = client.post("/countries/", json={"name": "LAOS", "default_currency": "USD"})
    assert dup.status_code == 400

    r = client.put(f"/countries/{laos['id']}", json={"name": "Lao PDR", "default_currency": "USD"})
    assert r.status_code == 200
    assert r.json()["name"] == "Lao PDR"

    assert client.delete(f"/countries/{laos['id']}").status_code == 204
    assert client.get(f"/countries/{laos['id']}").status_code == 404


def test_country_with_provinces_cannot_be_deleted(client):
    r = client.delete(f"/countries/{THAILAND_ID}")
    assert r.status_code == 409
    assert r.json()["error"] == "conflict"


def test_country_rejects_bad_currency(client):
    r = client.post("/countries/", json={"name": "Nowhere", "default_currency": "DOLLARS"})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"


def test_provinces_filter_and_rules(client):
    thai = client.get("/provinces/", params={"country_id": THAILAND_ID}).json()
    assert "Bangkok" in [p["name"] for p in thai]

    dup = client.post("/provinces/", json={"name": "Bangkok", "country_id": THAILAND_ID})
    assert dup.status_code == 400
    orphan = client.post("/provinces/", json={"name": "Atlantis", "country_id": "missing"})
    assert orphan.status_code == 400

    r = client.post("/provinces/", json={"name": "Nan", "country_id": THAILAND_ID})
    assert r.status_code == 201
    nan_id = r.json()["id"]
    assert client.delete(f"/provinces/{nan_id}").status_code == 204
    assert client.delete(f"/provinces/{nan_id}").status_code == 404


def test_custom_currencies(client):
    r = client.post("/currencies/", json={"code": "krw"})
    assert r.status_code == 201
    assert r.json() == {"code": "KRW", "is_custom": True}

    assert client.post("/currencies/", json={"code": "THB"}).status_code == 400
    codes = {c["code"]: c["is_custom"] for c in client.get("/currencies/").json()}
    assert codes["KRW"] is True
    assert codes["THB"] is False

    assert client.delete("/currencies/krw").status_code == 204
    assert client.delete("/currencies/KRW").status_code == 404


def test_service_price_filters(client):
    hotels = client.get("/service-prices/", params={"category": "hotel"}).json()
    assert [s["id"] for s in hotels] == ["svc_riverside_hotel"]
    assert client.get("/service-prices/", params={"province": "Phuket"}).json() == []
    assert client.get("/service-prices/svc_missing").status_code == 404


def test_service_price_shape_is_validated(client):
    r = client.post(
        "/service-prices/",
        json={"name": "Empty hotel", "category": "hotel", "currency": "THB"},
    )
    assert r.status_code == 422

    r = client.post(
        "/service-prices/",
        json={"name": "Phuket lunch", "category": "meal", "currency": "THB", "price1": 350, "province": "Phuket"},
    )
    assert r.status_code == 201
    created = r.json()
    phuket = client.get("/service-prices/", params={"province": "Phuket"}).json()
    assert [s["id"] for s in phuket] == [created["id"]]
    assert client.delete(f"/service-prices/{created['id']}").status_code == 204


def test_agencies_and_agents(client):
    agents = client.get(f"/agencies/{AGENCY_GLOBAL_ID}/agents").json()
    assert AGENT_JOHN_ID in [a["id"] for a in agents]
    assert client.delete(f"/agencies/{AGENCY_GLOBAL_ID}").status_code == 409

    agency = client.post(
        "/agencies/",
        json={
            "name": "Mekong Trails",
            "main_address": {
                "street": "1 River Rd",
                "city": "Vientiane",
                "postal_code": "01000",
                "country_id": THAILAND_ID,
            },
            "contact_email": "hello@mekongtrails.la",
        },
    ).json()
    agent_body = {
        "agency_id": agency["id"],
        "full_name": "Noy Phom",
        "email": "noy@mekongtrails.la",
        "preferred_currency": "USD",
    }
    r = client.post("/agents/", json=agent_body)
    assert r.status_code == 201
    agent_id = r.json()["id"]

    assert client.post("/agents/", json=agent_body).status_code == 400
    bad_agency = dict(agent_body, agency_id="agency_missing", email="other@mekongtrails.la")
    assert client.post("/agents/", json=bad_agency).status_code == 400
    assert client.post("/agents/", json=dict(agent_body, email="not-an-email")).status_code == 422

    assert client.get("/agents/", params={"agency_id": agency["id"]}).json()[0]["id"] == agent_id
    assert client.delete(f"/agents/{agent_id}").status_code == 204
    assert client.delete(f"/agencies/{agency['id']}").status_code == 204


def test_agent_update_keeps_emails_unique(client):
    agent_body = {
        "agency_id": AGENCY_GLOBAL_ID,
        "full_name": "Noy Phom",
        "email": "noy@mekongtrails.la",
        "preferred_currency": "USD",
    }
    agent_id = client.post("/agents/", json=agent_body).json()["id"]

    r = client.put(f"/agents/{agent_id}", json=dict(agent_body, email="JOHN.DOE@GLOBALTRAVEL.COM"))
    assert r.status_code == 400
    john = [a for a in client.get("/agents/").json() if a["email"].lower() == "john.doe@globaltravel.com"]
    assert [a["id"] for a in john] == [AGENT_JOHN_ID]

    # keeping its own email, in any case, is fine
    r = client.put(f"/agents/{agent_id}", json=dict(agent_body, email="NOY@mekongtrails.la", full_name="Noy P."))
    assert r.status_code == 200
    assert r.json()["full_name"] == "Noy P."


def test_service_price_currency_must_be_managed(client):
    body = {"name": "Seoul lunch", "category": "meal", "currency": "KRW", "price1": 15000}
    r = client.post("/service-prices/", json=body)
    assert r.status_code == 400
    assert "KRW" in r.json()["detail"]

    client.post("/currencies/", json={"code": "KRW"})
    r = client.post("/service-prices/", json=body)
    assert r.status_code == 201
    created = r.json()

    r = client.put(f"/service-prices/{created['id']}", json=dict(body, currency="XYZ"))
    assert r.status_code == 400
    assert client.get(f"/service-prices/{created['id']}").json()["currency"] == "KRW"
