from sqlalchemy import select

from brewstock.models.transaction import InventoryTransaction


def _create(client, path: str, payload: dict) -> dict:
    res = client.post(path, json=payload)
    assert res.status_code == 201, res.text
    return res.json()


def _seed(client) -> dict[str, str]:
    counter = _create(client, "/locations", {"name": "Front Counter", "type": "retail"})
    backroom = _create(client, "/locations", {"name": "Back Room", "type": "storage"})
    coffee = _create(client, "/categories", {"name": "Coffee"})
    supplier = _create(client, "/suppliers", {"name": "Acme Roasters", "phone": "555-0100"})
    beans = _create(
        client,
        "/items",
        {
            "name": "Item A",
            "category_id": coffee["id"],
            "supplier_id": supplier["id"],
            "unit": "kg",
            "min_stock": 5,
            "max_stock": 20,
        },
    )
    return {
        "counter": counter["id"],
        "backroom": backroom["id"],
        "coffee": coffee["id"],
        "supplier": supplier["id"],
        "beans": beans["id"],
    }


def _set_stock(client, item_id: str, location_id: str, quantity: float) -> dict:
    res = client.put("/stock", json={"item_id": item_id, "location_id": location_id, "quantity": quantity})
    assert res.status_code == 200, res.text
    return res.json()


def test_health_endpoints(test_context):
    client, _ = test_context
    assert client.get("/health").json() == {"ok": True}
    assert client.get("/").json()["docs"] == "/docs"
    res = client.get("/ready")
    assert res.status_code == 200
    assert "X-Request-ID" in res.headers


def test_crud_round_trip_and_not_found_envelope(test_context):
    client, _ = test_context
    ids = _seed(client)

    assert [row["name"] for row in client.get("/locations").json()["items"]] == ["Back Room", "Front Counter"]
    assert client.get(f"/items/{ids['beans']}").json()["unit"] == "kg"

    res = client.patch(f"/suppliers/{ids['supplier']}", json={"contact": "Jo"})
    assert res.status_code == 200, res.text
    assert res.json()["contact"] == "Jo"

    res = client.patch(f"/categories/{ids['coffee']}", json={})
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "validation_error"

    res = client.get("/items/missing", headers={"X-Request-ID": "req-123"})
    assert res.status_code == 404
    body = res.json()["error"]
    assert body["code"] == "not_found"
    assert body["message"] == "Item not found"
    assert body["request_id"] == "req-123"
    assert body["path"] == "/items/missing"

    res = client.delete(f"/categories/{ids['coffee']}")
    assert res.json() == {"id": ids["coffee"], "deleted": True}
    assert client.get(f"/items/{ids['beans']}").json()["category_id"] is None


def test_stock_dashboard_and_alerts_scenario(test_context):
    client, _ = test_context
    ids = _seed(client)
    _set_stock(client, ids["beans"], ids["counter"], 3)
    _set_stock(client, ids["beans"], ids["backroom"], 0)

    stock = client.get("/stock", params={"item_id": ids["beans"]}).json()["items"]
    assert len(stock) == 2

    view = client.get(f"/stock/items/{ids['beans']}").json()
    assert view["total_stock"] == 3
    assert view["stock_status"] == "critical"
    assert view["urgency"] == 3
    assert view["category_name"] == "Coffee"
    assert [row["location_name"] for row in view["location_stocks"]] == ["Front Counter"]

    dashboard = client.get("/dashboard").json()
    assert dashboard["stats"]["critical_stock"] == 1
    assert dashboard["stats"]["total_alerts"] == 1
    assert [item["id"] for item in dashboard["critical_items"]] == [ids["beans"]]

    alerts = client.get("/alerts").json()
    assert alerts["total"] == 1
    assert alerts["critical"] == []
    alert = alerts["warning"][0]
    assert alert["type"] == "low"
    assert alert["current_stock"] == 3
    assert alert["min_stock"] == 5
    assert alert["severity"] == "warning"

    health = {row["location_name"]: row for row in client.get("/dashboard/location-health").json()["items"]}
    assert health["Front Counter"]["health_score"] == 0.0

    categories = client.get("/dashboard/categories").json()["items"]
    assert categories[0]["low_items"] == 1


def test_stock_validation_and_missing_references(test_context):
    client, _ = test_context
    ids = _seed(client)

    res = client.put("/stock", json={"item_id": ids["beans"], "location_id": ids["counter"], "quantity": -1})
    assert res.status_code == 422

    res = client.put("/stock", json={"item_id": ids["beans"], "location_id": "missing", "quantity": 1})
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Location not found"


def test_location_types_api(test_context):
    client, _ = test_context
    types = client.get("/location-types").json()["items"]
    assert {row["name"] for row in types} == {"retail", "storage", "production"}
    retail = next(row for row in types if row["name"] == "retail")

    res = client.delete(f"/location-types/{retail['id']}")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "conflict"

    kiosk = _create(client, "/location-types", {"name": "kiosk"})
    assert kiosk["is_default"] is False
    res = client.post("/location-types", json={"name": "KIOSK"})
    assert res.status_code == 409

    _create(client, "/locations", {"name": "Station", "type": "kiosk"})
    res = client.patch(f"/location-types/{kiosk['id']}", json={"name": "popup"})
    assert res.status_code == 200, res.text
    assert res.json()["location_count"] == 1
    assert client.get("/locations").json()["items"][0]["type"] == "popup"


def test_assignments_api(test_context):
    client, _ = test_context
    ids = _seed(client)
    milk = _create(client, "/items", {"name": "Milk", "category_id": ids["coffee"], "unit": "l"})

    res = client.post(
        f"/locations/{ids['counter']}/assignments",
        json={"item_ids": [ids["beans"], milk["id"], "missing"]},
    )
    assert res.status_code == 200, res.text
    assert res.json()["assigned_item_ids"] == [ids["beans"], milk["id"]]
    assert res.json()["skipped_item_ids"] == ["missing"]

    view = client.get(f"/locations/{ids['counter']}/assignments").json()
    assert view["total_assigned"] == 2
    assert view["items_by_category"][0]["assigned_count"] == 2

    res = client.post(
        f"/locations/{ids['backroom']}/assignments/copy",
        params={"source_location_id": ids["counter"]},
    )
    assert res.status_code == 200, res.text
    assert len(res.json()["assigned_item_ids"]) == 2

    assert client.get("/locations/missing/assignments").status_code == 404
    assert client.post(f"/locations/{ids['counter']}/assignments", json={"item_ids": []}).status_code == 422


def test_analysis_and_exports(test_context):
    client, _ = test_context
    ids = _seed(client)
    _set_stock(client, ids["beans"], ids["counter"], 10)
    _set_stock(client, ids["beans"], ids["counter"], 4)

    analysis = client.get("/analysis", params={"period": "week"}).json()
    assert analysis["is_empty"] is False
    trend = analysis["item_analysis"][ids["beans"]]
    assert trend["total_restocked"] == 10
    assert trend["total_consumed"] == 6
    assert trend["trajectory"] == "increasing"

    empty = client.get("/analysis", params={"item_id": "nothing"}).json()
    assert empty["is_empty"] is True

    res = client.get("/analysis", params={"period": "fortnight"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "bad_request"

    res = client.get("/analysis/export", params={"period": "month"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert 'filename="stock-analysis-month-' in res.headers["content-disposition"]
    lines = res.text.splitlines()
    assert lines[0].startswith('"Item Name","Unit"')
    assert lines[1].startswith('"Item A","kg","10","6"')

    res = client.get("/alerts/export")
    assert res.status_code == 200
    assert 'filename="stock-alerts-' in res.headers["content-disposition"]
    assert res.text.splitlines()[1] == '"Item A","kg","warning","4","5"'


def test_transactions_api(test_context):
    client, session_local = test_context
    ids = _seed(client)
    _set_stock(client, ids["beans"], ids["counter"], 8)

    log = client.get("/transactions").json()
    assert log["pagination"]["total"] == 6
    newest = log["items"][0]
    assert newest["type"] == "STOCK_UPDATED"
    assert newest["label"] == "Stock Updated"
    assert newest["description"] == "Item A stock increased by +8 kg at Front Counter"

    page = client.get("/transactions", params={"limit": 2, "offset": 2}).json()
    assert page["pagination"]["count"] == 2
    assert page["pagination"]["has_next"] is True

    filtered = client.get("/transactions", params={"type": "item_added"}).json()
    assert [row["type"] for row in filtered["items"]] == ["ITEM_ADDED"]

    searched = client.get("/transactions", params={"search": "acme"}).json()
    assert {row["type"] for row in searched["items"]} == {"SUPPLIER_ADDED", "ITEM_ADDED"}

    assert client.get("/transactions", params={"type": "NOPE"}).status_code == 400
    assert client.get("/transactions", params={"date_filter": "decade"}).status_code == 400

    res = client.get("/transactions/export", params={"date_filter": "today"})
    assert res.status_code == 200
    assert res.text.splitlines()[0] == '"Timestamp","Type","User","Description","Details"'
    assert len(res.text.splitlines()) == 7

    db = session_local()
    try:
        users = set(db.execute(select(InventoryTransaction.user_name)).scalars().all())
    finally:
        db.close()
    assert users == {"System"}


def test_patch_rejects_null_for_required_fields(test_context):
    client, _ = test_context
    ids = _seed(client)

    for path in (
        f"/locations/{ids['counter']}",
        f"/categories/{ids['coffee']}",
        f"/suppliers/{ids['supplier']}",
    ):
        res = client.patch(path, json={"name": None})
        assert res.status_code == 422, res.text
        assert res.json()["error"]["code"] == "validation_error"

    res = client.patch(f"/locations/{ids['counter']}", json={"type": None})
    assert res.status_code == 422

    assert client.get(f"/locations/{ids['counter']}").json()["name"] == "Front Counter"
    assert client.get(f"/categories/{ids['coffee']}").json()["name"] == "Coffee"


def test_patch_strips_names(test_context):
    client, _ = test_context
    ids = _seed(client)

    res = client.patch(f"/categories/{ids['coffee']}", json={"name": "  Beans "})
    assert res.status_code == 200, res.text
    assert res.json()["name"] == "Beans"

    res = client.patch(f"/suppliers/{ids['supplier']}", json={"name": " Acme Coffee  "})
    assert res.status_code == 200, res.text
    assert res.json()["name"] == "Acme Coffee"

    res = client.patch(f"/suppliers/{ids['supplier']}", json={"name": "   "})
    assert res.status_code == 422
