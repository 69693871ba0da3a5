from time import perf_counter

from sqlalchemy import func, select

from brewstock.models.transaction import InventoryTransaction


def _p95_ms(values: list[float]) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    index = max(0, int(round(0.95 * len(ordered))) - 1)
    return ordered[min(index, len(ordered) - 1)]


def test_stock_update_and_dashboard_latency(test_context):
    client, session_local = test_context

    location = client.post("/locations", json={"name": "SLO Counter"})
    assert location.status_code == 201, location.text
    location_id = location.json()["id"]
    item = client.post("/items", json={"name": "SLO Beans", "unit": "kg", "min_stock": 5, "max_stock": 100})
    assert item.status_code == 201, item.text
    item_id = item.json()["id"]

    max_update_p95_ms = 1200.0
    max_read_ms = 1000.0
    sample_size = 25

    update_latencies_ms: list[float] = []
    for idx in range(sample_size):
        started = perf_counter()
        res = client.put(
            "/stock",
            json={"item_id": item_id, "location_id": location_id, "quantity": 100 - idx * 3},
        )
        update_latencies_ms.append((perf_counter() - started) * 1000)
        assert res.status_code == 200, res.text

    assert _p95_ms(update_latencies_ms) <= max_update_p95_ms

    for path in ("/dashboard", "/alerts", "/analysis?period=day", "/transactions"):
        started = perf_counter()
        res = client.get(path)
        duration_ms = (perf_counter() - started) * 1000
        assert res.status_code == 200, res.text
        assert duration_ms <= max_read_ms

    trend = client.get("/analysis", params={"period": "day"}).json()["item_analysis"][item_id]
    assert trend.get("restock_count") == 1
    assert trend.get("consumption_count") == sample_size - 1
    assert trend.get("trajectory") == "increasing"

    db = session_local()
    try:
        stock_updates = int(
            db.execute(
                select(func.count(InventoryTransaction.id)).where(InventoryTransaction.type == "STOCK_UPDATED")
            ).scalar_one()
        )
    finally:
        db.close()

    assert stock_updates == sample_size
