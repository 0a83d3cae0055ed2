"""Health endpoint tests.

Tests cover:
    - Liveness always 200
    - /health 200 when both stores respond
    - /health 503 naming the failing store, without exception details
"""


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_health_ok(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "OK", "database": "Connected", "storage": "Connected"}


async def test_health_reports_database_down(client, record_store):
    record_store.fail_list = True

    res = await client.get("/health")

    assert res.status_code == 503
    assert res.json() == {"status": "Error", "database": "Disconnected", "storage": "Connected"}


async def test_health_reports_storage_down(client, object_store):
    object_store.fail = True

    res = await client.get("/health")

    assert res.status_code == 503
    assert res.json()["storage"] == "Disconnected"
    assert "bucket unreachable" not in res.text
