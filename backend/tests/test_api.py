"""
HTTP surface tests: authentication, status codes and JSON shapes.
"""
from datetime import timedelta
from decimal import Decimal

from conftest import ALICE
from importhub.core.auth import create_access_token

ORDER_BODY = {
    "supplier_id": 1,
    "import_date": "2026-10-01",
    "estimated_arrival": "2026-11-15",
    "notes": "first container",
    "items": [
        {"product_id": 1, "quantity": 2, "unit_price": 10.00},
        {"product_id": 2, "quantity": 1, "unit_price": 5.00},
    ],
}


def _create(client, headers, body=None):
    res = client.post("/api/imports", json=body or ORDER_BODY, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["import"]


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "UP"
    assert body["service"] == "Imports Service"
    assert "timestamp" in body


def test_missing_token_is_401(client):
    res = client.get("/api/imports")
    assert res.status_code == 401
    assert "error" in res.json()


def test_bad_tokens_are_403(client, test_settings):
    res = client.get("/api/imports", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 403

    expired = create_access_token(ALICE.id, test_settings, ttl=timedelta(seconds=-5))
    res = client.get("/api/imports", headers={"Authorization": f"Bearer {expired}"})
    assert res.status_code == 403

    ghost = create_access_token(777, test_settings)
    res = client.get("/api/imports", headers={"Authorization": f"Bearer {ghost}"})
    assert res.status_code == 403


def test_order_scenario(client, alice_headers, admin_headers):
    res = client.post("/api/imports", json=ORDER_BODY, headers=alice_headers)
    assert res.status_code == 201
    body = res.json()
    assert body["message"]
    created = body["import"]
    assert Decimal(created["total_amount"]) == Decimal("25.00")
    assert created["status"] == "pending"
    assert created["supplier_name"] == "Tech Supplies China"
    assert created["import_code"].startswith("IMP-")

    res = client.put(
        f"/api/imports/{created['id']}/status",
        json={"status": "shipped", "tracking_number": "TRK123"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    updated = res.json()["import"]
    assert updated["status"] == "shipped"
    assert updated["tracking_number"] == "TRK123"
    for field in ("import_code", "user_id", "supplier_id", "import_date", "estimated_arrival", "notes"):
        assert updated[field] == created[field]
    assert Decimal(updated["total_amount"]) == Decimal("25.00")

    shipped = client.get("/api/imports", params={"status": "shipped"}, headers=alice_headers).json()
    assert [o["id"] for o in shipped] == [created["id"]]
    pending = client.get("/api/imports", params={"status": "pending"}, headers=alice_headers).json()
    assert pending == []


def test_three_lines_of_19_99(client, alice_headers):
    body = dict(ORDER_BODY, items=[
        {"product_id": 1, "quantity": 3, "unit_price": 19.99},
        {"product_id": 2, "quantity": 3, "unit_price": 19.99},
        {"product_id": 3, "quantity": 3, "unit_price": 19.99},
    ])
    created = _create(client, alice_headers, body)
    assert Decimal(created["total_amount"]) == Decimal("179.91")


def test_create_validation_errors_name_the_field(client, alice_headers):
    res = client.post("/api/imports", json=dict(ORDER_BODY, items=[]), headers=alice_headers)
    assert res.status_code == 400
    assert res.json()["field"] == "items"

    bad_qty = dict(ORDER_BODY, items=[{"product_id": 1, "quantity": 0, "unit_price": 1}])
    res = client.post("/api/imports", json=bad_qty, headers=alice_headers)
    assert res.status_code == 400
    assert res.json()["field"] == "items[0].quantity"

    wrong_type = dict(ORDER_BODY, items=[{"product_id": 1, "quantity": "many", "unit_price": 1}])
    res = client.post("/api/imports", json=wrong_type, headers=alice_headers)
    assert res.status_code == 400
    assert res.json()["field"] == "items[0].quantity"

    no_date = {k: v for k, v in ORDER_BODY.items() if k != "import_date"}
    res = client.post("/api/imports", json=no_date, headers=alice_headers)
    assert res.status_code == 400
    assert res.json()["field"] == "import_date"

    assert client.get("/api/imports", headers=alice_headers).json() == []


def test_status_update_requires_admin(client, alice_headers):
    created = _create(client, alice_headers)

    res = client.put(f"/api/imports/{created['id']}/status", json={"status": "shipped"}, headers=alice_headers)
    assert res.status_code == 403

    detail = client.get(f"/api/imports/{created['id']}", headers=alice_headers).json()
    assert detail["status"] == "pending"


def test_status_update_rejects_unknown_label(client, alice_headers, admin_headers):
    created = _create(client, alice_headers)

    res = client.put(f"/api/imports/{created['id']}/status", json={"status": "sunk"}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["field"] == "status"

    detail = client.get(f"/api/imports/{created['id']}", headers=admin_headers).json()
    assert detail["status"] == "pending"


def test_status_update_unknown_order(client, admin_headers):
    res = client.put("/api/imports/999/status", json={"status": "shipped"}, headers=admin_headers)
    assert res.status_code == 404


def test_users_only_see_their_own_orders(client, alice_headers, bob_headers, admin_headers):
    mine = _create(client, alice_headers)
    theirs = _create(client, bob_headers)

    listed = client.get("/api/imports", headers=alice_headers).json()
    assert [o["id"] for o in listed] == [mine["id"]]
    assert listed[0]["created_by"] == "alice"

    res = client.get(f"/api/imports/{theirs['id']}", headers=alice_headers)
    assert res.status_code == 404
    missing = client.get("/api/imports/31337", headers=alice_headers)
    assert missing.status_code == 404
    assert res.json() == missing.json()

    everything = client.get("/api/imports", headers=admin_headers).json()
    assert {o["id"] for o in everything} == {mine["id"], theirs["id"]}


def test_detail_contains_items(client, alice_headers):
    created = _create(client, alice_headers)

    detail = client.get(f"/api/imports/{created['id']}", headers=alice_headers).json()
    assert len(detail["items"]) == 2
    first = detail["items"][0]
    assert first["product_name"] == "Smartphone XYZ"
    assert first["quantity"] == 2
    assert Decimal(first["unit_price"]) == Decimal("10.00")
    assert Decimal(first["total_price"]) == Decimal("20.00")


def test_filter_by_supplier(client, alice_headers):
    s1 = _create(client, alice_headers)
    s2 = _create(client, alice_headers, dict(ORDER_BODY, supplier_id=2))

    res = client.get("/api/imports", params={"supplier_id": 2}, headers=alice_headers)
    assert [o["id"] for o in res.json()] == [s2["id"]]
    assert s1["id"] != s2["id"]

    res = client.get("/api/imports", params={"status": "drifting"}, headers=alice_headers)
    assert res.status_code == 400


def test_dashboard_shape(client, alice_headers, bob_headers):
    _create(client, alice_headers)
    _create(client, bob_headers)

    res = client.get("/api/imports/stats/dashboard", headers=alice_headers)
    assert res.status_code == 200
    stats = res.json()
    assert set(stats) == {"status_breakdown", "monthly_trends", "top_suppliers"}
    assert stats["status_breakdown"][0]["status"] == "pending"
    assert stats["status_breakdown"][0]["count"] == 2
    assert len(stats["monthly_trends"]) == 1
    assert stats["monthly_trends"][0]["imports_count"] == 2
    assert len(stats["top_suppliers"]) <= 5
    assert Decimal(stats["top_suppliers"][0]["total_value"]) == Decimal("50.00")


def test_directory_endpoints(client, alice_headers):
    suppliers = client.get("/api/suppliers", headers=alice_headers).json()
    assert len(suppliers) == 6
    assert suppliers[0]["name"] == "Andes Imports"

    products = client.get("/api/products", params={"category": "Electronics"}, headers=alice_headers).json()
    assert {p["name"] for p in products} == {"Smartphone XYZ", "Laptop ABC"}

    product = client.get("/api/products/3", headers=alice_headers).json()
    assert product["supplier_name"] == "Global Components"

    assert client.get("/api/products/99", headers=alice_headers).status_code == 404
    assert client.get("/api/suppliers").status_code == 401


def test_admin_token_claims_do_not_grant_admin(client, test_settings):
    # role comes from the users table, not from the token payload
    forged = create_access_token(ALICE.id, test_settings, role="admin")
    res = client.put("/api/imports/1/status", json={"status": "shipped"},
                     headers={"Authorization": f"Bearer {forged}"})
    assert res.status_code == 403


def test_unit_price_beyond_column_range_is_400(client, alice_headers):
    huge = dict(ORDER_BODY, items=[{"product_id": 1, "quantity": 1, "unit_price": 1e30}])
    res = client.post("/api/imports", json=huge, headers=alice_headers)
    assert res.status_code == 400
    assert res.json()["field"] == "items[0].unit_price"

    cents = dict(ORDER_BODY, items=[{"product_id": 1, "quantity": 1, "unit_price": 1.005}])
    res = client.post("/api/imports", json=cents, headers=alice_headers)
    assert res.status_code == 400
    assert res.json()["field"] == "items[0].unit_price"
