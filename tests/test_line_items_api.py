import pytest


@pytest.fixture()
def material(client):
    r = client.post("/api/materials", json={
        "name": "200A Main Breaker Panel 40-Space", "sku": "PNL-200",
        "category": "Panels & Breakers", "unit": "each", "unit_price": 289.0,
    })
    assert r.status_code == 201
    return r.get_json()


def test_create_appends_with_next_sort_order(client, make_project, add_item):
    p = make_project()
    a = add_item(p["id"])
    b = add_item(p["id"], sort_order=7)
    c = add_item(p["id"])
    assert (a["sort_order"], b["sort_order"], c["sort_order"]) == (0, 7, 8)

    rows = client.get(f"/api/projects/{p['id']}/line-items").get_json()
    assert [r["id"] for r in rows] == [a["id"], b["id"], c["id"]]


def test_create_from_catalog_material(client, make_project, material):
    p = make_project()
    r = client.post(f"/api/projects/{p['id']}/line-items", json={
        "material_id": material["id"], "category": "Panels & Breakers", "quantity": 2, "labor_hours": 8,
    })
    assert r.status_code == 201
    body = r.get_json()
    assert body["description"] == "200A Main Breaker Panel 40-Space"
    assert body["unit_price"] == 289.0
    assert body["material_cost"] == pytest.approx(578.0)
    assert body["labor_rate"] is None
    assert body["effective_labor_rate"] == p["labor_rate"]


def test_create_from_unknown_material_conflicts(client, make_project):
    p = make_project()
    r = client.post(f"/api/projects/{p['id']}/line-items", json={"material_id": 999, "category": "Wire"})
    assert r.status_code == 409


def test_create_validation(client, make_project):
    p = make_project()
    r = client.post(f"/api/projects/{p['id']}/line-items", json={
        "description": "Bad", "category": "Plumbing", "unit": "each", "quantity": -1,
        "unit_price": "abc", "labor_rate": -5, "sort_order": 1.5,
    })
    assert r.status_code == 400
    fields = r.get_json()["fields"]
    for f in ("category", "quantity", "unit_price", "labor_rate", "sort_order"):
        assert f in fields, f


def test_create_on_unknown_project(client):
    r = client.post("/api/projects/424242/line-items", json={
        "description": "x", "category": "Wire", "unit": "each", "quantity": 1, "unit_price": 1,
    })
    assert r.status_code == 404


def test_update_and_clear_rate_override(client, make_project, add_item):
    p = make_project(labor_rate=60)
    item = add_item(p["id"], labor_hours=2, labor_rate=100)
    assert item["labor_cost"] == 200

    r = client.put(f"/api/projects/{p['id']}/line-items/{item['id']}", json={"labor_rate": None, "quantity": 3})
    assert r.status_code == 200
    body = r.get_json()
    assert body["labor_rate"] is None
    assert body["labor_cost"] == 120
    assert body["quantity"] == 3


def test_zero_item_rate_is_not_replaced_by_default(client, make_project, add_item):
    p = make_project(labor_rate=60)
    item = add_item(p["id"], labor_hours=5, labor_rate=0)
    assert item["labor_cost"] == 0
    totals = client.get(f"/api/projects/{p['id']}").get_json()["totals"]
    assert totals["labor_subtotal"] == 0


def test_item_must_belong_to_project(client, make_project, add_item):
    p1 = make_project()
    p2 = make_project(name="Other")
    item = add_item(p1["id"])
    assert client.put(f"/api/projects/{p2['id']}/line-items/{item['id']}", json={"quantity": 2}).status_code == 404
    assert client.delete(f"/api/projects/{p2['id']}/line-items/{item['id']}").status_code == 404


def test_delete_updates_totals(client, make_project, add_item):
    p = make_project()
    keep = add_item(p["id"], quantity=1, unit_price=10)
    drop = add_item(p["id"], quantity=1, unit_price=90)
    assert client.delete(f"/api/projects/{p['id']}/line-items/{drop['id']}").status_code == 200

    body = client.get(f"/api/projects/{p['id']}").get_json()
    assert [i["id"] for i in body["line_items"]] == [keep["id"]]
    assert body["totals"]["material_subtotal"] == 10
