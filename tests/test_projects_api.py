import pytest


def test_create_defaults_rates_from_settings(client, project_payload):
    client.put("/api/settings", json={"default_labor_rate": 72.5, "default_overhead": 0.2})
    r = client.post("/api/projects", json=project_payload)
    assert r.status_code == 201
    body = r.get_json()
    assert body["labor_rate"] == 72.5
    assert body["overhead_pct"] == 0.2
    assert body["profit_pct"] == 0.10
    assert body["state"] == "FL"
    assert body["status"] == "draft"
    assert body["terms"]  # default terms copied in
    assert body["line_items"] == []
    assert body["line_item_count"] == 0
    assert all(v == 0 for v in body["totals"].values())


def test_create_validation_failure(client):
    r = client.post("/api/projects", json={"name": "", "zip": "abc", "overhead_pct": 1.5, "status": "won"})
    assert r.status_code == 400
    body = r.get_json()
    assert body["error"] == "validation_failed"
    for field in ("name", "client_name", "address", "city", "zip", "overhead_pct", "status"):
        assert field in body["fields"], field


def test_non_object_body_is_rejected(client):
    r = client.post("/api/projects", json=[1, 2])
    assert r.status_code == 400
    assert "__all__" in r.get_json()["fields"]


def test_detail_has_ordered_items_and_totals(client, make_project, add_item):
    p = make_project(labor_rate=65, overhead_pct=0.15, profit_pct=0.10)
    add_item(p["id"], quantity=4, unit_price=89.97, labor_hours=16)
    add_item(p["id"], description="Demo", category="Demolition", unit="lot", labor_hours=16)

    body = client.get(f"/api/projects/{p['id']}").get_json()
    assert [i["sort_order"] for i in body["line_items"]] == [0, 1]
    assert body["line_items"][0]["effective_labor_rate"] == 65
    assert body["line_items"][0]["line_total"] == pytest.approx(1399.88)
    t = body["totals"]
    assert t["demolition_subtotal"] == pytest.approx(1040.0)
    assert t["direct_cost"] == pytest.approx(2439.88)
    assert t["grand_total"] == pytest.approx(2439.88 * 1.15 * 1.10)


def test_list_includes_totals_and_filters(client, make_project, add_item):
    a = make_project(name="Alpha Plaza")
    make_project(name="Beta Tower", client_name="Zed")
    add_item(a["id"], quantity=2, unit_price=10)
    client.put(f"/api/projects/{a['id']}", json={"status": "won"})

    rows = client.get("/api/projects").get_json()
    assert [r["name"] for r in rows] == ["Beta Tower", "Alpha Plaza"]
    alpha = rows[1]
    assert alpha["line_item_count"] == 1
    assert alpha["totals"]["material_subtotal"] == 20
    assert "line_items" not in alpha

    assert [r["name"] for r in client.get("/api/projects?status=won").get_json()] == ["Alpha Plaza"]
    assert [r["name"] for r in client.get("/api/projects?search=zed").get_json()] == ["Beta Tower"]


def test_changing_default_rate_reprices_inheriting_items(client, make_project, add_item):
    p = make_project(labor_rate=65)
    add_item(p["id"], labor_hours=10)                 # inherits
    add_item(p["id"], labor_hours=10, labor_rate=90)  # own rate

    before = client.get(f"/api/projects/{p['id']}").get_json()["totals"]["labor_subtotal"]
    r = client.put(f"/api/projects/{p['id']}", json={"labor_rate": 75})
    assert r.status_code == 200
    after = r.get_json()["totals"]["labor_subtotal"]
    assert before == pytest.approx(650 + 900)
    assert after == pytest.approx(750 + 900)


def test_update_validation_and_status(client, make_project):
    p = make_project()
    r = client.put(f"/api/projects/{p['id']}", json={"status": "archived"})
    assert r.status_code == 400
    r = client.put(f"/api/projects/{p['id']}", json={"status": "submitted", "notes": "Bid due Friday"})
    assert r.status_code == 200
    assert r.get_json()["status"] == "submitted"
    assert r.get_json()["notes"] == "Bid due Friday"


def test_delete_cascades(client, make_project, add_item):
    p = make_project()
    item = add_item(p["id"])
    assert client.delete(f"/api/projects/{p['id']}").status_code == 200
    assert client.get(f"/api/projects/{p['id']}").status_code == 404
    r = client.put(f"/api/projects/{p['id']}/line-items/{item['id']}", json={"quantity": 2})
    assert r.status_code == 404


def test_unknown_project_is_404_json(client):
    r = client.get("/api/projects/9999")
    assert r.status_code == 404
    assert r.get_json()["error"] == "not_found"


def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok"}


def test_unknown_route_is_json_404(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.get_json()["error"] == "not_found"
