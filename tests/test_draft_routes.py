import pytest

from voltbid.services.calculations import compute_estimate_totals

INFO = {"name": "Hialeah Duplex", "client_name": "Rosa Gil", "address": "455 E 9th St",
        "city": "Hialeah", "zip": "33010", "type": "residential"}


def test_empty_draft(client):
    body = client.get("/drafts/current").get_json()
    assert body["line_items"] == []
    assert body["current_step"] == 1
    assert body["labor_rate"] == 65
    assert all(v == 0 for v in body["totals"].values())


def test_items_are_stored_per_session(client):
    r = client.post("/drafts/current/items", json={
        "description": "Romex 12/2", "category": "Wire", "unit": "roll", "quantity": 3, "unit_price": 89.97,
        "labor_hours": 4,
    })
    assert r.status_code == 201
    temp_id = r.get_json()["temp_id"]

    r = client.patch(f"/drafts/current/items/{temp_id}", json={"quantity": 5})
    assert r.status_code == 200
    item = r.get_json()["line_items"][0]
    assert item["quantity"] == 5
    assert item["material_cost"] == pytest.approx(5 * 89.97)

    totals = client.get("/drafts/current/totals").get_json()
    expected = compute_estimate_totals(
        [{"quantity": 5, "unit_price": 89.97, "labor_hours": 4, "category": "Wire"}], 0.15, 0.10, 65)
    assert totals == pytest.approx(expected.to_dict())

    # A fresh client has its own cookie jar, hence its own draft token
    other = client.application.test_client()
    assert other.get("/drafts/current").get_json()["line_items"] == []


def test_unknown_temp_id(client):
    assert client.patch("/drafts/current/items/missing", json={"quantity": 1}).status_code == 404
    assert client.delete("/drafts/current/items/missing").status_code == 404


def test_update_metadata_and_steps(client):
    r = client.put("/drafts/current", json={"project_info": INFO, "overhead_pct": 0.2, "action": "next"})
    assert r.status_code == 200
    body = r.get_json()
    assert body["project_info"]["name"] == "Hialeah Duplex"
    assert body["overhead_pct"] == 0.2
    assert body["current_step"] == 2

    body = client.put("/drafts/current", json={"step": 9}).get_json()
    assert body["current_step"] == 3
    assert body["project_info"]["city"] == "Hialeah"


def test_update_metadata_validation(client):
    r = client.put("/drafts/current", json={"profit_pct": 2, "project_info": {"zip": "1"}, "action": "jump"})
    assert r.status_code == 400
    assert set(r.get_json()["fields"]) == {"profit_pct", "zip", "action"}


def test_commit_creates_project(client):
    client.put("/drafts/current", json={"project_info": INFO, "labor_rate": 70})
    client.post("/drafts/current/items", json={
        "description": "Gut old wiring", "category": "Demolition", "unit": "lot", "quantity": 1,
        "unit_price": 0, "labor_hours": 12,
    })
    draft_totals = client.get("/drafts/current/totals").get_json()

    r = client.post("/drafts/current/commit")
    assert r.status_code == 201
    project_id = r.get_json()["project_id"]
    assert r.get_json()["draft"]["saved_project_id"] == project_id

    project = client.get(f"/api/projects/{project_id}").get_json()
    assert project["labor_rate"] == 70
    assert project["line_items"][0]["labor_rate"] is None
    assert project["totals"] == pytest.approx(draft_totals)


def test_commit_incomplete_draft_conflicts(client):
    r = client.post("/drafts/current/commit")
    assert r.status_code == 409


def test_reset(client):
    client.post("/drafts/current/items", json={
        "description": "x", "category": "Wire", "unit": "each", "quantity": 1, "unit_price": 1,
    })
    body = client.delete("/drafts/current").get_json()
    assert body["line_items"] == []


def test_large_draft_round_trips_with_a_small_cookie(client):
    for i in range(150):
        r = client.post("/drafts/current/items", json={
            "description": f"Duplex receptacle, 20A tamper-resistant, kitchen circuit {i}",
            "category": "Devices", "unit": "each", "quantity": i + 1, "unit_price": 3.25, "labor_hours": 0.25,
        })
        assert r.status_code == 201
        assert len(r.headers.get("Set-Cookie", "")) < 200

    with client.session_transaction() as sess:
        assert list(sess.keys()) == ["draft_token"]

    body = client.get("/drafts/current").get_json()
    assert len(body["line_items"]) == 150
    assert body["line_items"][-1]["quantity"] == 150
    assert [i["sort_order"] for i in body["line_items"]] == list(range(150))
    assert body["totals"]["material_subtotal"] == pytest.approx(3.25 * sum(range(1, 151)))


def test_blank_project_info_clears_the_field(client):
    client.put("/drafts/current", json={"project_info": INFO})
    r = client.put("/drafts/current", json={"project_info": {"name": "", "city": "  "}})
    assert r.status_code == 200
    info = r.get_json()["project_info"]
    assert info["name"] == ""
    assert info["city"] == ""
    assert info["client_name"] == "Rosa Gil"

    # Still incomplete, so commit is refused
    assert client.post("/drafts/current/commit").status_code == 409


def test_second_commit_is_refused_until_reset(client):
    client.put("/drafts/current", json={"project_info": INFO})
    first = client.post("/drafts/current/commit")
    assert first.status_code == 201

    again = client.post("/drafts/current/commit")
    assert again.status_code == 409
    assert "already saved" in again.get_json()["error"]
    assert len(client.get("/api/projects").get_json()) == 1

    client.delete("/drafts/current")
    client.put("/drafts/current", json={"project_info": INFO})
    assert client.post("/drafts/current/commit").status_code == 201
