WIRE = {"name": "12 AWG THHN (500ft)", "sku": "THHN-12", "category": "Wire", "unit": "roll", "unit_price": 89.97}


def test_crud_round(client):
    r = client.post("/api/materials", json=WIRE)
    assert r.status_code == 201
    m = r.get_json()
    assert m["sku"] == "THHN-12"

    r = client.put(f"/api/materials/{m['id']}", json={"unit_price": 92.5})
    assert r.status_code == 200
    assert r.get_json()["unit_price"] == 92.5
    assert client.get(f"/api/materials/{m['id']}").get_json()["unit_price"] == 92.5

    assert client.delete(f"/api/materials/{m['id']}").status_code == 200
    assert client.get(f"/api/materials/{m['id']}").status_code == 404


def test_list_is_ordered_and_filterable(client):
    client.post("/api/materials", json={**WIRE, "name": "Wire B", "sku": "W-B"})
    client.post("/api/materials", json={**WIRE, "name": "wire a", "sku": "W-A"})
    client.post("/api/materials", json={"name": "Duplex Receptacle", "sku": "DEV-DUP",
                                        "category": "Devices", "unit": "each", "unit_price": 1.98})

    rows = client.get("/api/materials").get_json()
    assert [r["name"] for r in rows] == ["Duplex Receptacle", "wire a", "Wire B"]
    assert [r["name"] for r in client.get("/api/materials?category=Devices").get_json()] == ["Duplex Receptacle"]
    assert [r["sku"] for r in client.get("/api/materials?search=w-a").get_json()] == ["W-A"]


def test_validation(client):
    r = client.post("/api/materials", json={"name": "X", "category": "Demolition", "unit": "gallon", "unit_price": -1})
    assert r.status_code == 400
    fields = r.get_json()["fields"]
    assert set(fields) >= {"category", "unit", "unit_price"}


def test_duplicate_sku_conflicts(client):
    assert client.post("/api/materials", json=WIRE).status_code == 201
    r = client.post("/api/materials", json={**WIRE, "name": "Another"})
    assert r.status_code == 409
    assert "SKU" in r.get_json()["error"]
