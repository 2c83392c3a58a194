import os
# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import pytest
from voltbid import create_app
from voltbid.extensions import db


@pytest.fixture(scope="session")
def app():
    app = create_app()
    app.config.update(
        TESTING=True,
        COMPANY_NAME="Test Electric LLC",
    )
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


@pytest.fixture(autouse=True)
def _db_clean(app):
    # Clean BEFORE each test
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()
    yield
    # And AFTER each test (keeps state hermetic even if a test fails mid-transaction)
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()


PROJECT_PAYLOAD = {
    "name": "Kendall Retail Fit-Out",
    "client_name": "Ana Ruiz",
    "client_company": "Ruiz Holdings",
    "address": "12000 SW 88th St",
    "city": "Miami",
    "state": "fl",
    "zip": "33186",
    "type": "commercial",
}


@pytest.fixture()
def project_payload():
    return dict(PROJECT_PAYLOAD)


@pytest.fixture()
def make_project(client):
    """POST a project and return its JSON; overrides are merged into the default payload."""
    def _make(**overrides):
        body = {**PROJECT_PAYLOAD, **overrides}
        r = client.post("/api/projects", json=body)
        assert r.status_code == 201, r.get_json()
        return r.get_json()
    return _make


@pytest.fixture()
def add_item(client):
    def _add(project_id, **fields):
        body = {
            "description": "12 AWG THHN (500ft)",
            "category": "Wire",
            "unit": "roll",
            "quantity": 1,
            "unit_price": 0,
            "labor_hours": 0,
            **fields,
        }
        r = client.post(f"/api/projects/{project_id}/line-items", json=body)
        assert r.status_code == 201, r.get_json()
        return r.get_json()
    return _add
