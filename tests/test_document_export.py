import sys
import types

import pytest

from voltbid.extensions import db
from voltbid.services.calculations import compute_project_totals
from voltbid.services.exports import render_estimate_html, render_estimate_pdf
from voltbid.services.projects import add_line_item, create_project, get_project
from voltbid.services.settings_service import get_settings
from voltbid.utils.formatters import format_currency


@pytest.fixture()
def fake_weasyprint(monkeypatch):
    """Stand-in for WeasyPrint's HTML class; records the markup it was given."""
    seen = {}

    class HTML:
        def __init__(self, string=None, base_url=None):
            seen["html"] = string
            seen["base_url"] = base_url

        def write_pdf(self, *args, **kwargs):
            return b"%PDF-1.7 fake"

    monkeypatch.setitem(sys.modules, "weasyprint", types.SimpleNamespace(HTML=HTML))
    return seen


def _project(session, with_demo=True):
    p = create_project(
        session, name="Coral Gables Office", client_name="Jon Pike", client_company="Pike & Co",
        address="220 Miracle Mile", city="Coral Gables", zip="33134", terms="Net 15.", notes="Weekend access only.",
    )
    add_line_item(session, p.id, description="Recessed LED 6in", category="Lighting", unit="each",
                  quantity=24, unit_price=18.5, labor_hours=12)
    if with_demo:
        add_line_item(session, p.id, description="Remove ceiling grid", category="Demolition", unit="lot",
                      quantity=1, unit_price=0, labor_hours=10)
    session.commit()
    return get_project(session, p.id)


def test_html_shows_engine_totals(app):
    with app.test_request_context():
        project = _project(db.session)
        totals = compute_project_totals(project)
        html = render_estimate_html(project, get_settings(db.session))

    for value in (totals.material_subtotal, totals.labor_subtotal, totals.demolition_subtotal,
                  totals.direct_cost, totals.overhead, totals.profit, totals.grand_total):
        assert format_currency(value) in html
    assert "Coral Gables Office" in html
    assert "Pike &amp; Co" in html
    assert "Test Electric LLC" in html
    assert "Net 15." in html
    assert "15.0%" in html and "10.0%" in html


def test_demolition_row_hidden_when_zero(app):
    with app.test_request_context():
        project = _project(db.session, with_demo=False)
        html = render_estimate_html(project)
    assert 'data-total="demolition_subtotal"' not in html
    assert 'data-total="grand_total"' in html


def test_pdf_renders_the_same_markup(app, fake_weasyprint):
    with app.test_request_context():
        project = _project(db.session)
        html = render_estimate_html(project)
        pdf = render_estimate_pdf(project, base_url="http://example.test/")

    assert pdf.startswith(b"%PDF")
    assert fake_weasyprint["base_url"] == "http://example.test/"
    # generated_on is the only moving part and is a date, so the markup matches
    assert fake_weasyprint["html"] == html
