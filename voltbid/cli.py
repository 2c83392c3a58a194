import click
from flask import current_app
from flask.cli import with_appcontext

from voltbid.extensions import db
from voltbid.services.calculations import compute_project_totals
from voltbid.services.draft import purge_stale_drafts
from voltbid.services.errors import ServiceError
from voltbid.services.materials_service import import_materials_seed
from voltbid.services.projects import get_project
from voltbid.services.settings_service import get_settings
from voltbid.utils.formatters import format_currency, format_percent


@click.group()
def seed():
    """Seed reference data."""


@seed.command("settings")
@with_appcontext
def seed_settings():
    row = get_settings(db.session)
    db.session.commit()
    click.echo(f"Company settings ready: {row.company_name} (labor rate {format_currency(row.default_labor_rate)}/hr)")


@seed.command("materials")
@click.option("--file", "path", type=click.Path(dir_okay=False), default=None,
              help="CSV or XLSX with Name, SKU, Category, Unit, Unit Price columns")
@with_appcontext
def seed_materials(path):
    path = path or current_app.config["MATERIALS_SEED_PATH"]
    try:
        inserted, updated = import_materials_seed(db.session, path)
    except ServiceError as e:
        db.session.rollback()
        raise click.ClickException(str(e))
    db.session.commit()
    click.echo(f"Materials imported from {path}: inserted={inserted} updated={updated}")


@click.group()
def estimate():
    """Estimate inspection."""


@estimate.command("totals")
@click.argument("project_id", type=int)
@with_appcontext
def estimate_totals(project_id):
    try:
        project = get_project(db.session, project_id)
    except ServiceError as e:
        raise click.ClickException(str(e))

    t = compute_project_totals(project)
    click.echo(f"Project {project.id}: {project.name} ({len(project.line_items)} line items)")
    rows = [
        ("Material Subtotal", t.material_subtotal),
        ("Labor Subtotal", t.labor_subtotal),
        ("Demolition Subtotal", t.demolition_subtotal),
        ("Direct Cost", t.direct_cost),
        (f"Overhead ({format_percent(project.overhead_pct)})", t.overhead),
        ("Subtotal with Overhead", t.subtotal_with_overhead),
        (f"Profit ({format_percent(project.profit_pct)})", t.profit),
        ("Grand Total", t.grand_total),
    ]
    for label, value in rows:
        click.echo(f"  {label:<26}{format_currency(value):>16}")


@click.group()
def drafts():
    """Server-side draft maintenance."""


@drafts.command("purge")
@click.option("--days", type=click.IntRange(min=1), default=30, show_default=True,
              help="Delete drafts not updated for this many days")
@with_appcontext
def purge_drafts(days):
    deleted = purge_stale_drafts(db.session, days)
    db.session.commit()
    click.echo(f"Purged {deleted} draft(s) older than {days} days")


def register_cli(app):
    app.cli.add_command(seed)
    app.cli.add_command(estimate)
    app.cli.add_command(drafts)
