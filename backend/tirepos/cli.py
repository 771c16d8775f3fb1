# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/tirepos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Apply all migrations, then seed the default brands and tire sizes. Safe to re-run.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Catalog:
# - python -m flask catalog seed
#   Insert any missing default brands and tire sizes.
# - python -m flask catalog list
#   Print brands, tire sizes and wheel sizes.
#
# Inventory:
# - python -m flask inventory low-stock
#   List products at or below their low-stock threshold.
#
# Reports:
# - python -m flask reports daily [--date 2026-01-31]
#   Print the daily sales summary (defaults to today).

import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade

from .extensions import db
from .services import catalog_service, products_service, reporting_service
from .time_utils import local_today, parse_local_date


def _cents(value: int) -> str:
    sign = "-" if value < 0 else ""
    value = abs(value)
    return f"{sign}{value // 100}.{value % 100:02d}"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Upgrade the database schema to head and seed the default catalog."""
    click.echo("START Initializing TirePOS database...")

    upgrade(directory=current_app.extensions["migrate"].directory)
    click.echo("PASS Schema is at the latest revision")

    created = catalog_service.seed_default_catalog()
    click.echo(f"PASS Brands added: {created['brands']}, tire sizes added: {created['tire_sizes']}")

    click.echo("DONE TirePOS database ready")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm dropping all data')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        raise SystemExit(1)

    db.drop_all()
    db.create_all()
    click.echo("PASS All tables dropped and recreated")


@click.group('catalog')
def catalog_group():
    """Brand and size catalog commands."""


@catalog_group.command('seed')
@with_appcontext
def seed_catalog():
    """Insert any missing default brands and tire sizes."""
    created = catalog_service.seed_default_catalog()
    click.echo(f"PASS Brands added: {created['brands']}, tire sizes added: {created['tire_sizes']}")


@catalog_group.command('list')
@with_appcontext
def list_catalog():
    """Print the brand and size catalogs."""
    brands = catalog_service.list_brands()
    click.echo(f"Brands ({len(brands)}):")
    for brand in brands:
        click.echo(f"  {brand.id:>4}  {brand.name}")

    tire_sizes = catalog_service.list_tire_sizes()
    click.echo(f"\nTire sizes ({len(tire_sizes)}):")
    for size in tire_sizes:
        click.echo(f"  {size.id:>4}  {size.size_display}")

    wheel_sizes = catalog_service.list_wheel_sizes()
    click.echo(f"\nWheel sizes ({len(wheel_sizes)}):")
    for size in wheel_sizes:
        click.echo(f"  {size.id:>4}  {size.size_display}")


@click.group('inventory')
def inventory_group():
    """Stock inspection commands."""


@inventory_group.command('low-stock')
@with_appcontext
def low_stock():
    """List products at or below their low-stock threshold."""
    products = products_service.get_low_stock()
    if not products:
        click.echo("PASS No products are low on stock")
        return

    click.echo(f"WARN {len(products)} product(s) low on stock:")
    for p in products:
        size = f" [{p.size_display}]" if p.size_display else ""
        click.echo(f"  {p.stock_quantity:>5} / {p.low_stock_threshold:<5} {p.name}{size}")


@click.group('reports')
def reports_group():
    """Sales report commands."""


@reports_group.command('daily')
@click.option('--date', 'date_str', default=None, help='Local date YYYY-MM-DD (default: today)')
@with_appcontext
def daily_report(date_str):
    """Print the daily sales summary and top products."""
    try:
        day = parse_local_date(date_str) or local_today()
    except ValueError:
        raise click.BadParameter("date must be in YYYY-MM-DD format", param_hint="--date")

    report = reporting_service.daily_sales(day)
    summary = report["summary"]

    click.echo(f"Daily sales for {report['date']}")
    click.echo(f"  Invoices:  {summary['total_invoices']}")
    click.echo(f"  Subtotal:  {_cents(summary['total_subtotal'])}")
    click.echo(f"  Tax:       {_cents(summary['total_tax'])}")
    click.echo(f"  Discount:  {_cents(summary['total_discount'])}")
    click.echo(f"  Revenue:   {_cents(summary['total_revenue'])}")

    if report["top_products"]:
        click.echo("\nTop products:")
        for row in report["top_products"]:
            click.echo(f"  {row['total_quantity']:>5} x {row['product_name']}  {_cents(row['total_revenue'])}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(catalog_group)
    app.cli.add_command(inventory_group)
    app.cli.add_command(reports_group)
