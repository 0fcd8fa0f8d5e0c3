# Overview: Flask CLI command groups for shop bootstrap and maintenance.

# backend/shopledger/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Shops (tenants):
# - python -m flask shops create --name "Carniceria Don Jose" [--timezone America/Argentina/Cordoba]
#   Create a shop. Timezone defaults to DEFAULT_SHOP_TIMEZONE.
# - python -m flask shops list
#   List all shops.
# - python -m flask shops issue-token --shop-id 1 --uid cashier-ana
#   Print a bearer token for API calls as that user in that shop.
#
# System:
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).

import click
from flask.cli import with_appcontext

from .errors import LedgerError
from .extensions import db
from .services import auth_service, shop_service


@click.group('shops')
def shops_group():
    """Shop (tenant) management commands."""


@shops_group.command('create')
@click.option('--name', required=True, help='Shop name')
@click.option('--timezone', default=None, help='IANA timezone for day/month summaries')
@with_appcontext
def create_shop_cli(name, timezone):
    """Create a new shop (tenant)."""
    try:
        shop = shop_service.create_shop(name, timezone)
    except LedgerError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(f"PASS Created shop: {shop.name} (ID: {shop.id}, timezone: {shop.timezone})")


@shops_group.command('list')
@with_appcontext
def list_shops_cli():
    """List all shops."""
    shops = shop_service.list_shops()

    if not shops:
        click.echo("No shops found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Name':<40} {'Timezone'}")
    click.echo("="*80)

    for shop in shops:
        click.echo(f"{shop.id:<5} {shop.name:<40} {shop.timezone}")

    click.echo("="*80 + "\n")


@shops_group.command('issue-token')
@click.option('--shop-id', type=int, required=True, help='Shop ID')
@click.option('--uid', required=True, help='User id recorded as created_by')
@with_appcontext
def issue_token_cli(shop_id, uid):
    """Issue a bearer identity token for a user of a shop."""
    try:
        shop = shop_service.get_shop(shop_id)
    except LedgerError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(auth_service.issue_token(uid, shop.id))


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask shops create' to add a shop.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(shops_group)
    app.cli.add_command(system_group)
