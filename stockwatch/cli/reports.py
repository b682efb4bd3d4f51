# stockwatch/cli/reports.py
import asyncio

import click

from stockwatch.core.enums import MovementType
from stockwatch.core.exceptions import InventoryAPIError
from stockwatch.services.inventory_api import InventoryAPIClient, unwrap_list
from stockwatch.services import report_service


@click.command('low-stock')
def low_stock():
    """List products below their reorder level"""

    async def _report():
        client = InventoryAPIClient.from_settings()
        products = unwrap_list(await client.get_products())
        return report_service.low_stock_products(products)

    try:
        rows = asyncio.run(_report())
    except InventoryAPIError as e:
        raise click.ClickException(f"Could not load products: {e}")

    if not rows:
        click.secho("All stock levels are OK.", fg="green")
        return

    click.echo(f"{'Product':<40} {'Stock':>7} {'Threshold':>10}  Status")
    for row in rows:
        click.echo(f"{row.name[:40]:<40} {row.quantity:>7} {row.reorder_level:>10}  {row.status.label}")
    click.echo(f"\n{len(rows)} product(s) low on stock")


@click.command()
def dashboard():
    """Print dashboard totals"""
    summary = asyncio.run(report_service.dashboard_summary(InventoryAPIClient.from_settings()))

    click.echo(f"Categories:      {summary.total_categories}")
    click.echo(f"Products:        {summary.total_products}")
    click.echo(f"Sales:           {summary.total_sales}")
    click.echo(f"Customers:       {summary.total_customers}")
    click.echo(f"Low stock items: {summary.low_stock_items}")


@click.command('stock-statement')
@click.option('--type', 'movement_type', type=click.Choice([t.value for t in MovementType]), default=None,
              help='Only show one direction')
def stock_statement(movement_type):
    """Print the stock-in / stock-out history, newest first"""

    async def _report():
        client = InventoryAPIClient.from_settings()
        movements = unwrap_list(await client.get_stock_movements())
        return report_service.stock_statement(
            movements, movement_type=MovementType(movement_type) if movement_type else None
        )

    try:
        entries = asyncio.run(_report())
    except InventoryAPIError as e:
        raise click.ClickException(f"Could not load stock movements: {e}")

    if not entries:
        click.echo("No stock activities found.")
        return

    for entry in entries:
        when = entry.created_at.strftime('%Y-%m-%d %H:%M') if entry.created_at else '-'
        colour = "green" if entry.type is MovementType.STOCK_IN else "red"
        click.secho(f"{when:<17} {entry.type.value.upper():<10}", fg=colour, nl=False)
        click.echo(f" {entry.product_name[:40]:<40} {entry.quantity:>7}")
        if entry.note:
            click.echo(f"{'':<28} Note: {entry.note}")
