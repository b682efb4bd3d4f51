import click
from dotenv import load_dotenv

from stockwatch.cli.watch_alerts import watch
from stockwatch.cli.reports import dashboard, low_stock, stock_statement


@click.group()
def cli():
    """Stockwatch command line tools"""
    load_dotenv()


cli.add_command(watch)
cli.add_command(low_stock)
cli.add_command(dashboard)
cli.add_command(stock_statement)
