# tests/test_cli/test_cli_commands.py
import asyncio
import pytest
from click.testing import CliRunner

from stockwatch.cli import cli
from stockwatch.cli import watch_alerts
from stockwatch.core.exceptions import InventoryAPIError, PushChannelError
from stockwatch.services.notifiers import ConsoleNotifier


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched_client(mocker, mock_api_client):
    mocker.patch("stockwatch.cli.reports.InventoryAPIClient.from_settings", return_value=mock_api_client)
    return mock_api_client


def test_low_stock_command(runner, patched_client, sample_products):
    patched_client.get_products.return_value = {"data": {"data": sample_products, "total": 4}}

    result = runner.invoke(cli, ["low-stock"])

    assert result.exit_code == 0
    assert "Blue Mug" in result.output
    assert "Out of stock" in result.output
    assert "2 product(s) low on stock" in result.output


def test_low_stock_command_all_ok(runner, patched_client):
    result = runner.invoke(cli, ["low-stock"])

    assert result.exit_code == 0
    assert "All stock levels are OK." in result.output


def test_low_stock_command_backend_down(runner, patched_client):
    patched_client.get_products.side_effect = InventoryAPIError("Network error: refused")

    result = runner.invoke(cli, ["low-stock"])

    assert result.exit_code != 0
    assert "Could not load products" in result.output


def test_dashboard_command(runner, patched_client):
    patched_client.get_sales.return_value = {"data": {"data": [], "total": 12}}

    result = runner.invoke(cli, ["dashboard"])

    assert result.exit_code == 0
    assert "Sales:           12" in result.output


def test_stock_statement_command(runner, patched_client, sample_movements):
    patched_client.get_stock_movements.return_value = {"data": {"data": sample_movements, "total": 4}}

    result = runner.invoke(cli, ["stock-statement", "--type", "stock in"])

    assert result.exit_code == 0
    assert "Desk Lamp" in result.output
    assert "Note: Supplier delivery" in result.output
    assert "Unknown Product" not in result.output


def test_stock_statement_command_empty(runner, patched_client):
    result = runner.invoke(cli, ["stock-statement"])

    assert result.exit_code == 0
    assert "No stock activities found." in result.output


@pytest.mark.asyncio
async def test_run_monitor_without_push_channel(mocker, mock_api_client, push_channel, make_alert, capsys):
    """A failed push connection still shows snapshot alerts and shuts down cleanly"""
    push_channel.connect = mocker.AsyncMock(side_effect=PushChannelError("refused"))
    push_channel.disconnect = mocker.AsyncMock()
    mocker.patch.object(watch_alerts.SocketIOPushChannel, "from_settings", return_value=push_channel)
    mocker.patch.object(watch_alerts.InventoryAPIClient, "from_settings", return_value=mock_api_client)
    mock_api_client.get_stock_alerts.return_value = [make_alert(name="Teapot")]

    stop_event = asyncio.Event()
    stop_event.set()
    await watch_alerts.run_monitor(stop_event, ConsoleNotifier(color=False))

    out = capsys.readouterr().out
    assert "Live updates unavailable" in out
    assert "Teapot is low on stock!" in out
    mock_api_client.mark_alert_read.assert_awaited_once_with("alert-1")
    push_channel.disconnect.assert_awaited_once()
    assert push_channel.handlers["productUpdated"] == []
