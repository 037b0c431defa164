"""
Simple Storage CLI

Command-line front end for a Simple Storage contract on Avalanche.

Commands:
  show    - Read the stored value
  set     - Submit a transaction that overwrites the stored value
  whoami  - Show the connected wallet
  info    - Show configuration and network status
"""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from .chain.rpc import RpcClient
from .config import Settings, load_settings
from .core.controller import InteractionController, WriteState
from .core.guard import WRONG_NETWORK_ADVISORY, is_allowed
from .core.reader import ContractReader
from .core.writer import ContractWriter
from .errors import ConfigError, ConnectionRejected, InvalidInput, SimpleStorageError, WriteFailed
from .wallet.connector import ChainConnector
from .wallet.provider import LocalKeyProvider


# ============ Constants ============

VERSION = "0.1.0"


# ============ Wiring ============


def _load_settings_or_exit() -> Settings:
    try:
        return load_settings()
    except ConfigError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)


def build_controller(settings: Settings, on_status=None) -> InteractionController:
    """Wire reader, writer and connector around one RPC client."""
    rpc = RpcClient(settings.rpc_url)
    provider = LocalKeyProvider(rpc, gas_limit=settings.gas_limit)
    connector = ChainConnector(provider)
    reader = ContractReader(settings.binding, rpc)
    writer = ContractWriter(
        settings.binding, connector, receipt_timeout=settings.receipt_timeout
    )
    return InteractionController(connector, reader, writer, on_status=on_status)


def _print_header(compact: bool = True) -> None:
    click.echo(
        click.style("  ◆ ", fg="magenta")
        + click.style("Avalanche dApp", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    if not compact:
        click.secho("    Simple Storage Smart Contract", dim=True)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="simplestorage")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Simple Storage — read and write a stored value on Avalanche."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        _print_header(compact=False)
        click.echo(ctx.get_help())


# ============ Read ============


@cli.command()
def show() -> None:
    """Read the stored value."""
    settings = _load_settings_or_exit()
    controller = build_controller(settings)

    async def _run() -> None:
        await controller.start()
        await controller.connector.sync_chain()

    asyncio.run(_run())
    view = controller.snapshot()

    click.echo(f"  Contract:      {settings.binding.address}")
    click.echo(f"  Chain ID:      {view.chain_id if view.chain_id is not None else 'unknown'}")
    click.echo(f"  Stored Value:  {view.stored_value}")
    if not view.network_ok:
        click.secho(f"  {WRONG_NETWORK_ADVISORY}", fg="yellow")


# ============ Write ============


@cli.command("set")
@click.argument("value")
def set_value(value: str) -> None:
    """Overwrite the stored value with VALUE."""
    settings = _load_settings_or_exit()
    controller = build_controller(settings, on_status=lambda s: click.echo(f"  {s}"))

    async def _run() -> int:
        await controller.start()
        if not await controller.connect():
            click.secho("ERROR: Wallet connection rejected.", fg="red")
            return ConnectionRejected.exit_code

        view = controller.snapshot()
        click.echo(f"  Account:       {view.short_account}")
        click.echo(f"  Chain ID:      {view.chain_id}")
        if view.advisory:
            click.secho(f"  {view.advisory}", fg="red")
            return 1

        controller.edit_input(value)
        task = controller.submit()
        if task is None:
            return InvalidInput.exit_code
        await controller.wait_idle()

        if controller.write_state is not WriteState.SUCCESS:
            return WriteFailed.exit_code
        return 0

    _print_header()
    code = asyncio.run(_run())
    click.echo(f"  Stored Value:  {controller.snapshot().stored_value}")
    if code:
        sys.exit(code)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the connected wallet."""
    settings = _load_settings_or_exit()
    controller = build_controller(settings)

    if not asyncio.run(controller.connect()):
        click.echo("No wallet found.")
        click.echo("Set PRIVATE_KEY in the environment or ~/.simplestorage/.env.")
        sys.exit(ConnectionRejected.exit_code)

    view = controller.snapshot()
    click.echo(f"Address: {view.account}")
    click.echo(f"Short:   {view.short_account}")
    click.echo(f"Chain:   {view.chain_id}")


# ============ Info ============


@cli.command()
def info() -> None:
    """Show configuration and network status."""
    _print_header(compact=False)
    settings = _load_settings_or_exit()

    click.echo(click.style("  Contract:    ", dim=True) + settings.binding.address)
    click.echo(click.style("  RPC:         ", dim=True) + settings.rpc_url)
    click.echo(click.style("  Gas limit:   ", dim=True) + str(settings.gas_limit))

    rpc = RpcClient(settings.rpc_url)
    try:
        chain_id = asyncio.run(rpc.chain_id())
    except SimpleStorageError as exc:
        click.echo(
            click.style("  Network:     ", dim=True)
            + click.style(f"unreachable ({exc})", fg="yellow")
        )
        return

    if is_allowed(chain_id):
        verdict = click.style(f"{chain_id} (writes allowed)", fg="green")
    else:
        verdict = click.style(f"{chain_id} ({WRONG_NETWORK_ADVISORY})", fg="yellow")
    click.echo(click.style("  Network:     ", dim=True) + verdict)


# ============ Entry Points ============


def main() -> None:
    """Simple Storage CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
