"""
paywallet CLI - list accounts, pick the active one, quote and send payments.
"""

from __future__ import annotations

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

import typer
from loguru import logger

from paywallet.config import Settings, get_settings

app = typer.Typer(
    name="paywallet",
    help="HD wallet accounts and payments",
    add_completion=False,
)


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def _load_mnemonic(mnemonic: str | None, mnemonic_file: Path | None) -> str:
    if mnemonic_file:
        if not mnemonic_file.exists():
            logger.error(f"Mnemonic file not found: {mnemonic_file}")
            raise typer.Exit(1)
        mnemonic = mnemonic_file.read_text().strip()

    if not mnemonic:
        logger.error("Mnemonic required. Use --mnemonic, --mnemonic-file, or MNEMONIC env var")
        raise typer.Exit(1)

    return mnemonic


def _open_wallet(mnemonic: str, settings: Settings):
    from paywallet.wallet.service import WalletStore
    from paywallet.wallet.storage import JsonFileIndexStore

    return WalletStore.from_mnemonic(mnemonic, index_store=JsonFileIndexStore(settings.state_file))


@app.command()
def accounts(
    mnemonic: str = typer.Option(None, "--mnemonic", envvar="MNEMONIC", help="BIP39 mnemonic"),
    mnemonic_file: Path | None = typer.Option(
        None, "--mnemonic-file", "-f", help="Path to mnemonic file"
    ),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """List the wallet pool, marking the active account."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level)
    wallet = _open_wallet(_load_mnemonic(mnemonic, mnemonic_file), settings)

    active = wallet.active_account
    for account in wallet.accounts:
        marker = "*" if account.index == active.index else " "
        typer.echo(f"{marker} {account.title:<10} {account.address}")


@app.command()
def activate(
    index: int = typer.Argument(..., help="Wallet index to make active"),
    mnemonic: str = typer.Option(None, "--mnemonic", envvar="MNEMONIC", help="BIP39 mnemonic"),
    mnemonic_file: Path | None = typer.Option(None, "--mnemonic-file", "-f"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Set the active account."""
    from paywallet.wallet.service import InvalidIndexError

    settings = get_settings()
    setup_logging(log_level or settings.log_level)
    wallet = _open_wallet(_load_mnemonic(mnemonic, mnemonic_file), settings)

    try:
        account = wallet.activate(index)
    except InvalidIndexError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    typer.echo(f"{account.title} is now active: {account.address}")


@app.command()
def send(
    to: str = typer.Option(..., "--to", "-t", help="Recipient address"),
    value: str = typer.Option(..., "--value", "-v", help="Amount in wei as hex, or 'max'"),
    data: str | None = typer.Option(None, "--data", help="Call data (hex)"),
    token_address: str | None = typer.Option(None, "--token", help="Token contract address"),
    mnemonic: str = typer.Option(None, "--mnemonic", envvar="MNEMONIC", help="BIP39 mnemonic"),
    mnemonic_file: Path | None = typer.Option(None, "--mnemonic-file", "-f"),
    node_url: str | None = typer.Option(None, "--node-url", help="Ethereum service URL"),
    exchange_rate: str | None = typer.Option(None, "--rate", help="Fiat per ether"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Send without confirmation"),
    quote_only: bool = typer.Option(False, "--quote-only", help="Only show the quote"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Quote a payment from the active account and optionally send it."""
    settings = get_settings()
    if node_url:
        settings.node_url = node_url
    if exchange_rate:
        settings.exchange_rate = Decimal(exchange_rate)
    setup_logging(log_level or settings.log_level)

    mnemonic = _load_mnemonic(mnemonic, mnemonic_file)
    asyncio.run(_send(mnemonic, settings, to, value, data, token_address, yes, quote_only))


async def _send(
    mnemonic: str,
    settings: Settings,
    to: str,
    value: str,
    data: str | None,
    token_address: str | None,
    yes: bool,
    quote_only: bool,
) -> None:
    """Quote and send implementation."""
    from paywallet.backends.http import HttpChainClient
    from paywallet.payments.errors import PaymentError
    from paywallet.payments.manager import PaymentManager
    from paywallet.payments.models import PaymentParameters

    wallet = _open_wallet(mnemonic, settings)
    client = HttpChainClient(settings.node_url, timeout=settings.request_timeout)

    parameters = {
        PaymentParameters.FROM: wallet.active_account.address,
        PaymentParameters.TO: to,
        PaymentParameters.VALUE: value,
    }
    if data:
        parameters[PaymentParameters.DATA] = data
    if token_address:
        parameters[PaymentParameters.TOKEN_ADDRESS] = token_address

    try:
        manager = PaymentManager(
            parameters,
            chain_client=client,
            wallet=wallet,
            exchange_rate=settings.exchange_rate,
            currency=settings.fiat_currency,
        )
        info = await manager.fetch_payment_info()

        typer.echo(f"\nFrom:      {wallet.active_account.title} ({manager.payer_address})")
        typer.echo(f"To:        {to}")
        typer.echo(f"Amount:    {info.fiat_string}")
        typer.echo(
            f"Fee:       {info.estimated_fees_ether_string} ({info.estimated_fees_fiat_string})"
        )
        typer.echo(f"Total:     {info.total_ether_string} ({info.total_fiat_string})")
        typer.echo(f"Balance:   {info.balance_string}")

        if not info.sufficient_balance:
            logger.error("Insufficient balance for this payment")
            raise typer.Exit(1)

        if quote_only:
            return

        if not yes and not typer.confirm("\nSend this payment?"):
            typer.echo("Cancelled")
            return

        tx_hash = await manager.send_payment()
        typer.echo(f"\nTransaction hash: {tx_hash}")

    except PaymentError as e:
        logger.error(f"Payment failed ({e.kind}): {e}")
        raise typer.Exit(1)
    finally:
        await client.close()


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
