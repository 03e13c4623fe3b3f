"""
Command-line interface for ord-sendmany.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from ordcore.address import Destination
from ordcore.models import InscriptionId, NetworkType
from ordwallet.backends.base import InscriptionIndex, WalletBackend
from ordwallet.backends.bitcoin_core import BitcoinCoreWallet
from ordwallet.backends.ord_server import OrdServerIndex
from ordwallet.errors import WalletBackendError
from ordwallet.snapshot import load_wallet_state
from pydantic import ValidationError

from sendmany.builder import SendManyBuilder
from sendmany.cardinals import get_cardinals
from sendmany.config import SendManyConfig, SendManySettings
from sendmany.errors import SendManyError
from sendmany.request_file import read_request_file

app = typer.Typer(
    name="ord-sendmany",
    help="Send many inscriptions to their new owners in one transaction",
    add_completion=False,
)


def setup_logging(level: str) -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def resolve_settings(**overrides: Any) -> SendManySettings:
    """Settings from environment / .env, with explicit CLI values taking precedence."""
    settings = SendManySettings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=updates)


def create_backends(settings: SendManySettings) -> tuple[WalletBackend, InscriptionIndex]:
    wallet = BitcoinCoreWallet(
        rpc_url=settings.rpc_url,
        rpc_user=settings.rpc_user,
        rpc_password=settings.rpc_password,
        wallet_name=settings.rpc_wallet,
        timeout=settings.rpc_timeout,
    )
    return wallet, OrdServerIndex(settings.ord_url)


NetworkOption = Annotated[
    NetworkType | None,
    typer.Option("--network", "-n", help="Bitcoin network", envvar="ORD_SENDMANY_NETWORK"),
]
RpcUrlOption = Annotated[
    str | None, typer.Option("--rpc-url", help="Bitcoin Core RPC URL", envvar="BITCOIN_RPC_URL")
]
RpcUserOption = Annotated[
    str | None, typer.Option("--rpc-user", help="RPC username", envvar="BITCOIN_RPC_USER")
]
RpcPasswordOption = Annotated[
    str | None,
    typer.Option("--rpc-password", help="RPC password", envvar="BITCOIN_RPC_PASSWORD"),
]
WalletOption = Annotated[
    str | None, typer.Option("--wallet", "-w", help="Bitcoin Core wallet name")
]
OrdUrlOption = Annotated[str | None, typer.Option("--ord-url", help="ord server URL")]
LogLevelOption = Annotated[
    str | None, typer.Option("--log-level", "-l", help="Log level (DEBUG, INFO, WARNING)")
]


@app.command()
def send(
    csv: Annotated[
        Path,
        typer.Option(
            "--csv",
            help="CSV file of `inscriptionid,destination` pairs",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    fee_rate: Annotated[str | None, typer.Option("--fee-rate", help="Fee rate in sat/vB")] = None,
    broadcast: Annotated[
        bool,
        typer.Option(
            "--broadcast",
            help="Broadcast the transaction; by default the signed hex is printed for review",
        ),
    ] = False,
    network: NetworkOption = None,
    rpc_url: RpcUrlOption = None,
    rpc_user: RpcUserOption = None,
    rpc_password: RpcPasswordOption = None,
    rpc_wallet: WalletOption = None,
    ord_url: OrdUrlOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Send the inscriptions listed in a CSV file in a single transaction."""
    settings = resolve_settings(
        network=network,
        rpc_url=rpc_url,
        rpc_user=rpc_user,
        rpc_password=rpc_password,
        rpc_wallet=rpc_wallet,
        ord_url=ord_url,
        log_level=log_level,
    )
    setup_logging(settings.log_level)

    rate = fee_rate if fee_rate is not None else settings.fee_rate
    if rate is None:
        logger.error("A fee rate is required: use --fee-rate or ORD_SENDMANY_FEE_RATE")
        raise typer.Exit(1)

    try:
        config = SendManyConfig(
            fee_rate=rate,
            csv=csv,
            broadcast=broadcast,
            network=settings.network,
        )
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        raise typer.Exit(1)

    # The request file is fully validated before touching the node or index
    try:
        requests = read_request_file(config.csv, config.network)
    except (SendManyError, OSError, UnicodeDecodeError) as e:
        logger.error(f"CSV file '{config.csv}' is not usable: {e}")
        raise typer.Exit(1)

    logger.info(f"Loaded {len(requests)} inscription requests from {config.csv}")

    try:
        tx = asyncio.run(_send(settings, config, requests))
    except (SendManyError, WalletBackendError) as e:
        logger.error(str(e))
        raise typer.Exit(1)

    typer.echo(json.dumps({"tx": tx}, indent=2))


async def _send(
    settings: SendManySettings,
    config: SendManyConfig,
    requests: dict[InscriptionId, Destination],
) -> str:
    wallet, index = create_backends(settings)
    try:
        state = await load_wallet_state(wallet, index)
        change = await wallet.get_change_address(config.network)

        result = SendManyBuilder(config.rate).build(requests, state, change)

        signed_tx = await wallet.sign_transaction(result.transaction)
        if config.broadcast:
            return await wallet.broadcast_transaction(signed_tx)
        return signed_tx
    finally:
        await wallet.close()
        await index.close()


@app.command()
def cardinals(
    network: NetworkOption = None,
    rpc_url: RpcUrlOption = None,
    rpc_user: RpcUserOption = None,
    rpc_password: RpcPasswordOption = None,
    rpc_wallet: WalletOption = None,
    ord_url: OrdUrlOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """List the outputs that can pay fees, in the order they would be picked."""
    settings = resolve_settings(
        network=network,
        rpc_url=rpc_url,
        rpc_user=rpc_user,
        rpc_password=rpc_password,
        rpc_wallet=rpc_wallet,
        ord_url=ord_url,
        log_level=log_level,
    )
    setup_logging(settings.log_level)

    try:
        result = asyncio.run(_cardinals(settings))
    except WalletBackendError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    typer.echo(json.dumps(result, indent=2))


async def _cardinals(settings: SendManySettings) -> list[dict[str, Any]]:
    wallet, index = create_backends(settings)
    try:
        state = await load_wallet_state(wallet, index)
    finally:
        await wallet.close()
        await index.close()

    return [{"output": str(outpoint), "value": value} for outpoint, value in get_cardinals(state)]


def main() -> None:
    app()


if __name__ == "__main__":
    main()
