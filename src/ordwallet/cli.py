"""
ord-wallet CLI - Inspect wallet inscriptions and raw chain data.
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Annotated, Any

import typer
from loguru import logger
from ordcore.address import script_to_address
from ordcore.models import NetworkType
from ordcore.transaction import Transaction

from ordwallet.backends.bitcoin_core import BitcoinCoreWallet
from ordwallet.backends.ord_server import OrdServerIndex
from ordwallet.backends.rest import RestClient
from ordwallet.config import WalletSettings
from ordwallet.errors import WalletBackendError
from ordwallet.inscriptions import list_wallet_inscriptions
from ordwallet.snapshot import load_wallet_state

app = typer.Typer(
    name="ord-wallet",
    help="Inspect ord wallet inscriptions and raw chain data",
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


def resolve_settings(**overrides: Any) -> WalletSettings:
    """Settings from environment / .env, with explicit CLI values taking precedence."""
    settings = WalletSettings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=updates)


def print_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


def transaction_to_dict(tx: Transaction, network: NetworkType) -> dict[str, Any]:
    return {
        "txid": tx.txid(),
        "version": tx.version,
        "lock_time": tx.lock_time,
        "vsize": tx.vsize(),
        "inputs": [
            {
                "outpoint": str(inp.previous_output),
                "sequence": inp.sequence,
                "witness": [item.hex() for item in inp.witness],
            }
            for inp in tx.inputs
        ],
        "outputs": [
            {
                "value": out.value,
                "script_pubkey": out.script_pubkey.hex(),
                "address": script_to_address(out.script_pubkey, network),
            }
            for out in tx.outputs
        ],
    }


NetworkOption = Annotated[
    NetworkType | None, typer.Option("--network", "-n", help="Bitcoin network")
]
LogLevelOption = Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")]


@app.command()
def inscriptions(
    network: NetworkOption = None,
    rpc_url: Annotated[str | None, typer.Option("--rpc-url", help="Bitcoin Core RPC URL")] = None,
    rpc_user: Annotated[str | None, typer.Option("--rpc-user", help="RPC username")] = None,
    rpc_password: Annotated[
        str | None, typer.Option("--rpc-password", help="RPC password")
    ] = None,
    rpc_wallet: Annotated[
        str | None, typer.Option("--wallet", "-w", help="Bitcoin Core wallet name")
    ] = None,
    ord_url: Annotated[str | None, typer.Option("--ord-url", help="ord server URL")] = None,
    log_level: LogLevelOption = None,
) -> None:
    """List inscriptions held on the wallet's unspent outputs."""
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
        result = asyncio.run(_list_inscriptions(settings))
    except WalletBackendError as e:
        logger.error(f"Failed to list inscriptions: {e}")
        raise typer.Exit(1)

    print_json(result)


async def _list_inscriptions(settings: WalletSettings) -> list[dict[str, Any]]:
    wallet = BitcoinCoreWallet(
        rpc_url=settings.rpc_url,
        rpc_user=settings.rpc_user,
        rpc_password=settings.rpc_password,
        wallet_name=settings.rpc_wallet,
        timeout=settings.rpc_timeout,
    )
    index = OrdServerIndex(settings.ord_url)
    try:
        state = await load_wallet_state(wallet, index)
    finally:
        await wallet.close()
        await index.close()

    return [entry.to_dict() for entry in list_wallet_inscriptions(state, settings.network)]


@app.command("block-hash")
def block_hash(
    height: Annotated[int, typer.Argument(help="Block height", min=0)],
    rest_url: Annotated[
        str | None, typer.Option("--rest-url", help="Bitcoin Core REST URL")
    ] = None,
    log_level: LogLevelOption = None,
) -> None:
    """Print the hash of the block at HEIGHT."""
    settings = resolve_settings(rest_url=rest_url, log_level=log_level)
    setup_logging(settings.log_level)

    try:
        result = asyncio.run(_block_hash(settings, height))
    except WalletBackendError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    print_json({"height": height, "hash": result})


async def _block_hash(settings: WalletSettings, height: int) -> str:
    client = RestClient(settings.rest_url)
    try:
        return await client.get_block_hash(height)
    finally:
        await client.close()


@app.command("raw-tx")
def raw_tx(
    txid: Annotated[str, typer.Argument(help="Transaction id")],
    network: NetworkOption = None,
    rest_url: Annotated[
        str | None, typer.Option("--rest-url", help="Bitcoin Core REST URL")
    ] = None,
    log_level: LogLevelOption = None,
) -> None:
    """Fetch and decode transaction TXID over REST."""
    settings = resolve_settings(network=network, rest_url=rest_url, log_level=log_level)
    setup_logging(settings.log_level)

    try:
        tx = asyncio.run(_raw_tx(settings, txid))
    except WalletBackendError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    print_json(transaction_to_dict(tx, settings.network))


async def _raw_tx(settings: WalletSettings, txid: str) -> Transaction:
    client = RestClient(
        settings.rest_url,
        retry_count=settings.rest_retry_count,
        retry_base_delay=settings.rest_retry_base_delay,
    )
    try:
        return await client.get_raw_transaction(txid)
    finally:
        await client.close()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
