"""
Bitcoin Core wallet RPC backend.
Uses the node's wallet for UTXOs, locks, change addresses and signing.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

import httpx
from loguru import logger
from ordcore.address import AddressError, Destination, parse_address
from ordcore.constants import SATS_PER_BTC
from ordcore.models import NetworkType, OutPoint
from ordcore.transaction import Transaction, TransactionParseError, deserialize_transaction

from ordwallet.backends.base import WalletBackend
from ordwallet.errors import BroadcastError, RPCError, SigningError, WalletBackendError

# Timeout for regular RPC calls (seconds)
DEFAULT_RPC_TIMEOUT = 30.0

CHANGE_ADDRESS_TYPE = "bech32m"


def btc_to_sats(amount: Any) -> int:
    """Convert a JSON BTC amount to sats without float rounding error."""
    return int((Decimal(str(amount)) * SATS_PER_BTC).to_integral_value())


class BitcoinCoreWallet(WalletBackend):
    """
    Wallet backend using Bitcoin Core RPC.
    Calls are routed to /wallet/<name> when a wallet name is configured.
    """

    def __init__(
        self,
        rpc_url: str = "http://127.0.0.1:8332",
        rpc_user: str = "rpcuser",
        rpc_password: str = "rpcpassword",
        wallet_name: str | None = "ord",
        timeout: float = DEFAULT_RPC_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.rpc_url = rpc_url.rstrip("/")
        self.wallet_name = wallet_name
        self.wallet_url = f"{self.rpc_url}/wallet/{wallet_name}" if wallet_name else self.rpc_url
        self.client = httpx.AsyncClient(
            timeout=timeout, auth=(rpc_user, rpc_password), transport=transport
        )
        self._request_id = 0

    async def _rpc_call(self, method: str, params: list | None = None, wallet: bool = True) -> Any:
        """
        Make an RPC call to Bitcoin Core.

        Args:
            method: RPC method name
            params: Method parameters
            wallet: Route the call to the configured wallet endpoint

        Returns:
            RPC result

        Raises:
            RPCError: On RPC errors
            WalletBackendError: On connection/timeout errors
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "1.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }
        url = self.wallet_url if wallet else self.rpc_url

        try:
            response = await self.client.post(url, json=payload)
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"RPC call failed: {method} - {e}")
            raise WalletBackendError(f"RPC call {method} failed: {e}") from e
        except ValueError as e:
            # Bitcoin Core answers auth failures and some 5xx with non-JSON bodies
            logger.error(f"RPC call returned invalid JSON: {method} (HTTP {response.status_code})")
            raise WalletBackendError(
                f"RPC call {method} returned HTTP {response.status_code}"
            ) from e

        if data.get("error"):
            error_info = data["error"]
            raise RPCError(method, error_info.get("code", "unknown"), error_info.get("message", ""))

        return data.get("result")

    async def get_block_count(self) -> int:
        count = await self._rpc_call("getblockcount", wallet=False)
        logger.debug(f"Current block height: {count}")
        return int(count)

    async def get_unspent_outputs(self, locked: Iterable[OutPoint] = ()) -> dict[OutPoint, int]:
        unspent: dict[OutPoint, int] = {}
        for utxo in await self._rpc_call("listunspent"):
            unspent[OutPoint(utxo["txid"], utxo["vout"])] = btc_to_sats(utxo["amount"])

        # listunspent hides locked outputs; they still belong to the wallet
        for outpoint in locked:
            if outpoint not in unspent:
                unspent[outpoint] = await self._get_output_value(outpoint)

        logger.debug(f"Wallet has {len(unspent)} unspent outputs")
        return unspent

    async def _get_output_value(self, outpoint: OutPoint) -> int:
        wallet_tx = await self._rpc_call("gettransaction", [outpoint.txid])
        try:
            tx = deserialize_transaction(bytes.fromhex(wallet_tx["hex"]))
        except (KeyError, ValueError, TransactionParseError) as e:
            raise WalletBackendError(f"Cannot decode wallet transaction {outpoint.txid}") from e

        if outpoint.vout >= len(tx.outputs):
            raise WalletBackendError(f"Locked output {outpoint} does not exist")
        return tx.outputs[outpoint.vout].value

    async def get_locked_outputs(self) -> set[OutPoint]:
        locked = await self._rpc_call("listlockunspent")
        return {OutPoint(item["txid"], item["vout"]) for item in locked}

    async def get_change_address(self, network: NetworkType) -> Destination:
        address = await self._rpc_call("getrawchangeaddress", [CHANGE_ADDRESS_TYPE])
        try:
            return parse_address(address, network)
        except AddressError as e:
            raise WalletBackendError(
                f"Wallet returned unusable change address {address}: {e}"
            ) from e

    async def sign_transaction(self, tx: Transaction) -> str:
        result = await self._rpc_call("signrawtransactionwithwallet", [tx.to_hex()])

        if not result.get("complete"):
            errors = result.get("errors", [])
            details = "; ".join(e.get("error", str(e)) for e in errors) or "incomplete signatures"
            logger.error(f"Wallet could not sign transaction: {details}")
            raise SigningError(f"Failed to sign transaction: {details}")

        return result["hex"]

    async def broadcast_transaction(self, tx_hex: str) -> str:
        try:
            txid = await self._rpc_call("sendrawtransaction", [tx_hex], wallet=False)
        except WalletBackendError as e:
            logger.error(f"Failed to broadcast transaction: {e}")
            raise BroadcastError(f"Broadcast failed: {e}") from e

        logger.info(f"Broadcast transaction: {txid}")
        return txid

    async def close(self) -> None:
        await self.client.aclose()
