"""
Bitcoin Core REST interface client for raw chain data.

Uses the binary endpoints (/rest/...bin). Raw transaction fetches are
retried with exponential backoff: delay = base_delay * 2**attempt.
"""

from __future__ import annotations

import asyncio

import httpx
from loguru import logger
from ordcore.transaction import Transaction, TransactionParseError, deserialize_transaction

from ordwallet.errors import ChainDataError

DEFAULT_REST_TIMEOUT = 30.0

# Maximum connections kept open per host
MAX_CONNECTIONS = 100

REST_RETRY_COUNT = 3
REST_RETRY_BASE_DELAY = 1.0  # seconds

BLOCK_HASH_SIZE = 32


class RestClient:
    """Fetches block hashes and raw transactions over the node's REST interface."""

    def __init__(
        self,
        url: str = "http://127.0.0.1:8332",
        retry_count: int = REST_RETRY_COUNT,
        retry_base_delay: float = REST_RETRY_BASE_DELAY,
        timeout: float = DEFAULT_REST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if retry_count < 1:
            raise ValueError("retry_count must be at least 1")

        if not url.startswith(("http://", "https://")):
            url = "http://" + url
        self.url = url.rstrip("/")
        self.retry_count = retry_count
        self.retry_base_delay = retry_base_delay
        self.client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_keepalive_connections=MAX_CONNECTIONS),
            transport=transport,
        )

    async def _get_bytes(self, path: str) -> bytes:
        response = await self.client.get(f"{self.url}{path}")
        response.raise_for_status()
        return response.content

    async def get_block_hash(self, height: int) -> str:
        """Get the hash of the block at `height`, in display (big-endian) hex."""
        try:
            data = await self._get_bytes(f"/rest/blockhashbyheight/{height}.bin")
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch block hash for height {height}: {e}")
            raise ChainDataError(f"Could not fetch block hash for height {height}") from e

        if len(data) != BLOCK_HASH_SIZE:
            raise ChainDataError(
                f"Could not fetch block hash for height {height}: got {len(data)} bytes"
            )
        return data[::-1].hex()

    async def get_raw_transaction(self, txid: str) -> Transaction:
        """
        Fetch and decode a transaction.

        Transient failures (HTTP errors, undecodable or mismatching bodies) are
        retried up to retry_count attempts in total.

        Raises:
            ChainDataError: after the final failed attempt
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_count):
            try:
                data = await self._get_bytes(f"/rest/tx/{txid}.bin")
                tx = deserialize_transaction(data)
                if tx.txid() != txid.lower():
                    raise TransactionParseError(f"node returned transaction {tx.txid()}")
                return tx
            except (httpx.HTTPError, TransactionParseError) as e:
                last_error = e
                if attempt == self.retry_count - 1:
                    break
                delay = self.retry_base_delay * (2**attempt)
                logger.warning(
                    f"Fetching tx {txid} failed ({e}), retrying in {delay:.1f}s "
                    f"(attempt {attempt + 1}/{self.retry_count})"
                )
                await asyncio.sleep(delay)

        logger.error(f"Giving up on tx {txid} after {self.retry_count} attempts: {last_error}")
        raise ChainDataError(f"Could not fetch tx {txid}") from last_error

    async def close(self) -> None:
        await self.client.aclose()
