"""
ord server inscription index backend.
Reads the JSON API served by `ord server` (requests sent with Accept: application/json).
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from ordcore.models import InscriptionId, OutPoint, OutPointError, SatPoint

from ordwallet.backends.base import InscriptionIndex
from ordwallet.errors import SnapshotError
from ordwallet.models import InscriptionInfo

DEFAULT_ORD_TIMEOUT = 30.0


class OrdServerIndex(InscriptionIndex):
    def __init__(
        self,
        url: str = "http://127.0.0.1:80",
        timeout: float = DEFAULT_ORD_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def _get_json(self, path: str) -> Any:
        try:
            response = await self.client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"ord server returned {e.response.status_code} for {path}")
            raise SnapshotError(f"ord server returned {e.response.status_code} for {path}") from e
        except httpx.HTTPError as e:
            logger.error(f"ord server request failed: {path} - {e}")
            raise SnapshotError(f"ord server request {path} failed: {e}") from e
        except ValueError as e:
            raise SnapshotError(f"ord server returned invalid JSON for {path}") from e

    async def get_block_height(self) -> int:
        height = await self._get_json("/blockheight")
        logger.debug(f"ord index height: {height}")
        return int(height)

    async def get_output_inscriptions(self, outpoint: OutPoint) -> list[InscriptionId]:
        data = await self._get_json(f"/output/{outpoint}")
        try:
            return [InscriptionId.parse(i) for i in data.get("inscriptions") or []]
        except ValueError as e:
            raise SnapshotError(
                f"ord server returned a bad inscription id for {outpoint}: {e}"
            ) from e

    async def get_inscription(self, inscription_id: InscriptionId) -> InscriptionInfo:
        data = await self._get_json(f"/inscription/{inscription_id}")
        try:
            satpoint = SatPoint.parse(data["satpoint"])
        except (KeyError, TypeError, OutPointError) as e:
            raise SnapshotError(
                f"ord server returned no usable satpoint for {inscription_id}"
            ) from e

        return InscriptionInfo(
            inscription_id=inscription_id,
            satpoint=satpoint,
            number=data.get("number"),
            sat=data.get("sat"),
        )

    async def close(self) -> None:
        await self.client.aclose()
