"""Blockchain.com public charts client for daily on-chain transaction volume.

No API key is needed. The estimated-transaction-volume-usd chart is the
denominator of the NVT signal.
"""

import httpx

from marketdash.config import OnchainSettings
from marketdash.data.models import TxVolumePoint, iso_date
from marketdash.data.parsing import parse_tx_volume
from marketdash.exceptions import UpstreamUnavailable
from marketdash.logging import get_logger

logger = get_logger(__name__)


class BlockchainInfoClient:
    """Fetches on-chain chart series from api.blockchain.info."""

    TX_VOLUME_CHART = "/charts/estimated-transaction-volume-usd"

    def __init__(self, settings: OnchainSettings, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=httpx.Timeout(settings.timeout),
            headers={"User-Agent": "marketdash/1.0"},
        )

    async def fetch_transaction_volume(self, timespan: str = "5years") -> list[TxVolumePoint]:
        """Fetch daily USD transaction volume, oldest first.

        Days with non-positive volume are dropped.

        Raises:
            UpstreamUnavailable: On transport errors or non-2xx responses.
            MalformedUpstreamPayload: If the chart payload has an unexpected shape.
        """
        try:
            response = await self._client.get(
                self.TX_VOLUME_CHART,
                params={"timespan": timespan, "format": "json", "sampled": "false"},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailable(
                f"Blockchain.com returned {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamUnavailable(f"Blockchain.com request failed: {e}") from e

        points = [
            TxVolumePoint(date=iso_date(x * 1000), volume_usd=y)
            for x, y in parse_tx_volume(payload)
            if y > 0
        ]
        points.sort(key=lambda p: p.date)
        logger.debug("tx_volume_fetched", points=len(points), timespan=timespan)
        return points

    async def close(self) -> None:
        await self._client.aclose()
