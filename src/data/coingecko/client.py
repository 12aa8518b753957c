"""Daily fiat prices from CoinGecko's coin history endpoint."""

from collections.abc import Sequence
from datetime import date

import httpx
from pydantic import ValidationError
from rich.progress import Progress, TaskID

from src.data.coingecko.constants import (
    API_KEY_HEADER,
    COIN_IDS,
    COINGECKO_URL,
    ENDPOINTS,
    HISTORY_DATE_FORMAT,
)
from src.data.coingecko.models import CoinHistory
from src.export.errors import FetchError
from src.export.models import Network, PriceSnapshot, RewardEvent
from src.helpers.config import get_api_url, get_coingecko_api_key
from src.helpers.http import get_json, retry_with_backoff
from src.helpers.logging import get_logger
from src.helpers.progress import advance


logger = get_logger(__name__)

STAGE = "prices"


class CoinGeckoPriceFeed:
    """Looks up the daily price of a network's token, one request per day."""

    def __init__(
        self,
        network: Network,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        """Initialize the price feed.

        Args:
            network: Network whose token to price
            api_key: CoinGecko demo API key, falls back to COINGECKO_API_KEY
            base_url: API root, falls back to COINGECKO_URL or the public API
        """
        self.network = network
        self.coin_id = COIN_IDS[network.id]
        self.api_key = get_coingecko_api_key(api_key)
        self.base_url = base_url or get_api_url("COINGECKO_URL", COINGECKO_URL)
        self._cache: dict[date, PriceSnapshot] = {}

    @property
    def url(self) -> str:
        return f"{self.base_url}{ENDPOINTS['history'].format(coin_id=self.coin_id)}"

    def _headers(self) -> dict[str, str]:
        return {API_KEY_HEADER: self.api_key} if self.api_key else {}

    @retry_with_backoff()
    async def _get_history(self, client: httpx.AsyncClient, day: date) -> dict:
        params = {"date": day.strftime(HISTORY_DATE_FORMAT), "localization": "false"}
        return await get_json(client, self.url, params=params, headers=self._headers())

    async def fetch_snapshot(
        self, client: httpx.AsyncClient, day: date
    ) -> PriceSnapshot:
        """Fetch the price snapshot for one day, cached per day.

        Raises:
            FetchError: If the request fails after retries or the day has no market data
        """
        if day in self._cache:
            return self._cache[day]

        try:
            payload = await self._get_history(client, day)
            history = CoinHistory.model_validate(payload)
        except httpx.HTTPError as e:
            msg = f"CoinGecko request for {self.coin_id} on {day} failed: {e}"
            raise FetchError(STAGE, msg) from e
        except ValidationError as e:
            msg = f"Unexpected CoinGecko payload for {self.coin_id} on {day}: {e}"
            raise FetchError(STAGE, msg) from e
        except ValueError as e:
            # Body was not JSON, e.g. a rate-limit or proxy error page
            msg = f"Non-JSON CoinGecko response for {self.coin_id} on {day}: {e}"
            raise FetchError(STAGE, msg) from e

        if history.market_data is None:
            msg = f"No market data for {self.coin_id} on {day}"
            raise FetchError(STAGE, msg)

        snapshot = PriceSnapshot(market_data=history.market_data.current_price, day=day)
        self._cache[day] = snapshot
        logger.debug("Fetched %s prices for %s", self.coin_id, day)
        return snapshot

    async def fetch_prices(
        self,
        client: httpx.AsyncClient,
        rewards: Sequence[RewardEvent],
        *,
        progress: tuple[Progress, TaskID] | None = None,
    ) -> list[PriceSnapshot]:
        """Fetch one snapshot per reward, in reward order.

        Args:
            client: HTTP client instance
            rewards: Rewards to price
            progress: Optional progress tracker, advanced once per reward

        Returns:
            list[PriceSnapshot]: Snapshot i is for the day of rewards[i]

        Raises:
            FetchError: If any day cannot be priced
        """
        prices = []
        for reward in rewards:
            prices.append(await self.fetch_snapshot(client, reward.day))
            advance(progress)

        logger.info(
            "Fetched %s prices for %d rewards over %d days",
            self.coin_id,
            len(prices),
            len(self._cache),
        )
        return prices


__all__ = ["CoinGeckoPriceFeed"]
