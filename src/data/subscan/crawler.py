"""Crawl Subscan for the staking rewards of an account."""

import math

import httpx
from pydantic import ValidationError
from rich.progress import Progress, TaskID

from src.data.subscan.constants import (
    API_KEY_HEADER,
    ENDPOINTS,
    PAGE_SIZE,
    SUBSCAN_URL_TEMPLATE,
)
from src.data.subscan.models import (
    RewardSlashData,
    RewardSlashEntry,
    RewardSlashRequest,
    RewardSlashResponse,
)
from src.export.errors import FetchError
from src.export.models import Network, RewardEvent
from src.helpers.config import get_api_url, get_subscan_api_key
from src.helpers.http import post_json, retry_with_backoff
from src.helpers.logging import get_logger
from src.helpers.progress import advance


logger = get_logger(__name__)

STAGE = "rewards"


class SubscanCrawler:
    """Pages through an account's reward_slash history on Subscan."""

    def __init__(
        self,
        network: Network,
        api_key: str | None = None,
        base_url: str | None = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        """Initialize the crawler.

        Args:
            network: Network whose Subscan instance to query
            api_key: Subscan API key, falls back to SUBSCAN_API_KEY
            base_url: API root, falls back to SUBSCAN_URL or the network's host
            page_size: Entries per page

        Raises:
            ValueError: If page_size is not positive
        """
        if page_size < 1:
            msg = "page_size must be positive"
            raise ValueError(msg)

        self.network = network
        self.api_key = get_subscan_api_key(api_key)
        self.base_url = base_url or get_api_url(
            "SUBSCAN_URL", SUBSCAN_URL_TEMPLATE.format(network=network.id)
        )
        self.page_size = page_size

    @property
    def url(self) -> str:
        return f"{self.base_url}{ENDPOINTS['reward_slash']}"

    def _headers(self) -> dict[str, str]:
        return {API_KEY_HEADER: self.api_key} if self.api_key else {}

    @retry_with_backoff()
    async def _post_page(
        self, client: httpx.AsyncClient, request: RewardSlashRequest
    ) -> dict:
        return await post_json(
            client, self.url, request.model_dump(), headers=self._headers()
        )

    async def fetch_page(
        self, client: httpx.AsyncClient, address: str, page: int
    ) -> RewardSlashData:
        """Fetch one page of reward and slash events, newest first.

        Raises:
            FetchError: If the request fails after retries or Subscan reports an error
        """
        request = RewardSlashRequest(address=address, page=page, row=self.page_size)
        try:
            payload = await self._post_page(client, request)
            response = RewardSlashResponse.model_validate(payload)
        except httpx.HTTPError as e:
            msg = f"Subscan request for page {page} of {address} failed: {e}"
            raise FetchError(STAGE, msg) from e
        except ValidationError as e:
            msg = f"Unexpected Subscan payload for page {page} of {address}: {e}"
            raise FetchError(STAGE, msg) from e
        except ValueError as e:
            # Body was not JSON, e.g. a rate-limit or proxy error page
            msg = f"Non-JSON Subscan response for page {page} of {address}: {e}"
            raise FetchError(STAGE, msg) from e

        if response.code != 0:
            msg = f"Subscan error {response.code}: {response.message}"
            raise FetchError(STAGE, msg)

        return response.data or RewardSlashData()

    async def fetch_all_rewards(
        self,
        client: httpx.AsyncClient,
        address: str,
        start: int,
        end: int,
        *,
        progress: tuple[Progress, TaskID] | None = None,
    ) -> list[RewardEvent]:
        """Fetch every reward of address with a block time in [start, end].

        Args:
            client: HTTP client instance
            address: Network-formatted account address
            start: Window start, Unix seconds (inclusive)
            end: Window end, Unix seconds (inclusive)
            progress: Optional progress tracker, advanced once per page

        Returns:
            list[RewardEvent]: Rewards in ascending block time order

        Raises:
            FetchError: If any page cannot be fetched
        """
        entries: list[RewardSlashEntry] = []
        page = 0
        seen = 0

        while True:
            data = await self.fetch_page(client, address, page)
            batch = data.entries or []
            seen += len(batch)
            advance(progress, total=math.ceil(data.count / self.page_size) or None)

            entries.extend(
                e for e in batch if e.is_reward and start <= e.block_timestamp <= end
            )
            logger.debug(
                "Page %d of %s: %d entries (%d/%d)",
                page,
                address,
                len(batch),
                seen,
                data.count,
            )

            if not batch or seen >= data.count:
                break
            # Newest first, so nothing further back can be in the window
            if min(e.block_timestamp for e in batch) < start:
                break
            page += 1

        entries.sort(key=lambda e: (e.block_timestamp, e.block_num))
        rewards = [e.to_reward_event() for e in entries]
        logger.info(
            "Fetched %d %s rewards for %s", len(rewards), self.network.id, address
        )
        return rewards


__all__ = ["SubscanCrawler"]
