"""Tests for the Subscan reward crawler using pytest-httpx."""

from datetime import date
from io import StringIO
from typing import TYPE_CHECKING, Any

import httpx
import pytest
from rich.console import Console

from src.data.subscan.crawler import SubscanCrawler
from src.data.subscan.models import RewardSlashEntry
from src.export.errors import FetchError
from src.export.models import Network, RewardEvent
from src.helpers.progress import track_progress


if TYPE_CHECKING:
    from pytest_httpx import HTTPXMock


BASE_URL = "https://polkadot.api.subscan.io"
URL = f"{BASE_URL}/api/scan/account/reward_slash"
ADDRESS = "15j4dg5GzsL1bw2rduWhBaBNE8yGh1AE6KNJkUZxZ6UkNNVo"
DAY = 86_400
JUNE_1 = 1622505600


def entry(block_num: int, timestamp: int, amount: str = "10000000000", **extra: Any) -> dict:
    return {
        "block_num": block_num,
        "block_timestamp": timestamp,
        "amount": amount,
        "event_id": "Reward",
        **extra,
    }


def page(entries: list[dict] | None, count: int) -> dict:
    return {"code": 0, "message": "Success", "data": {"count": count, "list": entries}}


@pytest.fixture
def crawler() -> SubscanCrawler:
    return SubscanCrawler(Network.POLKADOT, api_key="", base_url=BASE_URL, page_size=2)


@pytest.fixture
def no_backoff(monkeypatch: pytest.MonkeyPatch) -> None:
    """Skip retry delays."""

    async def instant(_delay: float) -> None:
        return None

    monkeypatch.setattr("src.helpers.http.sleep", instant)


class TestRewardSlashEntry:
    """Tests for the Subscan entry model."""

    def test_to_reward_event(self) -> None:
        """Test conversion to a reward on the UTC day of the block."""
        parsed = RewardSlashEntry.model_validate(entry(100, JUNE_1 + 3600, "50000000000"))

        assert parsed.to_reward_event() == RewardEvent(
            block_num=100, day=date(2021, 6, 1), amount=50_000_000_000
        )

    def test_slash_is_not_reward(self) -> None:
        """Test that slashes are told apart from payouts."""
        assert RewardSlashEntry.model_validate(entry(1, JUNE_1)).is_reward
        assert not RewardSlashEntry.model_validate(
            entry(1, JUNE_1, event_id="Slash")
        ).is_reward


class TestSubscanCrawler:
    """Tests for SubscanCrawler."""

    def test_default_url_per_network(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that each network queries its own Subscan host."""
        monkeypatch.delenv("SUBSCAN_URL", raising=False)

        assert SubscanCrawler(Network.KUSAMA).url == (
            "https://kusama.api.subscan.io/api/scan/account/reward_slash"
        )

    def test_rejects_empty_pages(self) -> None:
        """Test that page_size must be positive."""
        with pytest.raises(ValueError, match="page_size"):
            SubscanCrawler(Network.POLKADOT, page_size=0)

    @pytest.mark.asyncio
    async def test_fetches_window_across_pages(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test paging, window filtering and ascending order."""
        httpx_mock.add_response(
            method="POST",
            url=URL,
            match_json={"address": ADDRESS, "page": 0, "row": 2},
            json=page([entry(5, JUNE_1 + 4 * DAY), entry(4, JUNE_1 + 3 * DAY)], 5),
        )
        httpx_mock.add_response(
            method="POST",
            url=URL,
            match_json={"address": ADDRESS, "page": 1, "row": 2},
            json=page([entry(3, JUNE_1 + 2 * DAY), entry(2, JUNE_1 + DAY)], 5),
        )
        httpx_mock.add_response(
            method="POST",
            url=URL,
            match_json={"address": ADDRESS, "page": 2, "row": 2},
            json=page([entry(1, JUNE_1)], 5),
        )

        async with httpx.AsyncClient() as client:
            rewards = await crawler.fetch_all_rewards(
                client, ADDRESS, JUNE_1 + DAY // 2, JUNE_1 + 3 * DAY + DAY // 2
            )

        assert [r.block_num for r in rewards] == [2, 3, 4]
        assert [r.day for r in rewards] == [
            date(2021, 6, 2),
            date(2021, 6, 3),
            date(2021, 6, 4),
        ]

    @pytest.mark.asyncio
    async def test_stops_once_past_window_start(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test that older pages are not requested."""
        httpx_mock.add_response(
            method="POST",
            url=URL,
            match_json={"address": ADDRESS, "page": 0, "row": 2},
            json=page([entry(5, JUNE_1 + 4 * DAY), entry(4, JUNE_1 + 3 * DAY)], 100),
        )

        async with httpx.AsyncClient() as client:
            rewards = await crawler.fetch_all_rewards(
                client, ADDRESS, JUNE_1 + 4 * DAY, JUNE_1 + 10 * DAY
            )

        assert [r.block_num for r in rewards] == [5]
        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.asyncio
    async def test_window_bounds_inclusive(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test that rewards exactly at start and end are kept."""
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json=page([entry(2, JUNE_1 + DAY), entry(1, JUNE_1)], 2),
        )

        async with httpx.AsyncClient() as client:
            rewards = await crawler.fetch_all_rewards(
                client, ADDRESS, JUNE_1, JUNE_1 + DAY
            )

        assert [r.block_num for r in rewards] == [1, 2]

    @pytest.mark.asyncio
    async def test_skips_slashes(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test that slash events are not exported as rewards."""
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json=page([entry(2, JUNE_1 + DAY, event_id="Slash"), entry(1, JUNE_1)], 2),
        )

        async with httpx.AsyncClient() as client:
            rewards = await crawler.fetch_all_rewards(
                client, ADDRESS, JUNE_1, JUNE_1 + DAY
            )

        assert [r.block_num for r in rewards] == [1]

    @pytest.mark.asyncio
    async def test_no_rewards(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test an account without rewards, where Subscan sends a null list."""
        httpx_mock.add_response(method="POST", url=URL, json=page(None, 0))

        async with httpx.AsyncClient() as client:
            rewards = await crawler.fetch_all_rewards(client, ADDRESS, 0, JUNE_1)

        assert rewards == []

    @pytest.mark.asyncio
    async def test_sends_api_key(self, httpx_mock: "HTTPXMock") -> None:
        """Test that a configured API key is sent."""
        crawler = SubscanCrawler(Network.POLKADOT, api_key="secret", base_url=BASE_URL)
        httpx_mock.add_response(
            method="POST",
            url=URL,
            match_headers={"X-API-Key": "secret"},
            json=page([], 0),
        )

        async with httpx.AsyncClient() as client:
            await crawler.fetch_page(client, ADDRESS, 0)

    @pytest.mark.asyncio
    async def test_api_error_code(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test that a Subscan error code fails the rewards stage."""
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json={"code": 10004, "message": "Record Not Found"},
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError, match="Record Not Found") as exc_info:
                await crawler.fetch_all_rewards(client, ADDRESS, 0, JUNE_1)

        assert exc_info.value.stage == "rewards"
        assert str(exc_info.value).startswith("Failed to fetch rewards")

    @pytest.mark.asyncio
    async def test_malformed_payload(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test that an unexpected payload is a fetch error."""
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json=page([{"block_timestamp": JUNE_1, "amount": "1"}], 1),
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError, match="Unexpected Subscan payload"):
                await crawler.fetch_page(client, ADDRESS, 0)

    @pytest.mark.asyncio
    async def test_html_body(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test that a non-JSON page served with 200 is a fetch error."""
        httpx_mock.add_response(
            method="POST", url=URL, text="<html>Just a moment...</html>"
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError, match="Non-JSON Subscan response") as exc_info:
                await crawler.fetch_page(client, ADDRESS, 0)

        assert exc_info.value.stage == "rewards"
        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("no_backoff")
    async def test_retries_then_fails(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test that server errors are retried before failing the stage."""
        for _ in range(5):
            httpx_mock.add_response(method="POST", url=URL, status_code=502)

        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError, match="page 0") as exc_info:
                await crawler.fetch_page(client, ADDRESS, 0)

        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        assert len(httpx_mock.get_requests()) == 5

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("no_backoff")
    async def test_recovers_after_retry(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test that a transient rate limit does not fail the stage."""
        httpx_mock.add_response(method="POST", url=URL, status_code=429)
        httpx_mock.add_response(method="POST", url=URL, json=page([entry(1, JUNE_1)], 1))

        async with httpx.AsyncClient() as client:
            rewards = await crawler.fetch_all_rewards(client, ADDRESS, 0, JUNE_1)

        assert [r.block_num for r in rewards] == [1]

    @pytest.mark.asyncio
    async def test_advances_progress(
        self, crawler: SubscanCrawler, httpx_mock: "HTTPXMock"
    ) -> None:
        """Test that the progress bar learns the page count and ticks per page."""
        httpx_mock.add_response(
            method="POST",
            url=URL,
            match_json={"address": ADDRESS, "page": 0, "row": 2},
            json=page([entry(3, JUNE_1 + 2 * DAY), entry(2, JUNE_1 + DAY)], 3),
        )
        httpx_mock.add_response(
            method="POST",
            url=URL,
            match_json={"address": ADDRESS, "page": 1, "row": 2},
            json=page([entry(1, JUNE_1)], 3),
        )

        console = Console(file=StringIO())
        async with httpx.AsyncClient() as client:
            with track_progress("Fetching rewards", None, console) as tracker:
                await crawler.fetch_all_rewards(
                    client, ADDRESS, 0, JUNE_1 + 2 * DAY, progress=tracker
                )
                progress, task_id = tracker
                assert progress.tasks[task_id].total == 2
                assert progress.tasks[task_id].completed == 2
