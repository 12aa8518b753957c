"""Polkadot staking rewards exporter.

Crawls Subscan for the staking rewards of an address, prices each reward
with CoinGecko's daily price and writes `block_num;block_time;amount;price`
rows to a CSV file or to stdout.

Usage:
    python -m src.cli -a <address> -c usd -f "2021-01-01 00:00:00"
    python -m src.cli -a <address> -c eur -n ksm -f "2021-01-01 00:00:00" --stdout
"""

from argparse import ArgumentParser, ArgumentTypeError, Namespace
from asyncio import run
from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console

from src.data.coingecko.client import CoinGeckoPriceFeed
from src.data.subscan.crawler import SubscanCrawler
from src.export import pipeline
from src.export.errors import RewardsError
from src.export.models import ExportConfig, Network, PriceSnapshot, RewardEvent
from src.export.sinks import create_sink
from src.helpers.constants import INPUT_DATETIME_FORMAT, OUTPUT_DATE_FORMAT
from src.helpers.http import create_http_client
from src.helpers.logging import get_logger, set_log_level
from src.helpers.parsers import parse_datetime
from src.helpers.progress import track_progress


logger = get_logger(__name__)


def _datetime_arg(value: str) -> datetime:
    try:
        return parse_datetime(value)
    except ValueError as e:
        msg = f"expected \"YYYY-MM-DD HH:MM:SS\", got {value!r}"
        raise ArgumentTypeError(msg) from e


def _network_arg(value: str) -> Network:
    try:
        return Network.from_str(value)
    except ValueError as e:
        raise ArgumentTypeError(str(e)) from e


def build_parser() -> ArgumentParser:
    """Build the command line parser."""
    parser = ArgumentParser(
        prog="polkadot-rewards",
        description="Polkadot staking rewards CLI",
    )
    parser.add_argument(
        "-f",
        "--from",
        dest="start",
        required=True,
        type=_datetime_arg,
        help=f'date to start crawling for staking rewards. Format: "{INPUT_DATETIME_FORMAT}"',
    )
    parser.add_argument(
        "-t",
        "--to",
        dest="end",
        type=_datetime_arg,
        default=None,
        help="date to stop crawling for staking rewards. Defaults to now (UTC)",
    )
    parser.add_argument(
        "-n",
        "--network",
        type=_network_arg,
        default=Network.POLKADOT,
        help="network to crawl for rewards. One of: polkadot, kusama, dot, ksm",
    )
    parser.add_argument(
        "-c",
        "--currency",
        required=True,
        help="fiat currency to price rewards in, as listed by the price feed (e.g. usd)",
    )
    parser.add_argument(
        "-a",
        "--address",
        required=True,
        help="network-formatted address to get staking rewards for",
    )
    parser.add_argument(
        "--date-format",
        default=OUTPUT_DATE_FORMAT,
        help=f'strftime pattern for the block_time column (default: "{OUTPUT_DATE_FORMAT}")',
    )
    parser.add_argument(
        "-p",
        "--folder",
        type=Path,
        default=None,
        help="directory to write the CSV file to (default: current directory)",
    )
    parser.add_argument(
        "-s",
        "--stdout",
        action="store_true",
        help="write the CSV to stdout instead of a file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log progress instead of showing a progress bar",
    )
    return parser


def build_config(args: Namespace) -> ExportConfig:
    """Resolve defaults (end = now, folder = cwd) into an immutable config."""
    return ExportConfig(
        address=args.address,
        network=args.network,
        currency=args.currency,
        start=args.start,
        end=args.end or datetime.now(UTC),
        date_format=args.date_format,
        folder=args.folder or Path.cwd(),
        stdout=args.stdout,
        verbose=args.verbose,
    )


async def fetch(config: ExportConfig) -> tuple[list[RewardEvent], list[PriceSnapshot]]:
    """Fetch the rewards in the configured window, then their daily prices.

    Raises:
        FetchError: If either stage fails
    """
    crawler = SubscanCrawler(config.network)
    feed = CoinGeckoPriceFeed(config.network)

    async with create_http_client() as client:
        if config.verbose:
            rewards = await crawler.fetch_all_rewards(
                client, config.address, config.start_timestamp, config.end_timestamp
            )
            prices = await feed.fetch_prices(client, rewards)
            return rewards, prices

        with track_progress(
            "Fetching rewards", total=None, show_time_remaining=False
        ) as tracker:
            rewards = await crawler.fetch_all_rewards(
                client,
                config.address,
                config.start_timestamp,
                config.end_timestamp,
                progress=tracker,
            )
        with track_progress("Fetching prices", total=len(rewards)) as tracker:
            prices = await feed.fetch_prices(client, rewards, progress=tracker)

    return rewards, prices


def export(config: ExportConfig) -> int:
    """Run a full export.

    Returns:
        int: Number of rows written

    Raises:
        RewardsError: If fetching, reconciling or writing fails
    """
    logger.info(
        "Crawling %s rewards of %s from %s to %s",
        config.network.id,
        config.address,
        config.start,
        config.end,
    )
    rewards, prices = run(fetch(config))

    with create_sink(config) as sink:
        return pipeline.run(
            rewards,
            prices,
            config.network,
            config.currency,
            config.date_format,
            sink,
            strict=True,
        )


def main(argv: list[str] | None = None) -> int:
    """Entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    config = build_config(args)
    set_log_level("INFO" if config.verbose else "WARNING")

    try:
        rows = export(config)
    except RewardsError as e:
        logger.error("%s", e)
        return 1

    destination = "STDOUT" if config.stdout else str(config.output_path)
    Console(stderr=True).print(
        f"Wrote {rows} rows to {destination}", markup=False, highlight=False, soft_wrap=True
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
