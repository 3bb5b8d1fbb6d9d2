import argparse
import os
from pathlib import Path

import bittensor

DEFAULT_SQLITE_PATH = Path("~/.philify/data")
DEFAULT_SETTLEMENT_INTERVAL = 3600
DEFAULT_PRICE_CACHE_TTL = 300
DEFAULT_PRICE_TIMEOUT = 30
DEFAULT_COIN_ID = "bitcoin"


def add_args(parser: argparse.ArgumentParser):
    """Adds philify arguments to the parser."""
    parser.add_argument(
        "--sqlite_path",
        type=str,
        default=os.getenv("SQLITE_PATH", str(DEFAULT_SQLITE_PATH)),
        help="Directory that holds the predictions database.",
    )

    parser.add_argument(
        "--settlement.interval",
        type=int,
        default=int(os.getenv("SETTLEMENT_INTERVAL", DEFAULT_SETTLEMENT_INTERVAL)),
        help="Seconds between settlement sweeps.",
    )

    parser.add_argument(
        "--prices.cache_ttl",
        type=float,
        default=float(os.getenv("PRICE_CACHE_TTL", DEFAULT_PRICE_CACHE_TTL)),
        help="Seconds a fetched price stays fresh in the cache.",
    )

    parser.add_argument(
        "--prices.timeout",
        type=float,
        default=float(os.getenv("PRICE_TIMEOUT", DEFAULT_PRICE_TIMEOUT)),
        help="Total timeout in seconds for a market data request.",
    )

    parser.add_argument(
        "--prices.coin_id",
        type=str,
        default=DEFAULT_COIN_ID,
        help="CoinGecko id of the asset being predicted.",
    )


def config(args: list[str] | None = None) -> "bittensor.Config":
    """
    Returns the configuration object built from the command line (or ``args``).
    """
    parser = argparse.ArgumentParser()
    bittensor.logging.add_args(parser)
    add_args(parser)
    return bittensor.Config(parser, args=args)


def check_config(config: "bittensor.Config"):
    """Validates the configuration and creates the data directory."""
    if config.settlement.interval <= 0:
        raise ValueError(f"settlement.interval must be positive, got {config.settlement.interval}")
    if config.prices.cache_ttl <= 0:
        raise ValueError(f"prices.cache_ttl must be positive, got {config.prices.cache_ttl}")
    if config.prices.timeout <= 0:
        raise ValueError(f"prices.timeout must be positive, got {config.prices.timeout}")

    data_dir = Path(config.sqlite_path).expanduser()
    data_dir.mkdir(parents=True, exist_ok=True)
    bittensor.logging.debug(f"Data directory: {data_dir.absolute()}")
