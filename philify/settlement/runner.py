# Standard Lib
import asyncio
import os

# Bittensor
import bittensor

# Local
from ..core.config import check_config, config
from ..core.scoring.batch_scorer import PredictionBatchScorer
from ..core.scoring.prediction_scorer import PredictionScorer
from ..core.storage.sqlite_storage import SQLitePredictionStorage
from ..prices.cache import PriceCache
from ..prices.client import PriceClient
from ..prices.resolver import PriceResolver
from .scheduler import SettlementScheduler
from .service import PredictionService


def build_service(config: "bittensor.Config") -> PredictionService:
    """
    Wires storage, price resolution, scoring and the scheduler from the configuration.
    """
    api_key = os.getenv("COINGECKO_API_KEY")
    if not api_key:
        raise ValueError("COINGECKO_API_KEY is not set")

    storage = SQLitePredictionStorage(config=config)
    price_client = PriceClient(
        api_key=api_key,
        provider="coingecko",
        coin_id=config.prices.coin_id,
        timeout=config.prices.timeout,
    )
    price_resolver = PriceResolver(price_client, PriceCache(ttl=config.prices.cache_ttl))
    batch_scorer = PredictionBatchScorer(PredictionScorer(price_resolver))
    scheduler = SettlementScheduler(storage, batch_scorer, interval=config.settlement.interval)
    return PredictionService(storage, price_resolver, batch_scorer, scheduler)


async def run(config: "bittensor.Config"):
    service = build_service(config)
    async with service.scheduler:
        bittensor.logging.info(
            f"Settlement scheduler running every {config.settlement.interval}s, "
            f"database at {service.store.db_path}"
        )
        await asyncio.Event().wait()


def main():
    cfg = config()
    bittensor.logging.set_config(config=cfg.logging)
    check_config(cfg)
    try:
        asyncio.run(run(cfg))
    except KeyboardInterrupt:
        bittensor.logging.success("Settlement scheduler killed by keyboard interrupt.")


if __name__ == "__main__":
    main()
