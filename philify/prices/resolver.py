# Standard Lib
from datetime import date
from typing import Callable

# Bittensor
import bittensor

# Local
from .base import BasePriceClient
from .cache import NullPriceCache, PriceCache
from ..core.utils import format_history_date, utc_today

CURRENT_PRICE_KEY = "current"


class PriceResolver:
    """Resolves the asset's USD price for today or a past date, through a freshness cache."""

    def __init__(
        self,
        price_client: BasePriceClient,
        cache: PriceCache | NullPriceCache | None = None,
        today: Callable[[], date] = utc_today,
    ):
        """
        Args:
            price_client: Client for the market data provider
            cache: Price cache shared by everything using this resolver, no caching if None
            today: Returns the current calendar date
        """
        self.price_client = price_client
        self.cache = cache if cache is not None else NullPriceCache()
        self.today = today

    async def resolve_price(self, day: date) -> float:
        """Returns the USD price on ``day``.

        Today's price comes from the current price endpoint, any earlier day from
        the history endpoint. Failures are not retried here.

        Raises:
            PriceUnavailable: If the provider fails or returns a malformed response
            ValueError: If ``day`` is in the future
        """
        today = self.today()
        if day > today:
            raise ValueError(f"Cannot resolve a price for a future date: {day}")

        key = CURRENT_PRICE_KEY if day == today else format_history_date(day)
        cached_price = self.cache.get(key)
        if cached_price is not None:
            bittensor.logging.debug(f"Using cached price for {key}: {cached_price}")
            return cached_price

        if day == today:
            price = await self.price_client.get_current_price()
        else:
            price = await self.price_client.get_historical_price(day)

        self.cache.set(key, price)
        return price
