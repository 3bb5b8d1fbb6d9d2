# Standard Lib
import asyncio
from enum import StrEnum
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

# Third Party
import aiohttp

# Bittensor
import bittensor
# Local
from .base import BasePriceClient
from .schemas import CoinGeckoHistory, CoinGeckoMarketChart
from ..core.errors import PriceUnavailable
from ..core.utils import format_history_date

@dataclass
class APIConfig:
    base_url: str
    api_key: Optional[str] = None
    api_key_header: Optional[str] = None
    api_params: Optional[dict] = None

class PriceProvider(StrEnum):
    COINGECKO = "coingecko"

    @property
    def config(self) -> APIConfig:
        if self == PriceProvider.COINGECKO:
            return APIConfig(
                base_url="https://api.coingecko.com/api/v3",
                api_key_header="x-cg-pro-api-key",
                api_params={
                    "vs_currency": "usd",
                    "days": "1",
                }
            )
        raise ValueError(f"Unknown provider: {self}")

class PriceClient(BasePriceClient):

    def __init__(self, api_key: str, provider: str, coin_id: str = "bitcoin", timeout: float = 30, *args, **kwargs):
        super().__init__(api_key, provider, *args, **kwargs)
        self.provider_enum = PriceProvider(provider)
        self.api_config = self.provider_enum.config
        self.coin_id = coin_id
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def headers(self) -> dict[str, str]:
        return {self.api_config.api_key_header: self.api_key} if self.api_key else {}

    @property
    def market_chart_endpoint(self) -> str:
        return f"{self.api_config.base_url}/coins/{self.coin_id}/market_chart"

    @property
    def history_endpoint(self) -> str:
        return f"{self.api_config.base_url}/coins/{self.coin_id}/history"

    async def get_current_price(self) -> float:
        """Current USD price: the first sample of the recent market chart.

        Raises:
            PriceUnavailable: On HTTP errors, timeouts or malformed responses
        """
        data = await self._get_json(self.market_chart_endpoint, params=dict(self.api_config.api_params))
        chart = CoinGeckoMarketChart.parse_response(data)
        bittensor.logging.debug(f"Current {self.coin_id} price: {chart.first_price}")
        return chart.first_price

    async def get_historical_price(self, day: date) -> float:
        """USD price of the asset on ``day``.

        Raises:
            PriceUnavailable: On HTTP errors, timeouts or malformed responses
        """
        formatted_date = format_history_date(day)
        data = await self._get_json(self.history_endpoint, params={"date": formatted_date})
        history = CoinGeckoHistory.parse_response(data, formatted_date)
        bittensor.logging.debug(f"{self.coin_id} price on {formatted_date}: {history.price}")
        return history.price

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, params=params, headers=self.headers) as response:
                    response.raise_for_status()
                    return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            bittensor.logging.error(f"Failed to fetch {url} with params {params}: {e!r}")
            raise PriceUnavailable(f"Price request to {url} failed: {e}") from e
