# Standard Lib
from typing import Any

# Third Party
import pydantic
from pydantic import Field, FiniteFloat

# Local
from ..core.data import PhilifyBaseModel
from ..core.errors import PriceUnavailable


class CoinGeckoMarketChart(PhilifyBaseModel):
    """Time series returned by the market chart endpoint, as (timestamp_ms, price) samples."""

    prices: list[tuple[float, FiniteFloat]] = Field(min_length=1)

    @property
    def first_price(self) -> float:
        return self.prices[0][1]

    @classmethod
    def parse_response(cls, data: Any) -> "CoinGeckoMarketChart":
        """Parse a market chart response into a CoinGeckoMarketChart model.

        Args:
            data: Dictionary with a 'prices' list of [timestamp, price] pairs

        Returns:
            CoinGeckoMarketChart: Parsed model instance

        Raises:
            PriceUnavailable: If the response has no usable price samples
        """
        try:
            chart = cls.model_validate(data)
        except pydantic.ValidationError as e:
            raise PriceUnavailable(f"Malformed market chart response: {e}") from e
        if not chart.first_price > 0:
            raise PriceUnavailable(f"Market chart returned a non-positive price: {chart.first_price}")
        return chart


class CoinGeckoHistory(PhilifyBaseModel):
    """USD price of the asset on one day, from the history endpoint."""

    date: str
    price: float = Field(gt=0, allow_inf_nan=False)

    @classmethod
    def parse_response(cls, data: Any, date: str) -> "CoinGeckoHistory":
        """Parse a history response dictionary.

        Args:
            data: Dictionary containing market_data.current_price.usd
            date: The DD-MM-YYYY date that was requested

        Returns:
            CoinGeckoHistory: Parsed model instance

        Raises:
            PriceUnavailable: If the price is missing or not positive
        """
        try:
            price = data["market_data"]["current_price"]["usd"]
        except (KeyError, TypeError) as e:
            raise PriceUnavailable(f"No USD price in history response for {date}") from e
        try:
            return cls(date=date, price=price)
        except pydantic.ValidationError as e:
            raise PriceUnavailable(f"Invalid USD price in history response for {date}: {price!r}") from e
