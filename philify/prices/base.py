
from datetime import date
from typing import Protocol


class BasePriceClient(Protocol):


    def __init__(self, api_key: str, provider: str, *args, **kwargs):
        self.api_key = api_key
        self.provider = provider


    async def get_current_price(self) -> float:
        ...

    async def get_historical_price(self, day: date) -> float:
        ...
