# Standard Lib
import json
import pytest

# Local
from philify.core.errors import PriceUnavailable
from philify.prices.schemas import CoinGeckoHistory, CoinGeckoMarketChart


class TestCoinGeckoMarketChart:
    """Test cases for CoinGeckoMarketChart schema."""

    def test_parse_response(self):
        chart = CoinGeckoMarketChart.parse_response({
            "prices": [[1760832000000, 107250.5], [1760835600000, 107900.0]],
            "market_caps": [[1760832000000, 2.1e12]],
        })

        assert chart.first_price == 107250.5
        assert len(chart.prices) == 2

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"prices": []},
            {"prices": "nope"},
            {"prices": [[1760832000000]]},
            {"prices": [[1760832000000, "lots"]]},
            {"prices": [[1760832000000, 0]]},
            {"prices": [[1760832000000, -3.5]]},
            {"prices": [[1760832000000, float("inf")]]},
            {"prices": [[1760832000000, float("nan")]]},
            {"prices": [[1760832000000, 107000.0], [1760835600000, float("inf")]]},
            None,
        ],
    )
    def test_malformed_response_raises_price_unavailable(self, data):
        with pytest.raises(PriceUnavailable):
            CoinGeckoMarketChart.parse_response(data)

    def test_overflowing_json_price_raises_price_unavailable(self):
        data = json.loads('{"prices": [[1760832000000, 1e400]]}')

        with pytest.raises(PriceUnavailable):
            CoinGeckoMarketChart.parse_response(data)


class TestCoinGeckoHistory:
    """Test cases for CoinGeckoHistory schema."""

    def test_parse_response(self):
        history = CoinGeckoHistory.parse_response(
            {"market_data": {"current_price": {"usd": 64123.45}}},
            "01-05-2025",
        )

        assert history.price == 64123.45
        assert history.date == "01-05-2025"

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"market_data": None},
            {"market_data": {}},
            {"market_data": {"current_price": {"eur": 1.0}}},
            {"market_data": {"current_price": {"usd": None}}},
            {"market_data": {"current_price": {"usd": 0}}},
            {"market_data": {"current_price": {"usd": "abc"}}},
            {"market_data": {"current_price": {"usd": float("inf")}}},
            [],
        ],
    )
    def test_malformed_response_raises_price_unavailable(self, data):
        with pytest.raises(PriceUnavailable):
            CoinGeckoHistory.parse_response(data, "01-05-2025")
