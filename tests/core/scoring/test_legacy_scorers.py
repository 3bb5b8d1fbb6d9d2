# Standard Lib
import math
import pytest

# Local
from philify.core.scoring import LinearScorer, LogTimeScorer, TimeWeightedScorer


class TestLinearScorer:
    """Test cases for the linear scoring policy."""

    @pytest.mark.parametrize(
        "predicted_price,actual_price,expected",
        [
            (100.0, 100.0, 100.0),
            (90.0, 100.0, 90.0),
            (125.0, 100.0, 75.0),
            (300.0, 100.0, 0.0),
        ],
    )
    def test_linear_score(self, predicted_price, actual_price, expected):
        assert LinearScorer().score(predicted_price, actual_price, 30) == pytest.approx(expected)

    def test_ignores_days_diff(self):
        scorer = LinearScorer()
        assert scorer.score(90.0, 100.0, 0) == scorer.score(90.0, 100.0, 365)

    def test_rejects_zero_actual_price(self):
        with pytest.raises(ValueError):
            LinearScorer().score(100.0, 0.0, 1)


class TestLogTimeScorer:
    """Test cases for the logarithmic time weighted policy."""

    def test_same_day_has_no_time_weight(self):
        assert LogTimeScorer().score(90.0, 100.0, 0) == pytest.approx(90.0)

    def test_log_time_weight(self):
        expected = 50.0 * (1 + math.log(31) / math.log(366))
        assert LogTimeScorer().score(50.0, 100.0, 30) == pytest.approx(expected)

    def test_clamped_at_100(self):
        assert LogTimeScorer().score(100.0, 100.0, 365) == 100.0

    def test_rejects_negative_days_diff(self):
        with pytest.raises(ValueError):
            LogTimeScorer().score(100.0, 100.0, -3)


@pytest.mark.parametrize("scorer", [LinearScorer(), LogTimeScorer(), TimeWeightedScorer()])
def test_policies_share_bounds(scorer):
    for days_diff in (0, 3, 7, 8, 100):
        for predicted_price in (10.0, 95.0, 100.0, 140.0, 500.0):
            assert 0.0 <= scorer.score(predicted_price, 100.0, days_diff) <= 100.0
