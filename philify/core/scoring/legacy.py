"""
Earlier scoring policies, superseded by ``TimeWeightedScorer``.

Kept so old scores can be reproduced and compared in regression tests.
"""

# Standard Lib
import math

# Local
from .base import BaseScorer


class LinearScorer(BaseScorer):
    """100 minus the percentage error, no credit for predicting further ahead."""

    def score(self, predicted_price: float, actual_price: float, days_diff: int) -> float:
        self.check_days_diff(days_diff)
        percentage_error = self.percentage_error(predicted_price, actual_price)
        return self.clamp(100 - percentage_error)


class LogTimeScorer(BaseScorer):
    """Accuracy scaled up by a logarithmic time weight, normalised to a one year horizon."""

    horizon_days: int = 365

    def score(self, predicted_price: float, actual_price: float, days_diff: int) -> float:
        self.check_days_diff(days_diff)
        percentage_error = self.percentage_error(predicted_price, actual_price)
        time_weight = math.log(days_diff + 1) / math.log(self.horizon_days + 1)
        return self.clamp(max(0.0, 100 - percentage_error) * (1 + time_weight))
