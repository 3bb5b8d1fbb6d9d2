# Standard Lib
import math
from datetime import date
from typing import Callable

import bittensor

# Local
from ..data import Prediction
from ..utils import days_between, utc_today
from .base import BaseScorer, ScoringResult
from ...prices.resolver import PriceResolver


class TimeWeightedScorer(BaseScorer):
    """Scores accuracy, boosted by how far in advance the prediction was made.

    Near-term predictions (a week or less) get a small multiplier bonus, plus a
    flat accuracy bonus when they land within 5% of the actual price.
    """

    horizon_days: int = 365
    short_term_days: int = 7
    short_term_step: float = 0.1
    accuracy_threshold: float = 5.0
    accuracy_bonus: float = 20.0

    def score(self, predicted_price: float, actual_price: float, days_diff: int) -> float:
        return self.clamp(self.raw_score(predicted_price, actual_price, days_diff))

    def raw_score(self, predicted_price: float, actual_price: float, days_diff: int) -> float:
        """The score before clamping to [0, 100]."""
        self.check_days_diff(days_diff)
        percentage_error = self.percentage_error(predicted_price, actual_price)

        time_weight = math.sqrt(days_diff + 1) / math.sqrt(self.horizon_days + 1)
        short_term = days_diff <= self.short_term_days
        short_term_bonus = (self.short_term_days - days_diff) * self.short_term_step if short_term else 0.0
        accuracy_bonus = self.accuracy_bonus if short_term and percentage_error < self.accuracy_threshold else 0.0

        return max(0.0, 100 - percentage_error) * (1 + time_weight + short_term_bonus) + accuracy_bonus


class PredictionScorer:
    """Resolves the actual price of a prediction and scores it."""

    def __init__(
        self,
        price_resolver: PriceResolver,
        scorer: BaseScorer | None = None,
        today: Callable[[], date] = utc_today,
    ):
        """Initialize the prediction scorer.

        Args:
            price_resolver: Resolver for current and historical prices
            scorer: Scoring policy, defaults to TimeWeightedScorer
            today: Returns the current calendar date
        """
        self.price_resolver = price_resolver
        self.scorer = scorer or TimeWeightedScorer()
        self.today = today

    async def score_prediction(self, prediction: Prediction, today: date | None = None) -> ScoringResult:
        """Score a prediction against the market price on its target date.

        Args:
            prediction: The prediction to score, its target date must not be in the future
            today: Settlement date, defaults to the scorer's own clock

        Returns:
            ScoringResult: The scoring result

        Raises:
            PriceUnavailable: If the price for the target date cannot be resolved
        """
        actual_price = await self.price_resolver.resolve_price(prediction.target_date)
        return self.score_price(prediction, actual_price, today)

    def score_price(self, prediction: Prediction, actual_price: float, today: date | None = None) -> ScoringResult:
        """Score a prediction against an already known actual price."""
        if today is None:
            today = self.today()
        days_diff = days_between(prediction.target_date, today)
        score = self.scorer.score(prediction.predicted_price, actual_price, days_diff)
        bittensor.logging.debug(
            f"Prediction {prediction.id}: predicted {prediction.predicted_price}, "
            f"actual {actual_price}, days_diff {days_diff}, score {score}"
        )
        return ScoringResult(
            prediction_id=prediction.id,
            predicted_price=prediction.predicted_price,
            actual_price=actual_price,
            days_diff=days_diff,
            percentage_error=self.scorer.percentage_error(prediction.predicted_price, actual_price),
            score=score,
        )
