# Standard Lib
import math
from abc import ABC, abstractmethod

# Third Party
from pydantic import BaseModel


class ScoringResult(BaseModel):
    """Result of scoring a prediction."""

    prediction_id: int | None
    predicted_price: float
    actual_price: float
    days_diff: int
    percentage_error: float
    score: float


class BaseScorer(ABC):
    """Scoring policy that turns a predicted and an actual price into a score in [0, 100]."""

    max_score: float = 100.0

    @abstractmethod
    def score(self, predicted_price: float, actual_price: float, days_diff: int) -> float:
        """Score a predicted price against the actual one.

        Args:
            predicted_price: The predicted price
            actual_price: The observed market price on the target date
            days_diff: Elapsed days between target date and settlement, already clamped to >= 0

        Returns:
            float: Score between 0.0 and 100.0
        """
        pass

    @staticmethod
    def percentage_error(predicted_price: float, actual_price: float) -> float:
        """Absolute error of the prediction as a percentage of the actual price.

        Raises:
            ValueError: If either price is not a positive finite number
        """
        if not math.isfinite(actual_price) or actual_price <= 0:
            raise ValueError(f"actual_price must be a positive finite number, got {actual_price}")
        if not math.isfinite(predicted_price) or predicted_price <= 0:
            raise ValueError(f"predicted_price must be a positive finite number, got {predicted_price}")
        return abs(predicted_price - actual_price) / actual_price * 100

    @staticmethod
    def check_days_diff(days_diff: int) -> None:
        if days_diff < 0:
            raise ValueError(f"days_diff must be >= 0, got {days_diff}")

    def clamp(self, raw: float) -> float:
        return min(self.max_score, max(0.0, raw))
