# Standard Lib
import asyncio
import math
from collections.abc import Iterable
from datetime import date

# Third Party
import bittensor

# Local
from ..data import Prediction, Ranking
from ..errors import PriceUnavailable
from .base import ScoringResult
from .prediction_scorer import PredictionScorer


class PredictionBatchScorer:
    """Coordinates scoring of many predictions and aggregates rankings."""

    def __init__(self, prediction_scorer: PredictionScorer):
        """Initialize the batch scorer.

        Args:
            prediction_scorer: Scorer used for each individual prediction
        """
        self.prediction_scorer = prediction_scorer

    async def score_predictions(
        self, predictions: list[Prediction], today: date | None = None
    ) -> list[ScoringResult]:
        """Score predictions concurrently, skipping the ones that fail.

        A failure for one prediction never prevents the others from being scored.

        Args:
            predictions: Predictions whose target date has been reached
            today: Settlement date shared by every prediction in the batch

        Returns:
            list[ScoringResult]: Results for the predictions that could be scored
        """
        if not predictions:
            return []

        bittensor.logging.debug(f"Executing {len(predictions)} scoring tasks")
        scoring_tasks = [self.prediction_scorer.score_prediction(prediction, today) for prediction in predictions]
        results = await asyncio.gather(*scoring_tasks, return_exceptions=True)

        successful_results = []
        for prediction, result in zip(predictions, results):
            if isinstance(result, PriceUnavailable):
                bittensor.logging.warning(f"Price unavailable for prediction {prediction.id} ({prediction.target_date}): {result}")
            elif isinstance(result, BaseException):
                bittensor.logging.error(f"Error scoring prediction {prediction.id}: {result!r}")
            else:
                successful_results.append(result)

        bittensor.logging.debug(f"Successfully scored {len(successful_results)} of {len(predictions)} predictions")
        return successful_results

    def get_rankings(self, predictions: Iterable[Prediction]) -> list[Ranking]:
        """Average completed scores per submitter, best first.

        Args:
            predictions: Any predictions; pending ones are ignored

        Returns:
            list[Ranking]: Rankings sorted by average score descending
        """
        totals: dict[str, dict[str, float]] = {}
        for prediction in predictions:
            if not prediction.is_completed:
                continue
            stats = totals.setdefault(prediction.name, {'total_score': 0.0, 'count': 0})
            stats['total_score'] += prediction.score
            stats['count'] += 1

        rankings = [
            Ranking(
                name=name,
                average_score=math.floor(stats['total_score'] / stats['count'] + 0.5),
                prediction_count=stats['count'],
            )
            for name, stats in totals.items()
        ]
        return sorted(rankings, key=lambda ranking: ranking.average_score, reverse=True)
