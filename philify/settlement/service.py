# Standard Lib
from datetime import date
from typing import Any, Callable

# Bittensor
import bittensor

# Local
from ..core.data import Prediction, PredictionStatus, PredictionSubmission, Ranking
from ..core.scoring.batch_scorer import PredictionBatchScorer
from ..core.storage.base import PredictionStore
from ..core.utils import days_between, utc_today
from ..prices.resolver import PriceResolver
from .scheduler import SettlementScheduler


class PredictionService:
    """
    The operations the HTTP layer exposes: submit, list, delete, check and rank predictions.

    Every failure is raised to the caller; nothing here retries.
    """

    def __init__(
        self,
        store: PredictionStore,
        price_resolver: PriceResolver,
        batch_scorer: PredictionBatchScorer,
        scheduler: SettlementScheduler,
        today: Callable[[], date] = utc_today,
    ):
        self.store = store
        self.price_resolver = price_resolver
        self.batch_scorer = batch_scorer
        self.scheduler = scheduler
        self.today = today

    async def submit_prediction(self, submission: PredictionSubmission | dict[str, Any]) -> Prediction:
        """
        Validates and stores a new prediction.

        A prediction whose target date is today or earlier is scored right away and
        stored completed; anything later is stored pending for the scheduler.

        Args:
            submission: Validated submission or the raw request payload

        Returns:
            Prediction: The stored prediction with its id

        Raises:
            ValidationError: If the submission is invalid
            PriceUnavailable: If today's price or the target date's price cannot be resolved
            StoreError: If the prediction cannot be stored
        """
        if not isinstance(submission, PredictionSubmission):
            submission = PredictionSubmission.from_payload(submission)

        today = self.today()
        price_at_submission = await self.price_resolver.resolve_price(today)

        prediction = Prediction(
            name=submission.name,
            predicted_price=submission.predicted_price,
            target_date=submission.target_date,
            days_ahead=days_between(today, submission.target_date),
            price_at_submission=price_at_submission,
            source=submission.source,
        )

        if submission.target_date <= today:
            result = await self.batch_scorer.prediction_scorer.score_prediction(prediction, today)
            prediction = prediction.model_copy(update={
                'status': PredictionStatus.COMPLETED,
                'actual_price': result.actual_price,
                'score': result.score,
            })

        prediction = self.store.create(prediction)
        bittensor.logging.info(
            f"New prediction {prediction.id} from {prediction.name}: "
            f"{prediction.predicted_price} on {prediction.target_date} ({prediction.status})"
        )
        return prediction

    def list_predictions(self) -> list[Prediction]:
        """Every prediction, latest target date first."""
        return self.store.list_all()

    def delete_prediction(self, prediction_id: int) -> None:
        """Raises NotFound if there is no prediction with ``prediction_id``."""
        self.store.delete_by_id(prediction_id)

    async def check_predictions(self) -> list[Prediction]:
        """Runs a settlement sweep now and returns the predictions it settled."""
        return await self.scheduler.sweep()

    def get_rankings(self) -> list[Ranking]:
        """Average score per submitter over their completed predictions."""
        return self.batch_scorer.get_rankings(self.store.list_all())
