# Standard Lib
import asyncio
import traceback
from datetime import date
from typing import Callable

# Bittensor
import bittensor

# Local
from ..core.data import Prediction
from ..core.errors import NotFound
from ..core.scoring.batch_scorer import PredictionBatchScorer
from ..core.storage.base import PredictionStore
from ..core.utils import utc_today


class SettlementScheduler:
    """
    Periodically settles pending predictions whose target date has been reached.

    A sweep runs once as soon as the scheduler starts and then every ``interval``
    seconds until it is stopped. Predictions whose price cannot be resolved stay
    pending and are retried on the next sweep.

    Args:
        store: Prediction store to read due predictions from and write settlements to
        batch_scorer: Scores the due predictions
        interval: Seconds between sweeps
        today: Returns the current calendar date
    """

    def __init__(
        self,
        store: PredictionStore,
        batch_scorer: PredictionBatchScorer,
        interval: float = 3600,
        today: Callable[[], date] = utc_today,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.store = store
        self.batch_scorer = batch_scorer
        self.interval = interval
        self.today = today

        self.should_exit: bool = False
        self.is_running: bool = False
        self.background_task: asyncio.Task | None = None
        self.step = 0

    async def sweep(self) -> list[Prediction]:
        """
        Settles every due pending prediction once.

        Running it again right away is a no-op for predictions it already settled,
        since only pending predictions are queried and updated.

        Returns:
            list[Prediction]: The predictions settled by this sweep

        Raises:
            StoreError: If the store cannot be read or written
        """
        today = self.today()
        due_predictions = self.store.find_pending(as_of=today)
        if not due_predictions:
            bittensor.logging.debug("No pending predictions are due")
            return []

        bittensor.logging.info(f"Settling {len(due_predictions)} due predictions")
        scoring_results = await self.batch_scorer.score_predictions(due_predictions, today)

        settled = []
        for result in scoring_results:
            try:
                prediction = self.store.update_settlement(result.prediction_id, result.actual_price, result.score)
            except NotFound:
                bittensor.logging.warning(f"Prediction {result.prediction_id} was deleted before it could be settled")
                continue
            if prediction is not None:
                settled.append(prediction)

        skipped = len(due_predictions) - len(settled)
        bittensor.logging.info(
            f"Settled [green]{len(settled)}[/green] predictions, "
            f"[yellow]{skipped}[/yellow] left pending"
        )
        return settled

    async def run(self):
        """
        Sweeps immediately, then once per interval until ``should_exit`` is set.

        Errors in a sweep are logged and the next sweep is attempted on schedule.
        """
        while not self.should_exit:
            try:
                await self.sweep()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                bittensor.logging.error(f"Error during settlement sweep: {e}")
                bittensor.logging.debug(traceback.format_exc())

            self.step += 1
            if self.should_exit:
                break
            bittensor.logging.debug(f"step({self.step}) sleeping for {self.interval}s ...")
            await asyncio.sleep(self.interval)

    def start(self):
        """
        Starts sweeping in a background asyncio task. Must be called from a running loop.
        """
        if not self.is_running:
            bittensor.logging.debug("Starting settlement scheduler in background task.")
            self.should_exit = False
            self.background_task = asyncio.create_task(self.run())
            self.is_running = True
            bittensor.logging.debug("Started")

    async def stop(self):
        """
        Stops the background task, cancelling any sleep or sweep in progress.
        """
        if self.is_running:
            bittensor.logging.debug("Stopping settlement scheduler.")
            self.should_exit = True
            if self.background_task is not None and not self.background_task.done():
                self.background_task.cancel()
                try:
                    await self.background_task
                except asyncio.CancelledError:
                    pass
            self.is_running = False
            bittensor.logging.debug("Stopped")

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        """
        Async context manager exit for stopping the background sweeps.

        Args:
            exc_type: The type of the exception that caused the context to be exited.
                      None if the context was exited without an exception.
            exc_value: The instance of the exception that caused the context to be exited.
                       None if the context was exited without an exception.
            traceback: A traceback object encoding the stack trace.
                       None if the context was exited without an exception.
        """
        await self.stop()
