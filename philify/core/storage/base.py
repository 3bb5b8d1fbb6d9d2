from abc import ABC, abstractmethod
from datetime import date

from ..data import Prediction


class PredictionStore(ABC):
    """Durable record of predictions and their lifecycle state."""

    @abstractmethod
    def create(self, prediction: Prediction) -> Prediction:
        """Stores a new prediction and returns it with its assigned id."""
        pass

    @abstractmethod
    def get_by_id(self, prediction_id: int) -> Prediction:
        """Returns one prediction. Raises NotFound if the id does not exist."""
        pass

    @abstractmethod
    def list_all(self) -> list[Prediction]:
        """Returns every prediction, latest target date first."""
        pass

    @abstractmethod
    def find_pending(self, as_of: date) -> list[Prediction]:
        """Returns pending predictions whose target date is on or before ``as_of``."""
        pass

    @abstractmethod
    def update_settlement(self, prediction_id: int, actual_price: float, score: float) -> Prediction | None:
        """
        Atomically marks a pending prediction completed with its actual price and score.

        Returns the updated prediction, or None if it was already completed.
        Raises NotFound if the id does not exist.
        """
        pass

    @abstractmethod
    def delete_by_id(self, prediction_id: int) -> None:
        """Deletes one prediction. Raises NotFound if the id does not exist."""
        pass
