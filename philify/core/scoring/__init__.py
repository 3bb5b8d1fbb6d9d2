# Local
from .base import BaseScorer, ScoringResult
from .legacy import LinearScorer, LogTimeScorer
from .prediction_scorer import PredictionScorer, TimeWeightedScorer
from .batch_scorer import PredictionBatchScorer

__all__ = [
    "BaseScorer",
    "ScoringResult",
    "LinearScorer",
    "LogTimeScorer",
    "TimeWeightedScorer",
    "PredictionScorer",
    "PredictionBatchScorer"
]
