# Standard Lib
import pytest
from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

# Local
from philify.core.data import Prediction, PredictionStatus, Ranking
from philify.core.errors import PriceUnavailable
from philify.core.scoring.batch_scorer import PredictionBatchScorer
from philify.core.scoring.base import ScoringResult

TODAY = date(2026, 10, 19)


def make_result(prediction: Prediction, actual_price: float = 100.0, score: float = 50.0) -> ScoringResult:
    return ScoringResult(
        prediction_id=prediction.id,
        predicted_price=prediction.predicted_price,
        actual_price=actual_price,
        days_diff=0,
        percentage_error=0.0,
        score=score,
    )


def make_completed(prediction_id: int, name: str, score: float) -> Prediction:
    return Prediction(
        id=prediction_id,
        name=name,
        predicted_price=100.0,
        target_date=TODAY - timedelta(days=prediction_id),
        status=PredictionStatus.COMPLETED,
        actual_price=100.0,
        score=score,
    )


@pytest.fixture
def mock_prediction_scorer():
    """Mock PredictionScorer for testing."""
    scorer = MagicMock()
    scorer.score_prediction = AsyncMock()
    return scorer


@pytest.fixture
def batch_scorer(mock_prediction_scorer):
    """Create PredictionBatchScorer instance with mocked dependencies."""
    return PredictionBatchScorer(mock_prediction_scorer)


@pytest.fixture
def due_predictions():
    return [
        Prediction(id=i, name=f"user{i}", predicted_price=100.0 + i, target_date=TODAY - timedelta(days=i))
        for i in range(1, 4)
    ]


class TestScorePredictions:
    """Test cases for batch scoring of due predictions."""

    @pytest.mark.asyncio
    async def test_scores_every_prediction(self, batch_scorer, mock_prediction_scorer, due_predictions):
        mock_prediction_scorer.score_prediction.side_effect = lambda p, today: make_result(p)

        results = await batch_scorer.score_predictions(due_predictions)

        assert [r.prediction_id for r in results] == [1, 2, 3]
        assert mock_prediction_scorer.score_prediction.call_count == 3

    @pytest.mark.asyncio
    async def test_failed_price_does_not_block_others(self, batch_scorer, mock_prediction_scorer, due_predictions):
        async def score(prediction, today):
            if prediction.id == 2:
                raise PriceUnavailable("no history for that day")
            return make_result(prediction)

        mock_prediction_scorer.score_prediction.side_effect = score

        results = await batch_scorer.score_predictions(due_predictions)

        assert [r.prediction_id for r in results] == [1, 3]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_skipped(self, batch_scorer, mock_prediction_scorer, due_predictions):
        async def score(prediction, today):
            if prediction.id == 1:
                raise RuntimeError("boom")
            return make_result(prediction)

        mock_prediction_scorer.score_prediction.side_effect = score

        results = await batch_scorer.score_predictions(due_predictions)

        assert [r.prediction_id for r in results] == [2, 3]

    @pytest.mark.asyncio
    async def test_empty_input(self, batch_scorer, mock_prediction_scorer):
        assert await batch_scorer.score_predictions([]) == []
        mock_prediction_scorer.score_prediction.assert_not_called()

    @pytest.mark.asyncio
    async def test_settlement_date_is_shared_by_the_batch(self, batch_scorer, mock_prediction_scorer, due_predictions):
        mock_prediction_scorer.score_prediction.side_effect = lambda p, today: make_result(p)
        settlement_date = TODAY + timedelta(days=1)

        await batch_scorer.score_predictions(due_predictions, settlement_date)

        for call, prediction in zip(mock_prediction_scorer.score_prediction.call_args_list, due_predictions):
            assert call.args == (prediction, settlement_date)


class TestGetRankings:
    """Test cases for ranking submitters by average score."""

    def test_rankings_sorted_by_average_score(self, batch_scorer):
        predictions = [
            make_completed(1, "alice", 40.0),
            make_completed(2, "alice", 60.0),
            make_completed(3, "bob", 90.0),
            make_completed(4, "carol", 10.0),
        ]

        rankings = batch_scorer.get_rankings(predictions)

        assert rankings == [
            Ranking(name="bob", average_score=90, prediction_count=1),
            Ranking(name="alice", average_score=50, prediction_count=2),
            Ranking(name="carol", average_score=10, prediction_count=1),
        ]

    def test_pending_predictions_are_ignored(self, batch_scorer):
        predictions = [
            make_completed(1, "alice", 70.0),
            Prediction(id=2, name="dave", predicted_price=100.0, target_date=TODAY + timedelta(days=30)),
        ]

        rankings = batch_scorer.get_rankings(predictions)

        assert [r.name for r in rankings] == ["alice"]

    def test_no_completed_predictions(self, batch_scorer):
        assert batch_scorer.get_rankings([]) == []

    def test_half_point_average_rounds_up(self, batch_scorer):
        predictions = [
            make_completed(1, "alice", 2.0),
            make_completed(2, "alice", 3.0),
            make_completed(3, "bob", 40.0),
            make_completed(4, "bob", 61.0),
        ]

        rankings = batch_scorer.get_rankings(predictions)

        assert [(r.name, r.average_score) for r in rankings] == [("bob", 51), ("alice", 3)]
