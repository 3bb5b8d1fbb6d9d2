"""
SQLite-based storage for predictions.

One row per prediction. Every write is a single statement in its own
transaction, and a CHECK constraint keeps score and actual_price in step
with the status column.
"""

import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
import bittensor

from ..data import Prediction, PredictionStatus
from ..errors import NotFound, StoreError
from .base import PredictionStore

DEFAULT_PATH = Path.home() / ".philify" / "data"
DATABASE_NAME = "predictions.db"

COLUMNS = (
    "id, name, predicted_price, target_date, days_ahead, status, "
    "current_price, actual_price, score, source, created_at"
)


class SQLitePredictionStorage(PredictionStore):
    """
    SQLite-based implementation of the prediction store.
    """

    def __init__(self, config=None):
        """
        Initialize SQLite storage with database schema.

        Args:
            config: Configuration object, its ``sqlite_path`` is the database directory
        """
        self.config = config

        # Determine database path
        if config and getattr(config, 'sqlite_path', None) is not None:
            db_dir = Path(config.sqlite_path).expanduser()
        else:
            db_dir = DEFAULT_PATH

        db_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = db_dir / DATABASE_NAME

        self._initialize_database()

        bittensor.logging.info(f"SQLite storage initialized at: {self.db_path}")

    @contextmanager
    def _connect(self):
        """Yields a connection inside a transaction and closes it afterwards."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _initialize_database(self):
        """Create database tables if they don't exist."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS predictions (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        name TEXT NOT NULL,
                        predicted_price REAL NOT NULL,
                        target_date TEXT NOT NULL,
                        days_ahead INTEGER NOT NULL DEFAULT 0,
                        status TEXT NOT NULL DEFAULT 'pending',
                        current_price REAL,
                        actual_price REAL,
                        score REAL,
                        source TEXT,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        CHECK (
                            (status = 'pending' AND actual_price IS NULL AND score IS NULL)
                            OR (status = 'completed' AND actual_price IS NOT NULL AND score IS NOT NULL)
                        )
                    )
                """)

                conn.execute("""
                    CREATE INDEX IF NOT EXISTS idx_predictions_status_target_date
                    ON predictions(status, target_date)
                """)

        except sqlite3.Error as e:
            raise StoreError(f"Failed to initialize database at {self.db_path}: {e}") from e

    @staticmethod
    def _row_to_prediction(row: sqlite3.Row) -> Prediction:
        return Prediction(
            id=row['id'],
            name=row['name'],
            predicted_price=row['predicted_price'],
            target_date=date.fromisoformat(row['target_date']),
            days_ahead=row['days_ahead'],
            status=row['status'],
            price_at_submission=row['current_price'],
            actual_price=row['actual_price'],
            score=row['score'],
            source=row['source'],
            created_at=datetime.fromisoformat(row['created_at']) if row['created_at'] else None,
        )

    def _fetch_one(self, conn: sqlite3.Connection, prediction_id: int) -> Prediction:
        row = conn.execute(
            f"SELECT {COLUMNS} FROM predictions WHERE id = ?", (prediction_id,)
        ).fetchone()
        if row is None:
            raise NotFound(prediction_id)
        return self._row_to_prediction(row)

    def create(self, prediction: Prediction) -> Prediction:
        """
        Insert a prediction.

        Args:
            prediction: Prediction without an id

        Returns:
            The stored prediction, including its id and creation timestamp
        """
        created_at = prediction.created_at or datetime.now(timezone.utc)
        try:
            with self._connect() as conn:
                cursor = conn.execute("""
                    INSERT INTO predictions (
                        name, predicted_price, target_date, days_ahead, status,
                        current_price, actual_price, score, source, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    prediction.name,
                    prediction.predicted_price,
                    prediction.target_date.isoformat(),
                    prediction.days_ahead,
                    str(prediction.status),
                    prediction.price_at_submission,
                    prediction.actual_price,
                    prediction.score,
                    prediction.source,
                    created_at.isoformat(),
                ))
                prediction_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create prediction for {prediction.name}: {e}") from e

        bittensor.logging.debug(f"Created prediction {prediction_id} ({prediction.status}) for {prediction.name}")
        return prediction.model_copy(update={'id': prediction_id, 'created_at': created_at})

    def get_by_id(self, prediction_id: int) -> Prediction:
        try:
            with self._connect() as conn:
                return self._fetch_one(conn, prediction_id)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to load prediction {prediction_id}: {e}") from e

    def list_all(self) -> list[Prediction]:
        """
        Get all predictions.

        Returns:
            list of predictions ordered by target date descending
        """
        try:
            with self._connect() as conn:
                cursor = conn.execute(f"""
                    SELECT {COLUMNS} FROM predictions
                    ORDER BY target_date DESC, id DESC
                """)
                return [self._row_to_prediction(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise StoreError(f"Failed to list predictions: {e}") from e

    def find_pending(self, as_of: date) -> list[Prediction]:
        """
        Get pending predictions that are due for settlement.

        Args:
            as_of: Predictions with a target date on or before this date are due

        Returns:
            list of due pending predictions, oldest target date first
        """
        try:
            with self._connect() as conn:
                cursor = conn.execute(f"""
                    SELECT {COLUMNS} FROM predictions
                    WHERE status = ? AND target_date <= ?
                    ORDER BY target_date ASC, id ASC
                """, (str(PredictionStatus.PENDING), as_of.isoformat()))
                return [self._row_to_prediction(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise StoreError(f"Failed to query pending predictions: {e}") from e

    def update_settlement(self, prediction_id: int, actual_price: float, score: float) -> Prediction | None:
        """
        Complete a pending prediction.

        The update only matches pending rows, so a prediction is settled at most once.

        Args:
            prediction_id: Prediction to settle
            actual_price: Market price on the target date
            score: Computed score

        Returns:
            The settled prediction, or None if it was already completed
        """
        try:
            with self._connect() as conn:
                cursor = conn.execute("""
                    UPDATE predictions
                    SET status = ?, actual_price = ?, score = ?
                    WHERE id = ? AND status = ?
                """, (
                    str(PredictionStatus.COMPLETED),
                    actual_price,
                    score,
                    prediction_id,
                    str(PredictionStatus.PENDING),
                ))

                if cursor.rowcount == 0:
                    # raises NotFound if the row does not exist at all
                    self._fetch_one(conn, prediction_id)
                    bittensor.logging.debug(f"Prediction {prediction_id} was already completed")
                    return None

                return self._fetch_one(conn, prediction_id)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to settle prediction {prediction_id}: {e}") from e

    def delete_by_id(self, prediction_id: int) -> None:
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM predictions WHERE id = ?", (prediction_id,))
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete prediction {prediction_id}: {e}") from e

        if deleted == 0:
            raise NotFound(prediction_id)
        bittensor.logging.info(f"Deleted prediction {prediction_id}")
