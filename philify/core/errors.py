class PhilifyError(Exception):
    """Base class for all errors raised by philify."""


class ValidationError(PhilifyError):
    """A prediction submission is missing fields or has invalid values."""


class PriceUnavailable(PhilifyError):
    """The market data provider failed or returned a malformed response."""


class NotFound(PhilifyError):
    """No prediction exists with the requested id."""

    def __init__(self, prediction_id: int):
        super().__init__(f"Prediction {prediction_id} not found")
        self.prediction_id = prediction_id


class StoreError(PhilifyError):
    """The prediction store failed to read or write."""
