from datetime import date, datetime
from enum import StrEnum
from typing import Any, Optional

import pydantic
from pydantic import (
    BaseModel,
    Field,
    NonNegativeInt,
    PositiveInt,
    field_validator,
    model_validator,
)

from .errors import ValidationError


class PhilifyBaseModel(BaseModel):

    class Config:
        use_enum_values = True


class PredictionStatus(StrEnum):
    """
    The lifecycle state of a prediction. Only ever moves from PENDING to COMPLETED.
    """
    PENDING = "pending"
    COMPLETED = "completed"


class Prediction(PhilifyBaseModel):
    """
    A forecast of the asset's USD price on a target date.
    """

    id: Optional[PositiveInt] = Field(
        default=None,
        description="Unique ID assigned by the store. e.g. 1"
    )

    name: str = Field(min_length=1, description="Who submitted the prediction. e.g. satoshi")

    predicted_price: float = Field(gt=0, allow_inf_nan=False, description="Predicted USD price. e.g. 100000.0")

    target_date: date = Field(description="The calendar date the prediction is for. e.g. 2026-12-31")

    days_ahead: NonNegativeInt = Field(
        default=0,
        description="Days between submission and target date, clamped at 0."
    )

    status: PredictionStatus = PredictionStatus.PENDING

    price_at_submission: Optional[float] = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="Market price when the prediction was submitted. Informational only."
    )

    actual_price: Optional[float] = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="Market price on the target date."
    )

    score: Optional[float] = Field(default=None, ge=0, le=100)

    source: Optional[str] = Field(default=None, description="Where the submission came from. e.g. web")

    created_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_settlement_fields(self) -> "Prediction":
        settled = self.score is not None and self.actual_price is not None
        unsettled = self.score is None and self.actual_price is None
        if self.status == PredictionStatus.COMPLETED and not settled:
            raise ValueError("completed predictions need both score and actual_price")
        if self.status == PredictionStatus.PENDING and not unsettled:
            raise ValueError("pending predictions cannot have score or actual_price")
        return self

    @property
    def is_completed(self) -> bool:
        return self.status == PredictionStatus.COMPLETED


class PredictionSubmission(PhilifyBaseModel):
    """
    What a client sends to create a prediction.
    """

    name: str
    predicted_price: float = Field(gt=0, allow_inf_nan=False)
    target_date: date
    source: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PredictionSubmission":
        """Validate a raw request payload.

        Args:
            payload: Dictionary with name, predicted_price, target_date and optional source

        Returns:
            PredictionSubmission: The validated submission

        Raises:
            ValidationError: If a field is missing or invalid
        """
        try:
            return cls.model_validate(payload)
        except pydantic.ValidationError as e:
            raise ValidationError(str(e)) from e


class Ranking(PhilifyBaseModel):
    """Average score of one submitter over their completed predictions."""

    name: str
    average_score: int
    prediction_count: PositiveInt
