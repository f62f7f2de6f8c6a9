"""Pydantic schemas for device readings and the prediction API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SensorReading(BaseModel):
    """One sample posted by the device. Sensor values are kept exactly as received."""

    model_config = ConfigDict(populate_by_name=True)

    hr: Any
    hrv: Any = None
    bt: Any = None
    spo2: Any = None  # only sent by SpO2-equipped firmware
    user_id: str = Field(alias="userId")


class PredictionResult(BaseModel):
    """Usable answer from the prediction API."""

    stress_level: str
    probabilities: dict[str, Any] | None = None  # label -> probability, values passed through


class ReadingAccepted(BaseModel):
    success: bool = True
    prediction: str


class ErrorBody(BaseModel):
    error: str
