"""
Prediction API client: send a raw reading, get back a stress level and class probabilities.
Request: {"mode": "raw", "raw": {"HR", "HRV", "BT"}}. Response: {"stress_level", "probabilities"?}.
"""
import logging
from typing import Any

import httpx

from aurasense_relay.config import Settings
from aurasense_relay.core.errors import UpstreamBadResponse, UpstreamCallFailed
from aurasense_relay.schemas.readings import PredictionResult, SensorReading
from aurasense_relay.services.http_client import get_http_client

logger = logging.getLogger(__name__)

# Reading attribute -> key expected by the model API
RAW_KEYS = {
    "hr": "HR",
    "hrv": "HRV",
    "bt": "BT",
    "spo2": "SPO2",
}


def build_prediction_request(reading: SensorReading) -> dict[str, Any]:
    """Fields the device did not send are left out; nothing is defaulted to zero."""
    present = reading.model_fields_set
    raw = {key: getattr(reading, attr) for attr, key in RAW_KEYS.items() if attr in present}
    return {"mode": "raw", "raw": raw}


def _log_response_error(url: str, response: httpx.Response) -> None:
    body = (response.text or "")[:500]
    logger.error("Prediction API POST %s -> %s body=%s", url, response.status_code, body)


def parse_prediction_response(data: Any) -> PredictionResult:
    if not isinstance(data, dict) or not data.get("stress_level"):
        logger.error("Prediction API returned unexpected format: %s", str(data)[:500])
        raise UpstreamBadResponse(data)
    probabilities = data.get("probabilities") or None
    if probabilities is not None and not isinstance(probabilities, dict):
        logger.warning("Prediction API returned non-mapping probabilities, dropping: %s", str(probabilities)[:200])
        probabilities = None
    return PredictionResult(stress_level=str(data["stress_level"]), probabilities=probabilities)


async def request_prediction(reading: SensorReading, settings: Settings) -> PredictionResult:
    """POST the reading to the prediction API. Raises UpstreamCallFailed or UpstreamBadResponse."""
    url = settings.prediction_api_url
    payload = build_prediction_request(reading)
    client = get_http_client()
    try:
        r = await client.post(url, json=payload)
    except (httpx.HTTPError, ValueError, TypeError) as e:
        # ValueError/TypeError: reading values not JSON-encodable (e.g. NaN sent by the device)
        logger.error("Error calling prediction API: %s", e)
        raise UpstreamCallFailed(detail=str(e)) from e
    if not r.is_success:
        _log_response_error(url, r)
        raise UpstreamCallFailed(detail=(r.text or "")[:500], upstream_status=r.status_code)

    try:
        data = r.json() if r.content else None
    except ValueError:
        data = r.text
    result = parse_prediction_response(data)
    logger.info("Prediction API success for user_id=%s: %s", reading.user_id, result.stress_level)
    return result
