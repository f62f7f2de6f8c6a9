"""
Reading relay: validate -> predict -> write display document.
A failed Firestore write is logged and absorbed: the device still gets its prediction.
"""
import logging
from typing import Any

from aurasense_relay.config import Settings
from aurasense_relay.core.errors import PersistenceFailed, RelayError
from aurasense_relay.schemas.readings import PredictionResult
from aurasense_relay.services.display_writer import build_display_document, write_display_document
from aurasense_relay.services.ingestion import parse_reading
from aurasense_relay.services.metrics import DISPLAY_WRITES_TOTAL, READINGS_TOTAL
from aurasense_relay.services.prediction_client import request_prediction

logger = logging.getLogger(__name__)


async def relay_reading(payload: Any, settings: Settings) -> PredictionResult:
    """Run one reading through the pipeline. Raises RelayError subclasses for client-visible failures."""
    try:
        settings.require_store_settings()
        reading = parse_reading(payload, settings)
        logger.info("Received reading for user_id=%s: %s", reading.user_id, payload)
        prediction = await request_prediction(reading, settings)
    except RelayError as e:
        READINGS_TOTAL.labels(outcome=type(e).__name__).inc()
        raise

    document = build_display_document(reading, prediction)
    try:
        await write_display_document(document, settings)
        DISPLAY_WRITES_TOTAL.labels(outcome="ok").inc()
    except PersistenceFailed as e:
        DISPLAY_WRITES_TOTAL.labels(outcome="failed").inc()
        logger.error(
            "Error writing display document for user_id=%s (status=%s): %s",
            reading.user_id,
            e.upstream_status,
            e.detail,
        )
    READINGS_TOTAL.labels(outcome="ok").inc()
    return prediction
