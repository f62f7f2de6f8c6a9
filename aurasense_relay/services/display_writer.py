"""
Firestore REST writer for the per-user "latest" display document.
Uses PATCH on the document path (create or overwrite); auth via API key query param.
"""
import logging
from datetime import datetime, timezone
from urllib.parse import quote

import httpx

from aurasense_relay.config import Settings
from aurasense_relay.core.errors import PersistenceFailed
from aurasense_relay.schemas.firestore import DisplayDocument, encode_document
from aurasense_relay.schemas.readings import PredictionResult, SensorReading
from aurasense_relay.services.http_client import get_http_client

logger = logging.getLogger(__name__)


def build_display_document(
    reading: SensorReading,
    prediction: PredictionResult,
    now: datetime | None = None,
) -> DisplayDocument:
    """Timestamp is assigned here, at write time; the device never supplies it."""
    return DisplayDocument(
        user_id=reading.user_id,
        stress_level=prediction.stress_level,
        hr=reading.hr,
        timestamp=now or datetime.now(timezone.utc),
        probabilities=prediction.probabilities,
    )


def display_document_url(user_id: str, settings: Settings) -> str:
    # user_id must stay a single path segment
    path = settings.display_document_path.format(user_id=quote(user_id, safe=""))
    return f"{settings.firestore_documents_url}/{path}"


async def write_display_document(document: DisplayDocument, settings: Settings) -> None:
    """Overwrite the user's latest document. Raises PersistenceFailed on any encoding, transport or HTTP error."""
    url = display_document_url(document.user_id, settings)
    client = get_http_client()
    try:
        r = await client.patch(
            url,
            params={"key": settings.firestore_api_key},
            json=encode_document(document),
        )
    except (httpx.HTTPError, ValueError, TypeError) as e:
        # ValueError/TypeError: body not JSON-encodable (NaN, Infinity, odd passthrough values)
        raise PersistenceFailed(detail=str(e)) from e
    if not r.is_success:
        raise PersistenceFailed(detail=(r.text or "")[:500], upstream_status=r.status_code)
    logger.info("Wrote display document for user_id=%s", document.user_id)
