"""Device ingestion: POST a reading, get the stress prediction back. Served at /api/v1/readings and /api."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from aurasense_relay.api.deps import get_settings
from aurasense_relay.config import Settings
from aurasense_relay.core.errors import InvalidMethod
from aurasense_relay.schemas.readings import ErrorBody, ReadingAccepted
from aurasense_relay.services.relay import relay_reading

router = APIRouter(tags=["readings"])
# Firmware already in the field posts to /api
device_router = APIRouter(tags=["readings"], include_in_schema=False)

REJECTED_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def ingest_reading(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ReadingAccepted:
    """Relay a reading to the prediction API and store the result as the user's latest display document."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    prediction = await relay_reading(payload, settings)
    return ReadingAccepted(prediction=prediction.stress_level)


async def reject_method() -> None:
    raise InvalidMethod()


def _register(target: APIRouter, path: str) -> None:
    target.add_api_route(
        path,
        ingest_reading,
        methods=["POST"],
        response_model=ReadingAccepted,
        responses={400: {"model": ErrorBody}, 405: {"model": ErrorBody}, 500: {"model": ErrorBody}},
    )
    target.add_api_route(path, reject_method, methods=REJECTED_METHODS, include_in_schema=False)


_register(router, "/readings")
_register(device_router, "/api")
