"""Turn a decoded request body into a SensorReading. Presence checks only; no range checks or coercion."""

from typing import Any

from aurasense_relay.config import Settings
from aurasense_relay.core.errors import InvalidPayload, MissingRequiredField
from aurasense_relay.schemas.readings import SensorReading


OPTIONAL_FIELDS = ("hrv", "bt", "spo2")


def parse_reading(payload: Any, settings: Settings) -> SensorReading:
    if not isinstance(payload, dict):
        raise InvalidPayload()

    hr = payload.get("hr")
    user_id = payload.get("userId") or settings.default_user_id
    # 0, "" and null count as missing, same as the device firmware contract
    if not hr or not user_id:
        raise MissingRequiredField()

    # Only pass keys the device actually sent so absent fields stay absent downstream
    values = {name: payload[name] for name in OPTIONAL_FIELDS if name in payload}
    return SensorReading(hr=hr, user_id=str(user_id), **values)
