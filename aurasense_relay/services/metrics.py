"""Prometheus counters, exposed through the /metrics mount in main.py."""

from prometheus_client import Counter

READINGS_TOTAL = Counter(
    "aurasense_readings_total",
    "Readings handled by the relay, by outcome",
    ["outcome"],
)

DISPLAY_WRITES_TOTAL = Counter(
    "aurasense_display_writes_total",
    "Firestore display document writes, by outcome",
    ["outcome"],
)
