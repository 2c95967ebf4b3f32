"""
qr_payload.py -- Parse Raspberry Pi configuration QR codes.

A valid code is a JSON object with type "wifi-config", an ssid and an ip.
Anything else is rejected with the message the user should see.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from provisioning.models import WIFI_CONFIG_TYPE, WifiConfigPayload

logger = logging.getLogger(__name__)

UNPARSEABLE_MESSAGE: str = "Could not parse the QR code data"
NOT_WIFI_CONFIG_MESSAGE: str = "This QR code is not a valid WiFi configuration"


class InvalidQRPayload(ValueError):
    """The scanned data is not a usable Pi configuration."""


def parse_qr_payload(data: str) -> WifiConfigPayload:
    """Parse scanned QR text into a WifiConfigPayload, or raise InvalidQRPayload."""
    try:
        parsed = json.loads(data)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.warning("Unparseable QR data: %s", exc)
        raise InvalidQRPayload(UNPARSEABLE_MESSAGE) from exc

    if (
        not isinstance(parsed, dict)
        or parsed.get("type") != WIFI_CONFIG_TYPE
        or not parsed.get("ssid")
        or not parsed.get("ip")
    ):
        logger.warning("QR data is not a wifi-config payload")
        raise InvalidQRPayload(NOT_WIFI_CONFIG_MESSAGE)

    try:
        payload = WifiConfigPayload(
            ssid=parsed.get("ssid"),
            ip=parsed.get("ip"),
        )
    except ValidationError as exc:
        logger.warning("wifi-config payload missing fields: %s", exc.error_count())
        raise InvalidQRPayload(NOT_WIFI_CONFIG_MESSAGE) from exc

    logger.info("QR configuration found: ssid=%s ip=%s", payload.ssid, payload.ip)
    return payload
