"""
config_sender.py -- Validate WiFi credentials and send them to the Pi.

Sending is simulated: after a short delay the Pi is assumed to have
received the credentials. Real delivery over the hotspot, QR-discovered
address or Bluetooth link is outside this package.
"""

from __future__ import annotations

import asyncio
import logging

from provisioning.models import (
    BluetoothTransport,
    MethodInfo,
    ProvisioningResult,
    QRCodeTransport,
    Transport,
    WifiCredentials,
    WifiHotspotTransport,
)

logger = logging.getLogger(__name__)

SEND_DELAY_SECONDS: float = 3.0

SENT_TITLE: str = "Configuration Sent!"
SENT_MESSAGE: str = (
    "Your Raspberry Pi will now attempt to connect to the WiFi network. "
    "Check the Pi's status LED for connection status."
)


def validate_credentials(credentials: WifiCredentials) -> list[str]:
    """Return the form errors for a credentials submission, empty when valid."""
    errors: list[str] = []
    if not credentials.ssid.strip():
        errors.append("Please enter a WiFi network name")
    if not credentials.password.strip():
        errors.append("Please enter a WiFi password")
    return errors


def get_method_info(transport: Transport | None) -> MethodInfo:
    """Display metadata for the transport the user came through."""
    if isinstance(transport, WifiHotspotTransport):
        return MethodInfo(
            title="WiFi Hotspot Configuration",
            description="Connected via WiFi hotspot",
            icon="wifi",
            color="#4CAF50",
        )
    if isinstance(transport, QRCodeTransport):
        return MethodInfo(
            title="QR Code Configuration",
            description=f"Connected to: {transport.payload.ssid or 'Unknown'}",
            icon="qr-code",
            color="#2196F3",
        )
    if isinstance(transport, BluetoothTransport):
        return MethodInfo(
            title="Bluetooth Configuration",
            description=f"Connected to: {transport.device.name or 'Unknown'}",
            icon="bluetooth",
            color="#9C27B0",
        )
    return MethodInfo(
        title="WiFi Configuration",
        description="Configure your Pi's WiFi settings",
        icon="settings",
        color="#666",
    )


async def send_configuration(
    transport: Transport,
    credentials: WifiCredentials,
    delay: float = SEND_DELAY_SECONDS,
) -> ProvisioningResult:
    """Validate and (simulated) deliver credentials over a transport."""
    errors = validate_credentials(credentials)
    if errors:
        logger.info("Rejected configuration for %s: %s", transport.kind, errors)
        return ProvisioningResult(
            success=False,
            kind=transport.kind,
            title="Error",
            message=errors[0],
            errors=errors,
        )

    info = get_method_info(transport)
    logger.info("Sending WiFi configuration via %s (ssid=%s)", info.title, credentials.ssid)
    await asyncio.sleep(delay)

    return ProvisioningResult(
        success=True,
        kind=transport.kind,
        title=SENT_TITLE,
        message=SENT_MESSAGE,
    )
