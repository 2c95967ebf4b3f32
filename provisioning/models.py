"""
models.py -- Pydantic models for Raspberry Pi WiFi provisioning.

Defines: WifiNetwork, BluetoothDevice, WifiConfigPayload, the three
configuration transports (a union discriminated on `kind`), WifiCredentials,
MethodInfo, ProvisioningResult.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Valid enumerations
# ---------------------------------------------------------------------------

class TransportKind(str, Enum):
    WIFI = "wifi"
    QR = "qr"
    BLUETOOTH = "bluetooth"


WIFI_CONFIG_TYPE: str = "wifi-config"


# ---------------------------------------------------------------------------
# Discovery models
# ---------------------------------------------------------------------------

class WifiNetwork(BaseModel):
    """A network seen during a WiFi scan."""

    ssid: str
    signal: int = Field(ge=0, le=100)
    secured: bool = True
    is_pi: bool = False


class BluetoothDevice(BaseModel):
    """A device seen during a Bluetooth scan."""

    id: str
    name: str
    is_pi: bool = False
    rssi: Optional[int] = None


class WifiConfigPayload(BaseModel):
    """Contents of a Pi configuration QR code."""

    type: Literal["wifi-config"] = "wifi-config"
    ssid: str
    ip: str


# ---------------------------------------------------------------------------
# Transports -- how the phone reached the Pi
# ---------------------------------------------------------------------------

class WifiHotspotTransport(BaseModel):
    kind: Literal["wifi"] = "wifi"
    hotspot_ssid: Optional[str] = None


class QRCodeTransport(BaseModel):
    kind: Literal["qr"] = "qr"
    payload: WifiConfigPayload


class BluetoothTransport(BaseModel):
    kind: Literal["bluetooth"] = "bluetooth"
    device: BluetoothDevice


Transport = Annotated[
    Union[WifiHotspotTransport, QRCodeTransport, BluetoothTransport],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Form and result models
# ---------------------------------------------------------------------------

class WifiCredentials(BaseModel):
    """The network the Pi should join."""

    ssid: str = ""
    password: str = ""


class MethodInfo(BaseModel):
    """Display metadata for a transport."""

    title: str
    description: str
    icon: str
    color: str


class ProvisioningResult(BaseModel):
    """Outcome of sending credentials to the Pi."""

    success: bool
    kind: TransportKind
    title: str
    message: str
    errors: list[str] = Field(default_factory=list)
