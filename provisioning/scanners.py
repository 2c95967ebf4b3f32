"""
scanners.py -- Simulated WiFi and Bluetooth discovery.

No radio is touched: each scan waits `delay` seconds and returns a fixed set
of nearby networks or devices. Scans are ordinary coroutines, so cancelling
the awaiting task cancels the scan.
"""

from __future__ import annotations

import asyncio
import logging

from provisioning.models import BluetoothDevice, WifiNetwork

logger = logging.getLogger(__name__)

SCAN_DELAY_SECONDS: float = 3.0
PI_NAME: str = "RaspberryPi_Config"

SIMULATED_NETWORKS: tuple[WifiNetwork, ...] = (
    WifiNetwork(ssid=PI_NAME, signal=90, secured=False, is_pi=True),
    WifiNetwork(ssid="HomeWiFi", signal=75),
    WifiNetwork(ssid="NeighborWiFi", signal=40),
    WifiNetwork(ssid="GuestNetwork", signal=55, secured=False),
)

SIMULATED_DEVICES: tuple[BluetoothDevice, ...] = (
    BluetoothDevice(id="1", name=PI_NAME, is_pi=True, rssi=-45),
    BluetoothDevice(id="2", name="iPhone_Steven", rssi=-60),
    BluetoothDevice(id="3", name="Samsung_Galaxy", rssi=-70),
    BluetoothDevice(id="4", name="MacBook_Pro", rssi=-55),
)


class NotAPiDevice(ValueError):
    """The selected device is not a Raspberry Pi."""


async def scan_wifi_networks(delay: float = SCAN_DELAY_SECONDS) -> list[WifiNetwork]:
    """Return nearby networks, Pi hotspots first, then by signal strength."""
    logger.info("Scanning for WiFi networks (simulated, %.1fs)", delay)
    await asyncio.sleep(delay)
    networks = sorted(SIMULATED_NETWORKS, key=lambda n: (not n.is_pi, -n.signal))
    logger.info("WiFi scan found %d networks", len(networks))
    return [n.model_copy() for n in networks]


async def scan_bluetooth_devices(delay: float = SCAN_DELAY_SECONDS) -> list[BluetoothDevice]:
    """Return nearby devices, Pi devices first, then by signal strength."""
    logger.info("Scanning for Bluetooth devices (simulated, %.1fs)", delay)
    await asyncio.sleep(delay)
    devices = sorted(
        SIMULATED_DEVICES,
        key=lambda d: (not d.is_pi, -(d.rssi if d.rssi is not None else -200)),
    )
    logger.info("Bluetooth scan found %d devices", len(devices))
    return [d.model_copy() for d in devices]


def select_pi_device(device: BluetoothDevice) -> BluetoothDevice:
    """Accept a device for configuration, or raise NotAPiDevice."""
    if not device.is_pi:
        logger.warning("Rejected non-Pi device: %s", device.name)
        raise NotAPiDevice("Please select a Raspberry Pi device")
    return device
