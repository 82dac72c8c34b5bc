from __future__ import annotations

from collections.abc import Iterable
from threading import Lock

import structlog

from intro.models.schemas import Device

SEED_DEVICES = (
    Device(id=1, mac="5f-33-CC-1F-43-82", firmware="2.1.6"),
    Device(id=2, mac="EF-2B-C4-F5-D6-34", firmware="2.1.6"),
)

logger = structlog.get_logger(__name__)


class DeviceRegistry:
    """Process-local, ordered device list (resets on restart)."""

    def __init__(self, devices: Iterable[Device] = SEED_DEVICES) -> None:
        self._lock = Lock()
        self._devices: list[Device] = [d.model_copy() for d in devices]

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)

    def list_devices(self) -> list[Device]:
        with self._lock:
            return [d.model_copy() for d in self._devices]

    def create_device(self, device: Device) -> Device:
        stored = device.model_copy()
        with self._lock:
            self._devices.append(stored)
            total = len(self._devices)
        logger.info("device.created", device_id=stored.id, mac=stored.mac, devices_total=total)
        return stored.model_copy()

    def upgrade_firmware(self, device_id: int, firmware: str) -> int:
        """Set the firmware of every device with ``device_id``; returns how many changed."""

        updated = 0
        with self._lock:
            for device in self._devices:
                if device.id == device_id:
                    device.firmware = firmware
                    updated += 1

        if updated:
            logger.info("device.upgraded", device_id=device_id, firmware=firmware, updated=updated)
        else:
            logger.warning("device.upgrade_unmatched", device_id=device_id, firmware=firmware)
        return updated


_REGISTRY: DeviceRegistry | None = None


def get_device_registry() -> DeviceRegistry:
    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = DeviceRegistry()
    return _REGISTRY


def reset_device_registry() -> None:
    """Drop the registry so the next access starts from the seed devices (used by tests)."""

    global _REGISTRY
    _REGISTRY = None
