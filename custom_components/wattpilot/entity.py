"""Base entity classes for Wattpilot integration."""

from __future__ import annotations

from typing import Any

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER
from .coordinator import WattpilotDataUpdateCoordinator
from .core.models import DeviceIdentity


class WattpilotEntity(CoordinatorEntity[WattpilotDataUpdateCoordinator]):
    """Base class for charger entities backed by the status coordinator."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: WattpilotDataUpdateCoordinator,
        identity: DeviceIdentity,
    ) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        self._serial = identity.serial
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, identity.serial)},
            manufacturer=identity.manufacturer or MANUFACTURER,
            model=identity.devicetype,
            name=identity.name or f"Wattpilot {identity.serial}",
            sw_version=identity.version or None,
            serial_number=identity.serial,
        )

    @property
    def serial(self) -> str:
        """Charger serial number."""
        return self._serial

    @property
    def available(self) -> bool:
        """Return if entity is available."""
        return (
            self.coordinator.last_update_success
            and self.coordinator.client.is_connected
        )

    def status_value(self, key: str) -> Any:
        """Return a value from the latest status snapshot, or None."""
        if not self.coordinator.data:
            return None
        return self.coordinator.data.get(key)
