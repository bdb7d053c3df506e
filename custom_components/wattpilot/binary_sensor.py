"""Binary sensor platform for Wattpilot integration."""

from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
    BinarySensorEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import CAR_STATES, DOMAIN, KEY_ALLOWED_TO_CHARGE, KEY_CAR_STATE
from .coordinator import WattpilotDataUpdateCoordinator
from .core.models import DeviceIdentity
from .entity import WattpilotEntity

# car states in which a vehicle is plugged in
_CAR_CONNECTED_STATES = {
    state for state, name in CAR_STATES.items() if name in ("charging", "wait_car", "complete")
}

BINARY_SENSOR_TYPES: tuple[BinarySensorEntityDescription, ...] = (
    BinarySensorEntityDescription(
        key="allowed_to_charge",
        name="Allowed To Charge",
    ),
    BinarySensorEntityDescription(
        key="car_connected",
        name="Car Connected",
        device_class=BinarySensorDeviceClass.PLUG,
    ),
    BinarySensorEntityDescription(
        key="charging",
        name="Charging",
        device_class=BinarySensorDeviceClass.BATTERY_CHARGING,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Wattpilot binary sensors from a config entry."""
    coordinator: WattpilotDataUpdateCoordinator = hass.data[DOMAIN][
        config_entry.entry_id
    ]
    identity = coordinator.client.identity
    assert identity is not None

    async_add_entities(
        WattpilotBinarySensor(coordinator, identity, description)
        for description in BINARY_SENSOR_TYPES
    )


class WattpilotBinarySensor(WattpilotEntity, BinarySensorEntity):
    """Implementation of a Wattpilot binary sensor."""

    entity_description: BinarySensorEntityDescription

    def __init__(
        self,
        coordinator: WattpilotDataUpdateCoordinator,
        identity: DeviceIdentity,
        description: BinarySensorEntityDescription,
    ) -> None:
        """Initialize the binary sensor."""
        super().__init__(coordinator, identity)
        self.entity_description = description
        self._attr_unique_id = f"{identity.serial}_{description.key}"

    @property
    def is_on(self) -> bool | None:
        """Return true if the binary sensor is on."""
        if self.entity_description.key == "allowed_to_charge":
            allowed = self.status_value(KEY_ALLOWED_TO_CHARGE)
            return None if allowed is None else bool(allowed)

        car_state = self.status_value(KEY_CAR_STATE)
        if car_state is None:
            return None

        if self.entity_description.key == "car_connected":
            return car_state in _CAR_CONNECTED_STATES

        if self.entity_description.key == "charging":
            return CAR_STATES.get(car_state) == "charging"

        return None
