"""Sensor platform for Wattpilot integration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import (
    UnitOfElectricCurrent,
    UnitOfEnergy,
    UnitOfPower,
)
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import (
    CAR_STATES,
    DOMAIN,
    KEY_CAR_STATE,
    KEY_ENERGY,
    KEY_ENERGY_SINCE_CONNECTED,
    KEY_ENERGY_TOTAL,
    KEY_REQUESTED_CURRENT,
    NRG_TOTAL_POWER_INDEX,
)
from .coordinator import WattpilotDataUpdateCoordinator
from .core.models import DeviceIdentity
from .entity import WattpilotEntity


def _car_state(value: Any) -> str | None:
    return CAR_STATES.get(value) if value is not None else None


def _total_power(value: Any) -> float | None:
    if isinstance(value, list) and len(value) > NRG_TOTAL_POWER_INDEX:
        return value[NRG_TOTAL_POWER_INDEX]
    return None


@dataclass(frozen=True, kw_only=True)
class WattpilotSensorEntityDescription(SensorEntityDescription):
    """Describes a Wattpilot sensor read from one status key."""

    status_key: str
    value_fn: Callable[[Any], Any] = lambda value: value


SENSOR_TYPES: tuple[WattpilotSensorEntityDescription, ...] = (
    WattpilotSensorEntityDescription(
        key="car_state",
        name="Car State",
        status_key=KEY_CAR_STATE,
        device_class=SensorDeviceClass.ENUM,
        options=list(CAR_STATES.values()),
        value_fn=_car_state,
    ),
    WattpilotSensorEntityDescription(
        key="requested_current",
        name="Requested Current",
        status_key=KEY_REQUESTED_CURRENT,
        native_unit_of_measurement=UnitOfElectricCurrent.AMPERE,
        device_class=SensorDeviceClass.CURRENT,
        state_class=SensorStateClass.MEASUREMENT,
    ),
    WattpilotSensorEntityDescription(
        key="power",
        name="Charging Power",
        status_key=KEY_ENERGY,
        native_unit_of_measurement=UnitOfPower.WATT,
        device_class=SensorDeviceClass.POWER,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=_total_power,
    ),
    WattpilotSensorEntityDescription(
        key="energy_since_connected",
        name="Energy Since Car Connected",
        status_key=KEY_ENERGY_SINCE_CONNECTED,
        native_unit_of_measurement=UnitOfEnergy.WATT_HOUR,
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL,
    ),
    WattpilotSensorEntityDescription(
        key="energy_total",
        name="Total Energy",
        status_key=KEY_ENERGY_TOTAL,
        native_unit_of_measurement=UnitOfEnergy.WATT_HOUR,
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL_INCREASING,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Wattpilot sensors from a config entry."""
    coordinator: WattpilotDataUpdateCoordinator = hass.data[DOMAIN][
        config_entry.entry_id
    ]
    identity = coordinator.client.identity
    assert identity is not None

    async_add_entities(
        WattpilotSensor(coordinator, identity, description)
        for description in SENSOR_TYPES
    )


class WattpilotSensor(WattpilotEntity, SensorEntity):
    """Implementation of a Wattpilot sensor."""

    entity_description: WattpilotSensorEntityDescription

    def __init__(
        self,
        coordinator: WattpilotDataUpdateCoordinator,
        identity: DeviceIdentity,
        description: WattpilotSensorEntityDescription,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, identity)
        self.entity_description = description
        self._attr_unique_id = f"{identity.serial}_{description.key}"

    @property
    def native_value(self) -> float | int | str | None:
        """Return the state of the sensor."""
        return self.entity_description.value_fn(
            self.status_value(self.entity_description.status_key)
        )
