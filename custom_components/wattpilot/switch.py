"""Switch platform for Wattpilot integration."""

from __future__ import annotations

from typing import Any

from homeassistant.components.switch import (
    SwitchDeviceClass,
    SwitchEntity,
    SwitchEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import (
    DOMAIN,
    FORCE_STATE_NEUTRAL,
    FORCE_STATE_OFF,
    KEY_FORCE_STATE,
)
from .coordinator import WattpilotDataUpdateCoordinator
from .core.models import DeviceIdentity
from .entity import WattpilotEntity

SWITCH_TYPES: tuple[SwitchEntityDescription, ...] = (
    SwitchEntityDescription(
        key="charging_enabled",
        name="Charging Enabled",
        device_class=SwitchDeviceClass.SWITCH,
        icon="mdi:ev-station",
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Wattpilot switches from a config entry."""
    coordinator: WattpilotDataUpdateCoordinator = hass.data[DOMAIN][
        config_entry.entry_id
    ]
    identity = coordinator.client.identity
    assert identity is not None

    async_add_entities(
        WattpilotSwitch(coordinator, identity, description)
        for description in SWITCH_TYPES
    )


class WattpilotSwitch(WattpilotEntity, SwitchEntity):
    """Implementation of a Wattpilot switch.

    Off forces charging off; on hands control back to the charger's own logic.
    """

    entity_description: SwitchEntityDescription

    def __init__(
        self,
        coordinator: WattpilotDataUpdateCoordinator,
        identity: DeviceIdentity,
        description: SwitchEntityDescription,
    ) -> None:
        """Initialize the switch."""
        super().__init__(coordinator, identity)
        self.entity_description = description
        self._attr_unique_id = f"{identity.serial}_{description.key}"

    @property
    def is_on(self) -> bool | None:
        """Return true if charging is not forced off."""
        force_state = self.status_value(KEY_FORCE_STATE)
        if force_state is None:
            return None
        return force_state != FORCE_STATE_OFF

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn the switch on."""
        await self.coordinator.async_set_property(KEY_FORCE_STATE, FORCE_STATE_NEUTRAL)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn the switch off."""
        await self.coordinator.async_set_property(KEY_FORCE_STATE, FORCE_STATE_OFF)
