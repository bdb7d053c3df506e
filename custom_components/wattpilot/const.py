"""Constants for the Wattpilot integration."""

from typing import Final

DOMAIN: Final = "wattpilot"

MANUFACTURER: Final = "Fronius"

# seconds
CONNECT_TIMEOUT: Final = 30
UPDATE_INTERVAL: Final = 60

# Status document keys
KEY_CAR_STATE: Final = "car"
KEY_REQUESTED_CURRENT: Final = "amp"
KEY_ENERGY: Final = "nrg"
KEY_ENERGY_SINCE_CONNECTED: Final = "wh"
KEY_ENERGY_TOTAL: Final = "eto"
KEY_ALLOWED_TO_CHARGE: Final = "alw"
KEY_FORCE_STATE: Final = "frc"

# Index of the total power in the nrg array
NRG_TOTAL_POWER_INDEX: Final = 11

CAR_STATES: Final = {
    0: "unknown",
    1: "idle",
    2: "charging",
    3: "wait_car",
    4: "complete",
    5: "error",
}

FORCE_STATE_NEUTRAL: Final = 0
FORCE_STATE_OFF: Final = 1
