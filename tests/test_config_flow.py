"""Tests for the reauthentication step of the config flow."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from homeassistant.const import CONF_HOST, CONF_PASSWORD
from homeassistant.data_entry_flow import FlowResultType

from custom_components.wattpilot.config_flow import WattpilotConfigFlow
from custom_components.wattpilot.core.exceptions import AuthenticationFailedError
from custom_components.wattpilot.core.models import DeviceIdentity

IDENTITY = DeviceIdentity(
    name="Garage",
    hostname="Wattpilot_S1",
    serial="S1",
    version="38.5",
    manufacturer="M",
    devicetype="D",
    protocol=2.0,
)


def _reauth_flow() -> tuple[WattpilotConfigFlow, MagicMock]:
    entry = MagicMock(
        data={CONF_HOST: "192.0.2.10", CONF_PASSWORD: "old"}, unique_id="S1"
    )
    flow = WattpilotConfigFlow()
    flow.hass = MagicMock()
    flow.hass.config_entries.async_get_entry.return_value = entry
    flow.context = {"source": "reauth", "entry_id": "entry"}
    flow.flow_id = "flow"
    return flow, entry


@pytest.mark.asyncio
async def test_reauth_shows_password_form():
    flow, _ = _reauth_flow()

    result = await flow.async_step_reauth({})

    assert result["type"] == FlowResultType.FORM
    assert result["step_id"] == "reauth_confirm"
    assert result["description_placeholders"] == {"host": "192.0.2.10"}


@pytest.mark.asyncio
async def test_reauth_updates_password():
    flow, entry = _reauth_flow()
    await flow.async_step_reauth({})

    with patch.object(
        flow, "_async_validate", AsyncMock(return_value=IDENTITY)
    ) as validate, patch.object(
        flow, "async_update_reload_and_abort", return_value={"type": "abort"}
    ) as update:
        await flow.async_step_reauth_confirm({CONF_PASSWORD: "new"})

    validate.assert_awaited_once_with("192.0.2.10", "new")
    update.assert_called_once_with(
        entry, data={CONF_HOST: "192.0.2.10", CONF_PASSWORD: "new"}
    )


@pytest.mark.asyncio
async def test_reauth_wrong_password():
    flow, _ = _reauth_flow()
    await flow.async_step_reauth({})

    with patch.object(
        flow,
        "_async_validate",
        AsyncMock(side_effect=AuthenticationFailedError("rejected")),
    ):
        result = await flow.async_step_reauth_confirm({CONF_PASSWORD: "wrong"})

    assert result["type"] == FlowResultType.FORM
    assert result["errors"] == {"base": "invalid_auth"}


@pytest.mark.asyncio
async def test_reauth_other_charger():
    flow, _ = _reauth_flow()
    await flow.async_step_reauth({})
    other = IDENTITY.model_copy(update={"serial": "S2"})

    with patch.object(flow, "_async_validate", AsyncMock(return_value=other)):
        result = await flow.async_step_reauth_confirm({CONF_PASSWORD: "new"})

    assert result["type"] == FlowResultType.ABORT
    assert result["reason"] == "wrong_device"
