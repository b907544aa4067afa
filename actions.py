import logging
from asyncio import sleep

from device import ALL_DEVICES, COLORS, DEVICES, SIGNAL_OUTLET, ActionResult
from govee import GoveeClient

log = logging.getLogger(__name__)

# Gap between the outlet and the bulb in daughter_signal
SIGNAL_DELAY_SECONDS = 10


async def plug_on(client: GoveeClient, target: str) -> ActionResult:
    if target not in DEVICES:
        return ActionResult(ok=False, error=f"Unknown target: {target}")

    result = await client.turn_on(target)
    return ActionResult(ok=result.success, error=result.error)


async def daughter_signal(client: GoveeClient, color: str) -> ActionResult:
    """Outlet on, wait SIGNAL_DELAY_SECONDS, then bulb on with the given color."""
    if color not in COLORS:
        return ActionResult(ok=False, error=f"Invalid color: {color}. Must be 'red' or 'blue'.")

    outlet = await client.turn_on(SIGNAL_OUTLET)
    if not outlet.success:
        return ActionResult(ok=False, error=f"Failed to turn on outlet: {outlet.error}")

    log.info(f"Outlet on, waiting {SIGNAL_DELAY_SECONDS}s before setting bulb to {color}")
    await sleep(SIGNAL_DELAY_SECONDS)

    bulb = await client.set_bulb_color(color)
    if not bulb.success:
        return ActionResult(ok=False, error=f"Failed to set bulb: {bulb.error}")

    return ActionResult(ok=True)


async def all_off(client: GoveeClient) -> ActionResult:
    # Every device is attempted; failures are collected, not short-circuited
    errors = []
    for device_name in ALL_DEVICES:
        result = await client.turn_off(device_name)
        if not result.success:
            errors.append(f"{device_name}: {result.error}")

    if errors:
        return ActionResult(ok=False, error="; ".join(errors))
    return ActionResult(ok=True)
