from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional


class DeviceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    sku: str
    device: str


class Capability(BaseModel):
    type: str
    instance: str
    value: int


class ControlResult(BaseModel):
    success: bool
    error: Optional[str] = None


class ActionRequest(BaseModel):
    action: Optional[str] = None
    target: Optional[str] = None
    color: Optional[str] = None


class ActionResult(BaseModel):
    ok: bool
    error: Optional[str] = None


# Discovered via the Govee device list on 2024-12-23
DEVICES: Dict[str, DeviceEntry] = {
    "nathan_outlet": DeviceEntry(sku="H5086", device="06:5E:5C:E7:53:3D:09:2E"),
    "girlfriend_outlet": DeviceEntry(sku="H5086", device="06:BD:5C:E7:53:42:C1:AE"),
    "grandparents_outlet": DeviceEntry(sku="H5086", device="09:1F:5C:E7:53:60:A1:5E"),
    "daughter_outlet": DeviceEntry(sku="H5086", device="08:BF:5C:E7:53:3D:45:10"),
    "daughter_bulb": DeviceEntry(sku="H6008", device="2D:B8:98:17:3C:C6:09:A8"),
}

# Power-off order for all_off
ALL_DEVICES: List[str] = list(DEVICES)

SIGNAL_OUTLET = "daughter_outlet"
SIGNAL_BULB = "daughter_bulb"

# Packed as R << 16 | G << 8 | B
COLORS: Dict[str, int] = {
    "red": 0xFF0000,
    "blue": 0x0000FF,
}


POWER_TYPE = "devices.capabilities.on_off"
POWER_INSTANCE = "powerSwitch"
COLOR_TYPE = "devices.capabilities.color_setting"
COLOR_INSTANCE = "colorRgb"


def power(on: bool) -> Capability:
    return Capability(type=POWER_TYPE, instance=POWER_INSTANCE, value=1 if on else 0)


def color_rgb(color: str) -> Capability:
    return Capability(type=COLOR_TYPE, instance=COLOR_INSTANCE, value=COLORS[color])
