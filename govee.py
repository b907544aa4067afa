import logging
import uuid

import httpx

from config import GOVEE_API_URL
from device import DEVICES, SIGNAL_BULB, Capability, ControlResult, color_rgb, power

log = logging.getLogger(__name__)

SUCCESS_CODE = 200


class GoveeClient:
    """Sends single control commands to the Govee router API.

    Every call makes exactly one attempt and returns a ControlResult;
    transport failures and malformed replies are reported, not raised.
    """

    def __init__(self, http: httpx.AsyncClient, api_key: str, url: str = GOVEE_API_URL):
        self._http = http
        self._api_key = api_key
        self._url = url

    async def control_device(self, sku: str, device: str, capability: Capability) -> ControlResult:
        request_id = str(uuid.uuid4())
        body = {
            "requestId": request_id,
            "payload": {
                "sku": sku,
                "device": device,
                "capability": capability.model_dump(),
            },
        }
        headers = {
            "Govee-API-Key": self._api_key,
            "Content-Type": "application/json",
        }

        log.debug(f"Govee control {request_id}: {sku} {device} {capability.instance}={capability.value}")
        try:
            response = await self._http.post(self._url, json=body, headers=headers)
        except httpx.HTTPError as e:
            log.warning(f"Govee request {request_id} failed: {type(e).__name__}: {e}")
            return ControlResult(success=False, error=f"Request to Govee API failed: {type(e).__name__}")

        try:
            data = response.json()
        except ValueError:
            log.warning(f"Govee request {request_id} returned non-JSON body (HTTP {response.status_code})")
            return ControlResult(success=False,
                                 error=f"Invalid response from Govee API (HTTP {response.status_code})")

        code = data.get("code") if isinstance(data, dict) else None
        if not isinstance(code, int) or isinstance(code, bool):
            log.warning(f"Govee request {request_id} returned no status code (HTTP {response.status_code})")
            return ControlResult(success=False,
                                 error=f"Invalid response from Govee API (HTTP {response.status_code})")

        if code != SUCCESS_CODE:
            message = data.get("message") or f"Govee API returned code {code}"
            log.warning(f"Govee request {request_id} rejected: {code} {message}")
            return ControlResult(success=False, error=str(message))

        return ControlResult(success=True)

    async def _switch(self, device_name: str, on: bool) -> ControlResult:
        entry = DEVICES.get(device_name)
        if entry is None:
            return ControlResult(success=False, error=f"Unknown device: {device_name}")
        return await self.control_device(entry.sku, entry.device, power(on))

    async def turn_on(self, device_name: str) -> ControlResult:
        return await self._switch(device_name, True)

    async def turn_off(self, device_name: str) -> ControlResult:
        return await self._switch(device_name, False)

    async def set_bulb_color(self, color: str) -> ControlResult:
        """Power the bulb on, then set its color. Stops after a failed power-on."""
        bulb = DEVICES[SIGNAL_BULB]

        on_result = await self.control_device(bulb.sku, bulb.device, power(True))
        if not on_result.success:
            return on_result

        return await self.control_device(bulb.sku, bulb.device, color_rgb(color))
