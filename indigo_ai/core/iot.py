# indigo_ai/core/iot.py
import logging
from typing import Any, Dict, List, Optional

import requests
from requests.auth import HTTPDigestAuth
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from indigo_ai.core.config import Settings
from indigo_ai.core.errors import DecodeError, DeviceStateError, NetworkError

logger = logging.getLogger(__name__)

# Query strings understood by PUT /devices/<name>
STATE_QUERIES = {
    "off": "isOn=0",
    "on": "isOn=1",
}

# Indigo answers some accepted PUTs with 401; treat those as done.
UNAUTHORIZED_OK = {"status": "ok"}


class DeviceSummary(BaseModel):
    """One entry of GET /devices.json."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    rest_parent: str = Field("", alias="restParent")
    rest_url: str = Field("", alias="restURL")
    name_url_encoded: str = Field("", alias="nameURLEncoded")
    name: str = Field("", alias="name")


_device_list = TypeAdapter(List[DeviceSummary])


def build_state_query(desired_state: str, param: str = "") -> str:
    """Query string for a state change: on, off or dim (brightness=param)."""
    if desired_state in STATE_QUERIES:
        return STATE_QUERIES[desired_state]
    if desired_state == "dim":
        if param == "" or param is None:
            raise DeviceStateError("State 'dim' needs a brightness value (-deviceStateParam).")
        return f"brightness={param}"
    raise DeviceStateError(f"Unsupported device state '{desired_state}'. Use on, off or dim.")


class IndigoClient:
    def __init__(
        self,
        host: str,
        port: str,
        username: str,
        password: str,
        timeout: Optional[float] = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = f"http://{host}:{port}"
        self.timeout = timeout
        # HTTPDigestAuth answers the 401 challenge and replays the request
        self.session = session or requests.Session()
        self.session.auth = HTTPDigestAuth(username, password)

    @classmethod
    def from_settings(cls, settings: Settings, host: Optional[str] = None, port: Optional[str] = None) -> "IndigoClient":
        username, password = settings.credentials()
        return cls(
            host or settings.INDIGO_IP,
            port or settings.INDIGO_PORT,
            username,
            password,
            timeout=settings.HTTP_TIMEOUT,
        )

    def _get(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise NetworkError(f"HTTP Error {e.response.status_code}: {e.response.reason} ({url})") from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(f"Connection Refused to {self.base_url}. Check IP.") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"GET {url} failed: {e}") from e
        return _decode(response, url)

    def list_devices(self) -> List[DeviceSummary]:
        """Fetch the device inventory."""
        data = self._get("/devices.json")
        if not isinstance(data, list):
            raise DecodeError(f"Expected a JSON array from /devices.json, got {type(data).__name__}.")
        try:
            return _device_list.validate_python(data)
        except ValidationError as e:
            raise DecodeError(f"Unexpected device list shape: {e}") from e

    def get_device(self, path: str) -> Dict[str, Any]:
        """Fetch the detail of one device by its REST path (e.g. /devices/office-lamp)."""
        data = self._get(path)
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object from {path}, got {type(data).__name__}.")
        return data

    def set_device_state(self, path: str, desired_state: str, param: str = "") -> Dict[str, Any]:
        """
        Turn a device on/off or dim it.

        Returns the device detail from the API, or {"status": "ok"} when the
        API answers 401 (no body to rely on in that case).
        """
        query = build_state_query(desired_state, param)
        url = f"{self.base_url}{path}?{query}"
        logger.debug("PUT %s", url)
        try:
            response = self.session.put(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise DeviceStateError(f"PUT {url} failed: {e}") from e

        if response.status_code == 401:
            logger.info("PUT %s answered 401, treating as applied", url)
            return dict(UNAUTHORIZED_OK)
        if not 200 <= response.status_code < 300:
            raise DeviceStateError(f"PUT {url} returned {response.status_code} {response.reason or ''}".rstrip())

        data = _decode(response, url)
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object from {path}, got {type(data).__name__}.")
        return data


def _decode(response: requests.Response, url: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise DecodeError(f"Response from {url} is not valid JSON: {e}") from e
