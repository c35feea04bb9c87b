# indigo_ai/capabilities/home_control/tools.py
import json
from typing import Any, Dict, Iterable

from indigo_ai.core.iot import DeviceSummary


def format_device_line(device: DeviceSummary) -> str:
    return f"- {device.name} ({device.rest_url})"


def format_inventory(devices: Iterable[DeviceSummary]) -> str:
    """Inventory handed to the device-selection prompt."""
    return ",".join(format_device_line(d) for d in devices)


def format_device_state(path: str, detail: Dict[str, Any]) -> str:
    """One block of the state dump handed to the desired-state prompt."""
    return f"{path} {json.dumps(detail, default=str)}\n\n"


def print_device_list(devices: Iterable[DeviceSummary]) -> None:
    print("Devices:")
    for device in devices:
        print(format_device_line(device))


def print_device_info(detail: Dict[str, Any]) -> None:
    print("Device information:")
    for key, value in detail.items():
        print(f"{key}: {value}")
