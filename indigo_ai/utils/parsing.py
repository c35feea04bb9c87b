# indigo_ai/utils/parsing.py
import json
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from indigo_ai.core.errors import InterpretationError

logger = logging.getLogger(__name__)

# The only desired states the AI flow acts on.
APPLICABLE_STATES = ("on", "off")

_FENCE = re.compile(r"```(json)?(.*?)```", re.DOTALL)
# Opening fence of a reply cut off before its closing ```
_OPEN_FENCE = re.compile(r"^.*?```(json)?", re.DOTALL)


class DeviceSelection(BaseModel):
    """First-round reply: which devices the model wants to inspect."""
    device_paths: List[str] = Field(default_factory=list)


class DesiredState(BaseModel):
    model_config = ConfigDict(frozen=True)

    device_path: str
    desired_state: Optional[str] = None


class DesiredStateReply(BaseModel):
    """Second-round reply: end states per device, plus the model's remark."""
    devices: List[DesiredState] = Field(default_factory=list)
    text: Optional[str] = None


def _is_truncated(doc: str, error: json.JSONDecodeError) -> bool:
    return error.pos >= len(doc.rstrip())


def decode_reply(reply_text: str) -> Dict[str, Any]:
    """
    Decodes a JSON object emitted by the model.

    Example:
      Input:  ```json\n{"devicePaths": ["/devices/lamp"]\n```
      Output: {"devicePaths": ["/devices/lamp"]}

    Models cut off at the token limit tend to lose the final brace, so when
    decoding fails at end of input exactly one "}" is appended and decoding
    is retried once. Nothing else is repaired.
    """
    # 1. Unwrap a Markdown code block if there is one
    match = _FENCE.search(reply_text)
    if match:
        doc = match.group(2).strip()
    else:
        doc = _OPEN_FENCE.sub("", reply_text.strip()).strip()

    # 2. Strict parse, then the single-brace repair
    try:
        data = json.loads(doc)
    except json.JSONDecodeError as e:
        if not _is_truncated(doc, e):
            raise InterpretationError(f"Reply is not valid JSON ({e}): {reply_text}") from e
        try:
            data = json.loads(doc + "}")
        except json.JSONDecodeError as retry_error:
            raise InterpretationError(
                f"Reply is not valid JSON even after closing it ({retry_error}): {reply_text}"
            ) from retry_error
        logger.info("Recovered truncated reply by appending '}'")

    if not isinstance(data, dict):
        raise InterpretationError(f"Expected a JSON object, got {type(data).__name__}: {reply_text}")
    return data


def parse_device_selection(reply_text: str) -> DeviceSelection:
    """Returns the devicePaths the model picked, in order."""
    data = decode_reply(reply_text)
    paths = data.get("devicePaths")
    if not isinstance(paths, list):
        raise InterpretationError("'devicePaths' key not found or has an invalid type")

    selection = DeviceSelection()
    for path in paths:
        if not isinstance(path, str):
            logger.warning("Skipping device path that is not a string: %r", path)
            continue
        selection.device_paths.append(path)
    return selection


def parse_desired_states(reply_text: str) -> DesiredStateReply:
    """
    Returns the per-device desired states.

    Entries that are not objects or have no devicePath are skipped; a
    desiredState that is not a string is kept as None (no change).
    """
    data = decode_reply(reply_text)
    devices = data.get("devices")
    if not isinstance(devices, list):
        raise InterpretationError("'devices' key not found or has an invalid type")

    entries = []
    for device in devices:
        if not isinstance(device, dict):
            logger.warning("Invalid device format, skipping: %r", device)
            continue
        path = device.get("devicePath")
        if not isinstance(path, str) or not path:
            logger.warning("Device entry without a devicePath, skipping: %r", device)
            continue
        state = device.get("desiredState")
        entries.append(DesiredState(
            device_path=path,
            desired_state=state if isinstance(state, str) else None,
        ))

    text = data.get("text")
    return DesiredStateReply(devices=entries, text=text if isinstance(text, str) else None)
