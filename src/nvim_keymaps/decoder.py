"""Decode transport payloads into raw binding records.

Script-based transports deliver a tagged JSON string; the direct transport
receives already structured dicts over RPC and only needs mode tagging.
Raw records are plain dicts and never leave the fetch pipeline.
"""

import json
import logging
from typing import Any

from nvim_keymaps.exceptions import DecodeError, TransportError

logger = logging.getLogger(__name__)

PAYLOAD_TAG = "ALL_KEYMAPS:"

RAW_FIELDS = ("lhs", "rhs", "desc", "silent", "noremap")


def split_tagged_payload(text: str | None, tag: str = PAYLOAD_TAG) -> str:
    """Strip the tag prefix from a relayed payload.

    Args:
        text: Raw text read from the shared medium
        tag: Expected prefix

    Returns:
        Payload text following the tag

    Raises:
        TransportError: If the text does not start with the tag
    """
    if not text or not text.startswith(tag):
        raise TransportError("Keymap data not found in relay payload")
    return text[len(tag) :]


def decode_payload(text: str) -> list[dict[str, Any]]:
    """Strictly parse a JSON payload into raw binding records.

    Lua encodes an empty table as either ``[]`` or ``{}``; both decode to an
    empty list.

    Args:
        text: JSON text produced by the enumeration script

    Returns:
        Ordered list of raw record dicts

    Raises:
        DecodeError: If the text is not JSON, not a list, or holds non-objects

    Example:
        >>> decode_payload('[{"lhs": "gd", "mode": "n"}]')
        [{'lhs': 'gd', 'mode': 'n'}]
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON data received from Neovim: {e}", original_error=e) from e

    if data == {}:
        return []

    if not isinstance(data, list):
        raise DecodeError(f"Expected a JSON array of keymaps, got {type(data).__name__}")

    for i, record in enumerate(data):
        if not isinstance(record, dict):
            raise DecodeError(f"Keymap record at index {i} must be an object")

    logger.debug(f"Decoded {len(data)} raw keymap records")
    return data


def tag_records(mode: str, maps: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert ``nvim_get_keymap`` results into raw records for one mode.

    Args:
        mode: Mode code the maps were enumerated for
        maps: Dicts returned by the RPC call

    Returns:
        Raw records carrying the queried mode and a callback indicator
    """
    records = []
    for entry in maps:
        if not isinstance(entry, dict):
            logger.warning(f"Skipping non-dict keymap entry in mode '{mode}': {entry!r}")
            continue
        record = {field: entry.get(field) for field in RAW_FIELDS}
        record["mode"] = mode
        record["has_callback"] = "callback" in entry
        records.append(record)
    return records
