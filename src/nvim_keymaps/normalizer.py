"""Normalize raw binding records into canonical keymap entities."""

import logging
import re
from collections.abc import Iterable
from typing import Any

from nvim_keymaps.models import (
    CALLBACK_SENTINEL,
    LEADER_TOKEN,
    PLUG_MARKER,
    KeymapItem,
    resolve_mode_name,
)

logger = logging.getLogger(__name__)

# Descriptions Neovim attaches to its own default mappings
BUILTIN_DESCRIPTIONS = {"Nvim builtin"}
BUILTIN_DESCRIPTION_PATTERN = re.compile(r"^:help \S+-default$")


def rewrite_leader(lhs: str) -> str:
    """Replace a leading space with the leader token.

    Example:
        >>> rewrite_leader(" ff")
        '<leader>ff'
    """
    if lhs.startswith(" "):
        return LEADER_TOKEN + lhs[1:]
    return lhs


def is_builtin_description(description: str) -> bool:
    """Check whether a description marks a built-in default mapping."""
    return description in BUILTIN_DESCRIPTIONS or bool(
        BUILTIN_DESCRIPTION_PATTERN.match(description)
    )


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def to_item(record: dict[str, Any]) -> KeymapItem:
    """Convert one raw record, without filtering."""
    lhs = rewrite_leader(_text(record.get("lhs")))
    rhs = _text(record.get("rhs"))
    if not rhs and record.get("has_callback"):
        rhs = CALLBACK_SENTINEL
    mode = _text(record.get("mode"))

    return KeymapItem(
        lhs=lhs,
        rhs=rhs,
        mode=mode,
        mode_name=resolve_mode_name(mode),
        description=_text(record.get("desc")),
    )


def keep_item(item: KeymapItem, require_description: bool = True) -> bool:
    """Decide whether a converted item belongs in the canonical set.

    Args:
        item: Converted keymap
        require_description: Drop items without a description

    Returns:
        True if the item should be kept
    """
    if not item.lhs.strip():
        return False
    if item.lhs.startswith(PLUG_MARKER):
        return False
    if is_builtin_description(item.description):
        return False
    if require_description and not item.description.strip():
        return False
    return True


def normalize(
    records: Iterable[dict[str, Any]], require_description: bool = True
) -> list[KeymapItem]:
    """Turn raw records into the sorted canonical keymap list.

    The same filtering policy applies whichever transport produced the
    records.

    Args:
        records: Raw binding records from the decoder
        require_description: Drop bindings whose description is empty

    Returns:
        Keymaps sorted by ``(mode, lhs)``

    Example:
        >>> normalize([{"lhs": " ff", "rhs": "", "mode": "n", "desc": "find file"}])
        [KeymapItem(lhs='<leader>ff', rhs='', mode='n', mode_name='Normal', description='find file')]
    """
    items = []
    dropped = 0
    for record in records:
        item = to_item(record)
        if keep_item(item, require_description=require_description):
            items.append(item)
        else:
            dropped += 1

    items.sort(key=lambda item: item.sort_key)
    logger.debug(f"Normalized {len(items)} keymaps ({dropped} dropped)")
    return items
