"""Test data builders for creating keymap records and items.

Builders provide sensible defaults so tests only spell out the fields they
care about.
"""

from typing import Any

from nvim_keymaps.models import KeymapItem, resolve_mode_name


def build_record(lhs: str = "gd", mode: str = "n", **kwargs: Any) -> dict[str, Any]:
    """Build a raw binding record as the enumeration script produces it.

    Example:
        >>> build_record(" ff", desc="Find files")
        {'lhs': ' ff', 'rhs': '', 'mode': 'n', 'desc': 'Find files', ...}
    """
    record = {
        "lhs": lhs,
        "rhs": "",
        "mode": mode,
        "desc": "Some description",
        "silent": False,
        "noremap": True,
        "has_callback": False,
    }
    record.update(kwargs)
    return record


def build_item(lhs: str = "gd", mode: str = "n", **kwargs: Any) -> KeymapItem:
    """Build a canonical keymap item."""
    data: dict[str, Any] = {"lhs": lhs, "mode": mode, "mode_name": resolve_mode_name(mode)}
    data.update(kwargs)
    return KeymapItem(**data)
