"""Canonical keymap entity and the fixed lookup tables used to build it."""

from pydantic import BaseModel, ConfigDict

# Enumeration order used by every transport
MODES: tuple[str, ...] = ("n", "i", "v", "x", "s", "o", "t", "c")

MODE_NAMES: dict[str, str] = {
    "n": "Normal",
    "i": "Insert",
    "v": "Visual",
    "x": "Visual Block",
    "s": "Select",
    "o": "Operator Pending",
    "t": "Terminal",
    "c": "Command",
}

LEADER_TOKEN = "<leader>"
PLUG_MARKER = "<Plug>"
CALLBACK_SENTINEL = "<Lua callback>"


class KeymapItem(BaseModel):
    """A single normalized key binding.

    Instances are immutable; a refresh replaces the whole list rather than
    editing entries.

    Example:
        >>> item = KeymapItem(lhs="<leader>ff", mode="n", mode_name="Normal")
        >>> item.sort_key
        ('n', '<leader>ff')
    """

    model_config = ConfigDict(frozen=True)

    lhs: str
    rhs: str = ""
    mode: str
    mode_name: str
    description: str = ""

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.mode, self.lhs)


def resolve_mode_name(mode: str) -> str:
    """Return the human-readable name for a mode code, or the code itself."""
    return MODE_NAMES.get(mode, mode)


def format_keymap(item: KeymapItem) -> str:
    """Format a keymap as a one-line summary.

    Example:
        >>> format_keymap(KeymapItem(lhs="gd", rhs=":Def<CR>", mode="n", mode_name="Normal"))
        'Normal: gd → :Def<CR>'
    """
    text = f"{item.mode_name}: {item.lhs}"
    if item.rhs:
        text += f" → {item.rhs}"
    if item.description:
        text += f" ({item.description})"
    return text


def format_detail(item: KeymapItem) -> str:
    """Format the secondary line shown under a keymap in pickers."""
    detail = f"[{item.mode_name}]"
    if item.rhs:
        detail += f" - {item.rhs}"
    return detail
