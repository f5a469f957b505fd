"""nvim-keymaps - Fuzzy lookup over the keymaps defined in Neovim."""

from importlib.metadata import PackageNotFoundError, version

# Read version from package metadata (pyproject.toml)
try:
    __version__ = version("nvim-keymaps")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "0.0.0.dev"

from nvim_keymaps.config import KeymapsSettings
from nvim_keymaps.models import KeymapItem
from nvim_keymaps.store import KeymapStore, StoreState

__all__ = ["KeymapItem", "KeymapStore", "KeymapsSettings", "StoreState", "__version__"]
