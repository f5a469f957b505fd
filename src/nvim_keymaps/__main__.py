"""Allow running as ``python -m nvim_keymaps``."""

from nvim_keymaps.cli import app

if __name__ == "__main__":
    app()
