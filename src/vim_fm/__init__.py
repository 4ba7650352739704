"""Vim-style file manager: directories are edited as text buffers."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "filesystem",
    "keymaps",
    "modes",
    "render",
    "runtime",
    "session",
]

__version__ = "0.1.0"
