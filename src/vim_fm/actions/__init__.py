"""Editing verbs bound to keys by the default keymaps."""

from . import command, compound, core, edit, motion, navigation, visual
from .compound import execute_compound
from .motion import apply_motion

__all__ = [
    "apply_motion",
    "command",
    "compound",
    "core",
    "edit",
    "execute_compound",
    "motion",
    "navigation",
    "visual",
]
