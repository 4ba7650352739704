"""Textual host: controller hooks plus the runnable app."""

from .controller import TextualFileManagerAdapter, TextualUIHooks

__all__ = ["TextualFileManagerAdapter", "TextualUIHooks"]
