"""Built-in keymaps that seed each mode with sensible defaults."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from vim_fm.actions import command as command_actions
from vim_fm.actions import core as core_actions
from vim_fm.actions import edit as edit_actions
from vim_fm.actions import motion as motion_actions
from vim_fm.actions import navigation as navigation_actions
from vim_fm.actions import visual as visual_actions

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

VISUAL_MODE_NAMES = ("visual", "visual_line", "visual_block")

# motion id suffix -> motion name understood by ``apply_motion``
_MOTIONS = {
    "left": "h",
    "right": "l",
    "up": "k",
    "down": "j",
    "line_start": "0",
    "line_end": "$",
    "last_line": "G",
    "word_forward": "w",
    "word_backward": "b",
    "bigword_forward": "W",
    "bigword_backward": "B",
    "word_end": "e",
    "bigword_end": "E",
}


def _motion_action(name: str, motion: str) -> ActionRef:
    return ActionRef(
        id=f"motion.{name}",
        handler=motion_actions.move,
        description=f"Move cursor ({motion})",
        metadata={"motion": motion},
    )


def _bind(mode: str, key: str, action_id: str, description: str = "") -> Binding:
    return Binding(
        id=f"{mode}.{action_id}.{key}",
        mode=mode,
        sequence=KeySequence.from_strings(key),
        action_id=action_id,
        description=description,
    )


DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef("core.enter_insert", core_actions.enter_insert_mode, description="Enter insert mode"),
    ActionRef("core.insert_line_start", core_actions.insert_at_line_start, description="Insert at first non-blank"),
    ActionRef("core.append", core_actions.append_after_cursor, description="Append after cursor"),
    ActionRef("core.append_line_end", core_actions.append_at_line_end, description="Append at end of line"),
    ActionRef("core.exit_to_normal", core_actions.exit_to_normal_mode, description="Return to normal mode"),
    ActionRef("core.enter_visual", core_actions.enter_visual_mode, description="Enter visual mode"),
    ActionRef("core.enter_visual_line", core_actions.enter_visual_line_mode, description="Enter visual line mode"),
    ActionRef("core.enter_visual_block", core_actions.enter_visual_block_mode, description="Enter visual block mode"),
    ActionRef("core.enter_command", core_actions.enter_command_mode, description="Enter command-line mode"),
    ActionRef("edit.delete_char", edit_actions.delete_char, description="Delete character under cursor"),
    ActionRef("edit.substitute_char", edit_actions.substitute_char, description="Substitute character"),
    ActionRef("edit.paste_after", edit_actions.paste_after, description="Paste after cursor"),
    ActionRef("edit.paste_before", edit_actions.paste_before, description="Paste before cursor"),
    ActionRef("edit.open_below", edit_actions.open_line_below, description="Open line below"),
    ActionRef("edit.open_above", edit_actions.open_line_above, description="Open line above"),
    ActionRef("edit.undo", edit_actions.undo, description="Undo last change"),
    ActionRef("edit.redo", edit_actions.redo, description="Redo last undone change"),
    ActionRef("edit.newline", edit_actions.insert_newline, description="Split line at cursor"),
    ActionRef("edit.backspace", edit_actions.insert_backspace, description="Delete character before cursor"),
    ActionRef("edit.delete_forward", edit_actions.insert_delete, description="Delete character at cursor"),
    ActionRef("navigation.enter", navigation_actions.enter_directory, description="Open directory under cursor"),
    ActionRef("navigation.parent", navigation_actions.parent_directory, description="Go to parent directory"),
    ActionRef("visual.yank_selection", visual_actions.yank_selection, description="Yank current selection"),
    ActionRef("visual.swap_anchor", visual_actions.swap_anchor, description="Swap selection anchor"),
    ActionRef("visual.delete_selection", visual_actions.delete_selection, description="Delete current selection"),
    ActionRef("visual.change_selection", visual_actions.change_selection, description="Change current selection"),
    ActionRef("command.submit_line", command_actions.submit_command_line, description="Evaluate the command line"),
    ActionRef("command.backspace", command_actions.command_backspace, description="Erase command-line character"),
    *(_motion_action(name, motion) for name, motion in _MOTIONS.items()),
)

_NORMAL_KEYS = (
    ("i", "core.enter_insert"),
    ("I", "core.insert_line_start"),
    ("a", "core.append"),
    ("A", "core.append_line_end"),
    ("o", "edit.open_below"),
    ("O", "edit.open_above"),
    ("s", "edit.substitute_char"),
    ("x", "edit.delete_char"),
    ("p", "edit.paste_after"),
    ("P", "edit.paste_before"),
    ("u", "edit.undo"),
    ("ctrl+r", "edit.redo"),
    (":", "core.enter_command"),
    ("v", "core.enter_visual"),
    ("V", "core.enter_visual_line"),
    ("ctrl+v", "core.enter_visual_block"),
    ("ENTER", "navigation.enter"),
    ("-", "navigation.parent"),
    ("h", "motion.left"),
    ("j", "motion.down"),
    ("k", "motion.up"),
    ("l", "motion.right"),
    ("LEFT", "motion.left"),
    ("DOWN", "motion.down"),
    ("UP", "motion.up"),
    ("RIGHT", "motion.right"),
    ("0", "motion.line_start"),
    ("$", "motion.line_end"),
    ("G", "motion.last_line"),
    ("w", "motion.word_forward"),
    ("b", "motion.word_backward"),
    ("W", "motion.bigword_forward"),
    ("B", "motion.bigword_backward"),
    ("e", "motion.word_end"),
    ("E", "motion.bigword_end"),
)

_INSERT_KEYS = (
    ("ESC", "core.exit_to_normal"),
    ("ENTER", "edit.newline"),
    ("BACKSPACE", "edit.backspace"),
    ("DELETE", "edit.delete_forward"),
    ("LEFT", "motion.left"),
    ("DOWN", "motion.down"),
    ("UP", "motion.up"),
    ("RIGHT", "motion.right"),
)

_VISUAL_KEYS = (
    ("ESC", "core.exit_to_normal"),
    ("h", "motion.left"),
    ("j", "motion.down"),
    ("k", "motion.up"),
    ("l", "motion.right"),
    ("w", "motion.word_forward"),
    ("b", "motion.word_backward"),
    ("e", "motion.word_end"),
    ("0", "motion.line_start"),
    ("$", "motion.line_end"),
    ("G", "motion.last_line"),
    ("o", "visual.swap_anchor"),
    ("y", "visual.yank_selection"),
    ("d", "visual.delete_selection"),
    ("x", "visual.delete_selection"),
    ("c", "visual.change_selection"),
)

_COMMAND_KEYS = (
    ("ESC", "core.exit_to_normal"),
    ("ENTER", "command.submit_line"),
    ("RETURN", "command.submit_line"),
    ("BACKSPACE", "command.backspace"),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    *(_bind("normal", key, action) for key, action in _NORMAL_KEYS),
    *(_bind("insert", key, action) for key, action in _INSERT_KEYS),
    *(
        _bind(mode, key, action)
        for mode in VISUAL_MODE_NAMES
        for key, action in _VISUAL_KEYS
    ),
    *(_bind("command", key, action) for key, action in _COMMAND_KEYS),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register built-in actions and bindings for every mode."""

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        if not _selected(action.id, allowed_actions):
            continue
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)

    if per_mode_overrides:
        for mode, bindings in per_mode_overrides.items():
            for binding in bindings:
                if binding.mode != mode:
                    raise ValueError(
                        f"Override binding '{binding.id}' must target mode '{mode}'"
                    )
                registry.register_binding(binding, replace=True)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True


__all__ = ["load_default_keymaps", "DEFAULT_ACTIONS", "DEFAULT_BINDINGS", "VISUAL_MODE_NAMES"]
