"""Helper utilities for keymap-driven modes."""

from __future__ import annotations

from typing import Optional

from vim_fm.keymaps import KeymapResolver, ResolutionMatch
from vim_fm.runtime import telemetry

from .base_mode import KeyInput, ModeContext, ModeResult


def key_to_token(key: KeyInput) -> str:
    if key.modifiers:
        modifier = "+".join(m.lower() for m in key.modifiers)
        return f"{modifier}+{key.key}"
    return key.key


def require_keymap_resolver(context: ModeContext) -> KeymapResolver:
    resolver = context.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return resolver


def execute_match(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    with telemetry.span(
        "keymaps::execute",
        component="keymaps",
        metadata={"binding_id": match.binding.id, "action": match.action.id},
    ):
        outcome = match.action(context, match)

    if isinstance(outcome, ModeResult):
        return outcome
    return ModeResult(consumed=True)


def dispatch(context: ModeContext, mode_name: str, key: KeyInput) -> Optional[ModeResult]:
    """Run the binding for ``key`` in ``mode_name``; ``None`` on a miss."""

    result = require_keymap_resolver(context).resolve(mode_name, (key_to_token(key),))
    if result.status == "match" and result.match:
        return execute_match(context, result.match)
    return None


__all__ = [
    "dispatch",
    "execute_match",
    "key_to_token",
    "require_keymap_resolver",
]
