"""Keymap registry: actions by id, bindings by id and by (mode, keys)."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Dict, Iterable, Sequence

from vim_fm.runtime.telemetry import SpanHandle, span

from .models import ActionRef, Binding


class KeymapConflictError(RuntimeError):
    """Raised when a new binding claims keys that are already bound."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        super().__init__(
            f"Binding '{binding.id}' conflicts with {[b.id for b in self.conflicts]}"
        )


class KeymapRegistry:
    """Owns action references and bindings, indexed per mode and key signature.

    Within one mode a key signature belongs to at most one binding; passing
    ``replace=True`` evicts whatever held it before.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        # mode -> key signature -> binding ids
        self._by_keys: Dict[str, Dict[str, set[str]]] = {}
        self._logger_name = logger_name

    def _span(self, name: str, **metadata: object) -> AbstractContextManager[SpanHandle]:
        return span(
            f"keymaps::{name}",
            logger_name=self._logger_name,
            component="keymaps",
            metadata=metadata,
        )

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"Action '{action_id}' is not registered")
        return action

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._bindings.get(binding_id)
        if binding is None:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return binding

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with self._span("register_action", action_id=action.id):
            if action.id in self._actions and not replace:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
            return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with self._span("register_binding", binding_id=binding.id, mode=binding.mode) as handle:
            self._require_action(binding, handle)
            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if replace:
                for evicted in (*conflicts, self._bindings.get(binding.id)):
                    if evicted is not None:
                        self._drop(evicted)
            else:
                if conflicts:
                    handle.add_metadata("conflicts", ",".join(b.id for b in conflicts))
                    raise KeymapConflictError(binding, conflicts)
                if binding.id in self._bindings:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
            self._add(binding)
            return binding

    def lookup(self, mode: str, signature: str) -> list[Binding]:
        """Bindings of ``mode`` whose key signature is exactly ``signature``."""

        ids = self._by_keys.get(mode, {}).get(signature, ())
        return [self._bindings[binding_id] for binding_id in sorted(ids)]

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] | None = None
    ) -> list[Binding]:
        ignored = set(ignore or ())
        return [
            existing
            for existing in self.lookup(binding.mode, binding.key_signature)
            if existing.id not in ignored
        ]

    def _require_action(self, binding: Binding, handle: SpanHandle) -> None:
        if binding.action_id not in self._actions:
            handle.add_metadata("missing_action", binding.action_id)
            raise KeyError(
                f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
            )

    def _add(self, binding: Binding) -> None:
        self._bindings[binding.id] = binding
        signatures = self._by_keys.setdefault(binding.mode, {})
        signatures.setdefault(binding.key_signature, set()).add(binding.id)

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        signatures = self._by_keys.get(binding.mode)
        if not signatures:
            return
        ids = signatures.get(binding.key_signature)
        if ids is not None:
            ids.discard(binding.id)
            if not ids:
                del signatures[binding.key_signature]
        if not signatures:
            del self._by_keys[binding.mode]


__all__ = [
    "KeymapConflictError",
    "KeymapRegistry",
]
