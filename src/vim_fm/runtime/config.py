"""Session configuration sourced from ``VIM_FM_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .telemetry import ENV_PREFIX

DEFAULT_PREVIEW_LINES = 30


def _env_int(env: Mapping[str, str], key: str, fallback: int) -> int:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def _env_flag(env: Mapping[str, str], key: str, fallback: bool) -> bool:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    return value.lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class EngineConfig:
    start_dir: str = "."
    preview_lines: int = DEFAULT_PREVIEW_LINES
    show_hidden: bool = True
    log_preset: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        source = os.environ if env is None else env
        return cls(
            start_dir=source.get(f"{ENV_PREFIX}START_DIR", "."),
            preview_lines=max(1, _env_int(source, "PREVIEW_LINES", DEFAULT_PREVIEW_LINES)),
            show_hidden=_env_flag(source, "SHOW_HIDDEN", True),
            log_preset=source.get(f"{ENV_PREFIX}LOG_PRESET") or None,
        )

    def with_overrides(self, **changes: object) -> "EngineConfig":
        """Return a copy with every non-``None`` override applied."""

        effective = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **effective)


__all__ = ["EngineConfig", "DEFAULT_PREVIEW_LINES"]
