"""Accumulates the keys of multi-key commands such as ``dd`` or ``ciw``."""

from __future__ import annotations

import re
from enum import Enum
from typing import List

# operator + text object, operator + find, find, operator + motion,
# operator + gg, the doubled commands, then the counted forms
GRAMMAR = re.compile(
    r"[cdy][ai][wWbB()\[\]{}<>\"'`]"
    r"|[cdy][fFtT]."
    r"|[fFtT]."
    r"|[cdy][wWeEbBhjkl0$G]"
    r"|[cdy]gg"
    r"|gg|dd|cc|yy"
    r"|[1-9][hjklwWbBeEGx]"
    r"|[1-9](?:dd|cc|yy)"
    r"|[1-9][cdy][wWeEbB]",
    re.DOTALL,
)

INITIALIZERS = frozenset("cdygfFtT123456789")
MAX_LENGTH = 3


class BufferStatus(str, Enum):
    PENDING = "pending"
    COMPLETE = "complete"
    DISCARDED = "discarded"


class CommandBuffer:
    """Pending keys of one compound command, at most three long."""

    def __init__(self) -> None:
        self._keys: List[str] = []

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def text(self) -> str:
        return "".join(self._keys)

    @property
    def is_empty(self) -> bool:
        return not self._keys

    @staticmethod
    def is_initializer(key: str) -> bool:
        return key in INITIALIZERS

    @staticmethod
    def valid(candidate: str) -> bool:
        """Length 1 may still grow; lengths 2 and 3 must match exactly."""

        if len(candidate) == 1:
            return True
        if 2 <= len(candidate) <= MAX_LENGTH:
            return GRAMMAR.fullmatch(candidate) is not None
        return False

    def push(self, key: str) -> BufferStatus:
        self._keys.append(key)
        candidate = self.text
        if len(candidate) >= 2 and self.valid(candidate):
            return BufferStatus.COMPLETE
        if len(candidate) >= MAX_LENGTH:
            self.clear()
            return BufferStatus.DISCARDED
        return BufferStatus.PENDING

    def take(self) -> str:
        text = self.text
        self.clear()
        return text

    def clear(self) -> None:
        self._keys.clear()


__all__ = ["BufferStatus", "CommandBuffer", "GRAMMAR", "INITIALIZERS"]
