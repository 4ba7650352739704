"""Single-slot yank register shared by every buffer of a session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class YankKind(str, Enum):
    LINE = "line"
    WORD = "word"
    CHAR = "char"


@dataclass(slots=True)
class YankBuffer:
    """Most recently yanked or deleted text.

    ``text`` holds one string per line for ``LINE`` yanks and a single string
    otherwise. ``tags`` is only filled by line deletions: the first paste
    hands them back so the pasted lines stay bound to the same entries.
    """

    text: Tuple[str, ...] = ()
    kind: YankKind = YankKind.CHAR
    tags: Tuple[object, ...] = field(default_factory=tuple)

    @property
    def empty(self) -> bool:
        return not self.text

    def yank(
        self, text: Tuple[str, ...] | str, kind: YankKind, *, tags: Tuple[object, ...] = ()
    ) -> None:
        self.text = (text,) if isinstance(text, str) else tuple(text)
        self.kind = kind
        self.tags = tuple(tags)

    def consume_tags(self) -> Tuple[object, ...]:
        """Return the stored tags (one per line) and forget them."""

        tags = self.tags
        self.tags = ()
        if len(tags) != len(self.text):
            return tuple(None for _ in self.text)
        return tags


__all__ = ["YankBuffer", "YankKind"]
