"""Parses completed command-buffer text into an execution plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from vim_fm.runtime import telemetry

OPERATORS = frozenset("cdy")
FIND_MOTIONS = frozenset("fFtT")
TEXT_OBJECT_PREFIXES = frozenset("ia")
LINE_MOTION = "line"


@dataclass(frozen=True, slots=True)
class ExecutionPlan:
    """``{count}{operator}{motion}{argument}`` split into its parts.

    ``motion`` is ``"line"`` for the doubled forms (``dd``, ``cc``, ``yy``),
    ``"gg"`` for the two-key jump, ``"i"``/``"a"`` for text objects (the
    object character in ``argument``) and ``f``/``F``/``t``/``T`` with the
    target character in ``argument``.
    """

    count: int
    operator: Optional[str]
    motion: str
    argument: Optional[str]
    raw: str

    @property
    def linewise(self) -> bool:
        return self.motion in {LINE_MOTION, "j", "k", "G", "gg"}


@dataclass(slots=True)
class OperatorDraft:
    count: Optional[int] = None
    operator: Optional[str] = None
    motion: Optional[str] = None
    argument: Optional[str] = None
    raw_keys: List[str] = field(default_factory=list)


class CountParser:
    def parse(self, keys: Sequence[str], draft: OperatorDraft) -> Sequence[str]:
        if keys and keys[0] in "123456789":
            draft.count = int(keys[0])
            draft.raw_keys.append(keys[0])
            return keys[1:]
        return keys


class OperatorParser:
    def parse(self, keys: Sequence[str], draft: OperatorDraft) -> Sequence[str]:
        if len(keys) >= 2 and keys[0] in OPERATORS:
            draft.operator = keys[0]
            draft.raw_keys.append(keys[0])
            return keys[1:]
        return keys


class MotionParser:
    def parse(self, keys: Sequence[str], draft: OperatorDraft) -> Sequence[str]:
        if not keys:
            return keys
        head = keys[0]
        if draft.operator is not None and head == draft.operator:
            draft.motion = LINE_MOTION
            consumed = 1
        elif head == "g" and len(keys) >= 2 and keys[1] == "g":
            draft.motion = "gg"
            consumed = 2
        elif draft.operator is not None and head in TEXT_OBJECT_PREFIXES and len(keys) >= 2:
            draft.motion = head
            draft.argument = keys[1]
            consumed = 2
        elif head in FIND_MOTIONS and len(keys) >= 2:
            draft.motion = head
            draft.argument = keys[1]
            consumed = 2
        else:
            draft.motion = head
            consumed = 1
        draft.raw_keys.extend(keys[:consumed])
        return keys[consumed:]


class OperatorPipeline:
    """Count, operator and motion parsers run in sequence over the keys."""

    def __init__(self) -> None:
        self.count_parser = CountParser()
        self.operator_parser = OperatorParser()
        self.motion_parser = MotionParser()

    def parse(self, keys: Sequence[str] | str) -> Optional[ExecutionPlan]:
        tokens: Tuple[str, ...] = tuple(keys)
        draft = OperatorDraft()
        with telemetry.span(
            "operator::parse", component=True, metadata={"keys": "".join(tokens)}
        ) as handle:
            remaining = self.count_parser.parse(tokens, draft)
            remaining = self.operator_parser.parse(remaining, draft)
            remaining = self.motion_parser.parse(remaining, draft)
            if remaining or draft.motion is None:
                handle.add_metadata("status", "rejected")
                return None
            return ExecutionPlan(
                count=draft.count or 1,
                operator=draft.operator,
                motion=draft.motion,
                argument=draft.argument,
                raw="".join(draft.raw_keys),
            )


__all__ = [
    "ExecutionPlan",
    "LINE_MOTION",
    "OperatorDraft",
    "OperatorPipeline",
]
