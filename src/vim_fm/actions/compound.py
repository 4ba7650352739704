"""Executes completed multi-key commands (``dd``, ``3w``, ``ciw``, ``dfx`` ...)."""

from __future__ import annotations

from typing import Optional, Tuple

from vim_fm.buffer import Buffer, YankKind, motions
from vim_fm.modes.base_mode import Mode, ModeContext, ModeResult
from vim_fm.modes.operator_pipeline import LINE_MOTION, ExecutionPlan, OperatorPipeline
from vim_fm.runtime import telemetry

from .edit import change_lines, delete_chars, delete_lines, yank_lines
from .motion import apply_motion

Span = Tuple[int, int]

WORD_MOTIONS = frozenset("wWeEbB")

_pipeline = OperatorPipeline()


def execute_compound(context: ModeContext, raw: str) -> ModeResult:
    """Run the command named by ``raw``; unknown text is a silent no-op."""

    with telemetry.span(
        "compound::execute", component="compound", metadata={"keys": raw}
    ) as handle:
        plan = _pipeline.parse(raw)
        if plan is None:
            handle.add_metadata("status", "rejected")
            return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="noop", message=raw)
        handle.add_metadata("operator", plan.operator or "")
        handle.add_metadata("motion", plan.motion)
        if plan.operator is None:
            return _run_motion(context, plan)
        if plan.linewise:
            return _run_linewise(context, plan)
        return _run_charwise(context, plan)


def _run_motion(context: ModeContext, plan: ExecutionPlan) -> ModeResult:
    buffer = context.buffer
    if plan.motion == "x":
        delete_chars(buffer, context.yank, plan.count)
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="edit", message=plan.raw)
    count: Optional[int] = plan.count if plan.raw[0].isdigit() else None
    apply_motion(buffer, plan.motion, count, plan.argument)
    return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="motion", message=plan.raw)


def line_range(buffer: Buffer, plan: ExecutionPlan) -> Tuple[int, int]:
    row = buffer.cursor.y
    last = buffer.document.line_count
    if plan.motion == LINE_MOTION:
        return row, min(last, row + plan.count - 1)
    if plan.motion == "j":
        return row, min(last, row + plan.count)
    if plan.motion == "k":
        return max(1, row - plan.count), row
    if plan.motion == "G":
        return row, last
    return 1, row


def _run_linewise(context: ModeContext, plan: ExecutionPlan) -> ModeResult:
    buffer = context.buffer
    first, last = line_range(buffer, plan)
    if plan.operator == "d":
        delete_lines(buffer, context.yank, first, last)
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="edit", message=plan.raw)
    if plan.operator == "y":
        yank_lines(buffer, context.yank, first, last)
        buffer.cursor.set_y(first)
        buffer.clamp_cursor()
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="yank", message=plan.raw)
    change_lines(buffer, context.yank, first, last)
    return ModeResult(consumed=True, switch_to=Mode.INSERT, status="edit", message=plan.raw)


def char_span(line: str, offset: int, plan: ExecutionPlan) -> Optional[Span]:
    """Half-open span on ``line`` covered by the plan's motion."""

    motion = plan.motion
    count = plan.count
    if motion == "w":
        end = offset
        for index in range(count):
            last_change = plan.operator == "c" and index == count - 1
            end = motions.word_end(line, end, inclusive=not last_change)
        return offset, min(end, len(line))
    if motion == "W":
        end = offset
        for _ in range(count):
            end = motions.next_word_start(line, end, big=True)
        if plan.operator == "c":
            while end > offset and line[end - 1].isspace():
                end -= 1
        return offset, end
    if motion in {"e", "E"}:
        end = offset
        for _ in range(count):
            end = motions.next_word_end(line, end, big=motion == "E")
        return offset, end + 1
    if motion in {"b", "B"}:
        start = offset
        for _ in range(count):
            start = motions.word_start(line, start, big=motion == "B")
        return start, offset
    if motion == "h":
        return max(0, offset - count), offset
    if motion == "l":
        return offset, min(len(line), offset + count)
    if motion == "0":
        return 0, offset
    if motion == "$":
        return offset, len(line)
    if motion in {"f", "t"} and plan.argument:
        target = offset
        for _ in range(count):
            found = motions.find_char(line, target, plan.argument, forward=True)
            if found is None:
                return None
            target = found
        return offset, target if motion == "t" else target + 1
    if motion in {"F", "T"} and plan.argument:
        target = offset
        for _ in range(count):
            found = motions.find_char(line, target, plan.argument, forward=False)
            if found is None:
                return None
            target = found
        return (target + 1 if motion == "T" else target), offset
    if motion in {"i", "a"} and plan.argument:
        return motions.text_object(line, offset, plan.argument, around=motion == "a")
    return None


def _yank_kind(plan: ExecutionPlan) -> YankKind:
    if plan.motion in WORD_MOTIONS:
        return YankKind.WORD
    if plan.motion in {"i", "a"} and plan.argument in {"w", "W"}:
        return YankKind.WORD
    return YankKind.CHAR


def _run_charwise(context: ModeContext, plan: ExecutionPlan) -> ModeResult:
    buffer = context.buffer
    cursor = buffer.cursor
    line = buffer.current_line
    span = char_span(line, cursor.x - 1, plan)
    if span is None or span[1] <= span[0]:
        if plan.operator == "c" and span is not None:
            return ModeResult(consumed=True, switch_to=Mode.INSERT, status="noop", message=plan.raw)
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="noop", message=plan.raw)

    start, end = span
    text = line[start:end]
    context.yank.yank(text, _yank_kind(plan))
    cursor.set_x(start + 1)
    if plan.operator == "y":
        buffer.clamp_cursor()
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="yank", message=plan.raw)

    buffer.document.delete_range(start + 1, cursor.y, end - start)
    if plan.operator == "c":
        buffer.clamp_cursor(insert=True)
        return ModeResult(consumed=True, switch_to=Mode.INSERT, status="edit", message=plan.raw)
    buffer.clamp_cursor()
    return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="edit", message=plan.raw)


__all__ = ["char_span", "execute_compound", "line_range"]
