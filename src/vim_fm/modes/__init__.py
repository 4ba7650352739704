"""Mode tags, command buffer and operator pipeline.

Handler functions and :class:`~vim_fm.modes.mode_manager.ModeManager` live in
their own modules; import them from there.
"""

from .base_mode import (
    CURSOR_SHAPES,
    CursorShape,
    KeyInput,
    Mode,
    ModeBus,
    ModeContext,
    ModeResult,
)
from .command_buffer import BufferStatus, CommandBuffer
from .operator_pipeline import ExecutionPlan, OperatorDraft, OperatorPipeline

__all__ = [
    "BufferStatus",
    "CURSOR_SHAPES",
    "CommandBuffer",
    "CursorShape",
    "ExecutionPlan",
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "OperatorDraft",
    "OperatorPipeline",
]
