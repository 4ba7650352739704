"""Buffer primitives: document storage, cursor state, history and registers."""

from . import motions
from .buffer import Buffer, Transaction
from .document import TextDocument
from .registers import YankBuffer, YankKind
from .state import Cursor, Position, Selection, SelectionState
from .errors import BufferValidationError
from .undo import UndoEntry, UndoStack

__all__ = [
    "Buffer",
    "BufferValidationError",
    "Cursor",
    "Position",
    "Selection",
    "SelectionState",
    "TextDocument",
    "Transaction",
    "UndoEntry",
    "UndoStack",
    "YankBuffer",
    "YankKind",
    "motions",
]
