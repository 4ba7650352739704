"""Turns staged lifecycle states into filesystem operations."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, List

from vim_fm.runtime import telemetry

from .backend import FilesystemBackend
from .directory import BufferStorage, DirectoryBuffer, NameConflictError
from .entries import DIRECTORY_SUFFIX, FileEntry, LifecycleState

EXECUTION_ORDER = (
    LifecycleState.DELETED,
    LifecycleState.MODIFIED,
    LifecycleState.MOVED,
    LifecycleState.CREATED,
)


@dataclass(frozen=True, slots=True)
class ReconciliationFailure:
    operation: str
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.operation} {self.path}: {self.message}"


@dataclass(slots=True)
class ReconciliationReport:
    applied: List[str] = field(default_factory=list)
    failures: List[ReconciliationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        if self.ok:
            return f"{len(self.applied)} change(s) written"
        return f"{len(self.applied)} change(s) written, {len(self.failures)} failed"


def describe(entry: FileEntry) -> str:
    """Confirmation line for one pending entry."""

    if entry.state is LifecycleState.MODIFIED:
        return f"RENAME {entry.original_name} -> {entry.current_name}"
    if entry.state is LifecycleState.CREATED:
        return f"CREATE {entry.current_name}"
    if entry.state is LifecycleState.DELETED:
        return f"DELETE {entry.original_name}"
    if entry.state is LifecycleState.MOVED:
        target = entry.current_directory
        if entry.current_name != entry.original_name:
            target = os.path.join(target, entry.current_name)
        return f"MOVE {entry.original_name} -> {target}"
    return entry.current_name


SUMMARY_ORDER = (
    LifecycleState.MODIFIED,
    LifecycleState.CREATED,
    LifecycleState.DELETED,
    LifecycleState.MOVED,
)


def summarize(storage: BufferStorage) -> List[str]:
    """Pending changes grouped RENAME, CREATE, DELETE, MOVE."""

    lines: List[str] = []
    for state in SUMMARY_ORDER:
        for view in storage.views:
            lines.extend(describe(entry) for entry in view.entries_by_state(state))
    return lines


class ReconciliationExecutor:
    """Applies every staged change, one independent operation per entry.

    A failed operation is recorded and its entry left pending; the rest of
    the batch still runs.
    """

    def __init__(self, storage: BufferStorage, backend: FilesystemBackend) -> None:
        self.storage = storage
        self.backend = backend

    def execute(self) -> ReconciliationReport:
        report = ReconciliationReport()
        with telemetry.span("reconcile::execute", component="reconcile") as span:
            for state in EXECUTION_ORDER:
                for view in self.storage.views:
                    for entry in view.entries_by_state(state):
                        self._apply(view, entry, report)
            span.add_metadata("applied", len(report.applied))
            span.add_metadata("failed", len(report.failures))
        telemetry.record_event(
            "reconcile.finished",
            level="info" if report.ok else "warning",
            data={"applied": len(report.applied), "failed": len(report.failures)},
        )
        return report

    def _apply(self, view: DirectoryBuffer, entry: FileEntry, report: ReconciliationReport) -> None:
        handlers: dict[LifecycleState, Callable[[DirectoryBuffer, FileEntry], None]] = {
            LifecycleState.DELETED: self._delete,
            LifecycleState.MODIFIED: self._rename,
            LifecycleState.MOVED: self._move,
            LifecycleState.CREATED: self._create,
        }
        line = describe(entry)
        operation = line.split(" ", 1)[0].lower()
        try:
            handlers[entry.state](view, entry)
        except OSError as exc:
            failure = ReconciliationFailure(operation, entry.original_path, exc.strerror or str(exc))
            telemetry.record_event(
                "reconcile.failed",
                level="warning",
                data={"operation": operation, "path": failure.path, "reason": failure.message},
            )
            report.failures.append(failure)
            return
        report.applied.append(line)

    def _delete(self, view: DirectoryBuffer, entry: FileEntry) -> None:
        self.backend.delete(entry.original_path)
        view.remove_entry(entry)

    def _rename(self, view: DirectoryBuffer, entry: FileEntry) -> None:
        target = os.path.join(entry.original_directory, entry.current_name)
        self.backend.rename(entry.original_path, target)
        entry.commit()

    def _move(self, view: DirectoryBuffer, entry: FileEntry) -> None:
        self.backend.move(entry.original_path, entry.current_directory)
        if entry.current_name != entry.original_name:
            self.backend.rename(
                os.path.join(entry.current_directory, entry.original_name),
                os.path.join(entry.current_directory, entry.current_name),
            )
        view.remove_entry(entry)
        entry.commit()
        destination = self.storage.get_view(entry.current_directory)
        if destination is not None:
            try:
                destination.adopt(entry)
            except NameConflictError as exc:
                telemetry.record_event("reconcile.adopt_conflict", level="warning", data={"name": exc.name})

    def _create(self, view: DirectoryBuffer, entry: FileEntry) -> None:
        name = entry.current_name
        path = entry.current_path
        if name.endswith(DIRECTORY_SUFFIX):
            self.backend.create_directory(path)
        else:
            self.backend.create_file(path)
        view.remove_entry(entry)
        entry.commit()
        view.adopt(entry)


__all__ = [
    "EXECUTION_ORDER",
    "ReconciliationExecutor",
    "ReconciliationFailure",
    "ReconciliationReport",
    "describe",
    "summarize",
]
