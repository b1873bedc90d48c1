"""Rich-based sync progress display."""

from __future__ import annotations

from types import TracebackType
from typing import ClassVar

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from placesync.contracts.sync import SyncPhase
from placesync.engine.progress import SyncProgress


class RichSyncProgress(SyncProgress):
    """Live terminal progress display powered by Rich.

    Use as a context manager so the live display is properly started/stopped::

        with RichSyncProgress() as progress:
            results = await PlaceSync.from_config(config, progress=progress).sync_all()
    """

    _PHASE_LABELS: ClassVar[dict[SyncPhase, str]] = {
        SyncPhase.CONNECTING: "[cyan]Connect[/]",
        SyncPhase.FETCHING: "[blue]Fetch[/]",
        SyncPhase.PARSING: "[magenta]Parse[/]",
        SyncPhase.PROCESSING: "[green]Reconcile[/]",
        SyncPhase.COMPLETING: "[yellow]Record[/]",
    }

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description:>14}"),
            BarColumn(bar_width=30),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
            transient=False,
        )
        self._task_ids: dict[SyncPhase, RichTaskID] = {}

    def __enter__(self) -> RichSyncProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def source_start(self, source_id: str, source_name: str) -> None:
        self._task_ids.clear()
        self._progress.console.print(f"[bold]{source_name}[/] ({source_id})")

    def phase_start(self, phase: SyncPhase, total: int | None = None) -> None:
        label = self._PHASE_LABELS.get(phase, str(phase))
        self._task_ids[phase] = self._progress.add_task(label, total=total)

    def item_done(self, phase: SyncPhase) -> None:
        task_id = self._task_ids.get(phase)
        if task_id is not None:
            self._progress.advance(task_id)

    def phase_done(self, phase: SyncPhase) -> None:
        task_id = self._task_ids.get(phase)
        if task_id is None:
            return
        task = self._progress.tasks[task_id]
        if task.total is not None:
            self._progress.update(task_id, completed=task.total)
        else:
            self._progress.update(task_id, total=1, completed=1)

    def phase_error(self, phase: SyncPhase, error: BaseException) -> None:
        task_id = self._task_ids.get(phase)
        if task_id is None:
            return
        self._progress.update(task_id, description=f"[red]✗[/red] {phase.value:>10}")
