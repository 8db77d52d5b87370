"""
Progress observation for ingestion runs.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, runtime_checkable

from ..models.ingest_models import RunState, RunSummary, UploadOutcome

logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressObserver(Protocol):
    """Lifecycle hooks invoked by a run: start, one per completion, finish."""

    def on_start(self, total: int) -> None:
        """Called once with the number of admitted documents."""
        ...

    def on_next(self, completed: int) -> None:
        """Called once per finished upload with the running completed count."""
        ...

    def on_finish(self) -> None:
        """Called once after the commit request."""
        ...


class CallbackObserver:
    """
    Adapts optional plain callables to the ``ProgressObserver`` protocol.

    Any hook left as ``None`` is simply skipped.
    """

    def __init__(
        self,
        on_start: Optional[Callable[[int], None]] = None,
        on_next: Optional[Callable[[int], None]] = None,
        on_finish: Optional[Callable[[], None]] = None,
    ):
        self._on_start = on_start
        self._on_next = on_next
        self._on_finish = on_finish

    def on_start(self, total: int) -> None:
        if self._on_start:
            self._on_start(total)

    def on_next(self, completed: int) -> None:
        if self._on_next:
            self._on_next(completed)

    def on_finish(self) -> None:
        if self._on_finish:
            self._on_finish()


@dataclass
class RunContext:
    """
    Run-scoped state: lifecycle position and progress counters.

    Created at the start of a run, mutated only by the runner and pipeline,
    and read by observers.
    """

    observer: ProgressObserver = field(default_factory=CallbackObserver)
    state: RunState = RunState.IDLE
    summary: RunSummary = field(default_factory=RunSummary)
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    def advance(self, state: RunState) -> None:
        """Move to a later lifecycle state; states are never re-entered."""
        order = list(RunState)
        if order.index(state) <= order.index(self.state):
            raise RuntimeError(
                f"Invalid run transition {self.state.value} -> {state.value}"
            )
        logger.debug(f"Run state: {self.state.value} -> {state.value}")
        self.state = state
        if state is RunState.DONE:
            self.end_time = time.time()

    def start(self, total: int) -> None:
        self.summary.total = total
        self.observer.on_start(total)

    def record(self, outcome: UploadOutcome) -> None:
        """Count one finished upload and notify the observer."""
        self.summary.completed += 1
        if outcome.succeeded:
            self.summary.succeeded += 1
        else:
            self.summary.failed += 1
        self.observer.on_next(self.summary.completed)

    def finish(self) -> None:
        self.observer.on_finish()

    @property
    def duration_seconds(self) -> float:
        end_time = self.end_time or time.time()
        return end_time - self.start_time
