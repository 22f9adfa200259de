"""Bounded concurrent task runner.

Runs a fixed set of independent blocking operations with limited
parallelism and joins on them. The first error raised by any task is
re-raised from run(); tasks that are already running are not interrupted
and keep going on their daemon threads after run() returns.
"""

import threading
from collections.abc import Callable

from kompass.utils.logging import get_logger

logger = get_logger(__name__)

Task = Callable[[], None]


class ConcurrentTasks:
    """Join over a set of tasks with at most max_concurrent in flight."""

    def __init__(self, max_concurrent: int) -> None:
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.max_concurrent = max_concurrent
        self._tasks: list[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def add(self, task: Task) -> None:
        """Register a task to run."""
        self._tasks.append(task)

    def run(self) -> None:
        """Run all tasks and block until they finish or one fails."""
        if not self._tasks:
            return

        slots = threading.BoundedSemaphore(self.max_concurrent)
        done = threading.Condition()
        state: dict = {"completed": 0, "error": None}
        total = len(self._tasks)

        def _run(task: Task) -> None:
            error: BaseException | None = None
            try:
                with slots:
                    task()
            except BaseException as e:
                error = e
            finally:
                with done:
                    state["completed"] += 1
                    if error is not None and state["error"] is None:
                        state["error"] = error
                    done.notify_all()

        for index, task in enumerate(self._tasks):
            threading.Thread(target=_run, args=(task,), name=f"kompass-task-{index}", daemon=True).start()

        with done:
            done.wait_for(lambda: state["error"] is not None or state["completed"] == total)
            error = state["error"]
            completed = state["completed"]

        if error is not None:
            logger.debug(f"Task failed after {completed}/{total} completed: {error}")
            raise error
