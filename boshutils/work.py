"""Run tasks in parallel on a fixed number of worker threads."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Callable


def _describe(error: BaseException) -> str:
    message = str(error)
    cause = error.__cause__
    if cause is not None:
        message = f"{message}: {_describe(cause)}"
    return message


class MultiError(Exception):
    """Collects the errors raised by several tasks."""

    def __init__(self, *errors: BaseException) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(_describe(e) for e in self.errors))


@dataclass
class Pool:
    """A pool of ``count`` worker threads."""

    count: int

    def parallel_do(self, *tasks: Callable[[], object]) -> None:
        """Run ``tasks`` on the pool's workers.

        A worker whose task raises takes no further tasks; tasks already
        running elsewhere finish. All raised errors are reported together
        as a MultiError.
        """
        jobs: queue.Queue[Callable[[], object]] = queue.Queue()
        for task in tasks:
            jobs.put(task)

        errors: list[BaseException] = []
        lock = threading.Lock()

        def worker() -> None:
            while True:
                try:
                    task = jobs.get_nowait()
                except queue.Empty:
                    return
                try:
                    task()
                except Exception as error:  # noqa: BLE001 - collected and re-raised
                    with lock:
                        errors.append(error)
                    return

        threads = [threading.Thread(target=worker, daemon=True) for _ in range(self.count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        if errors:
            raise MultiError(*errors)