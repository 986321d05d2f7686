"""Fixed-size worker pool matching the generated C++ ThreadPool"""

import threading
from collections import deque
from typing import Callable

from ..logging import get_logger

logger = get_logger("runtime.thread_pool")

DEFAULT_NUM_THREADS = 10


class ThreadPool:
    """Workers pulling from one FIFO queue.

    `enqueue` never blocks. Work submitted after `shutdown` is dropped;
    `shutdown` discards queued work, wakes every worker and joins them.
    """

    def __init__(self, num_threads: int = DEFAULT_NUM_THREADS):
        self._tasks: deque = deque()
        self._condition = threading.Condition()
        self._stopped = False
        self._workers = [
            threading.Thread(target=self._work, name=f"crabgen-worker-{i}", daemon=True)
            for i in range(num_threads)
        ]
        for worker in self._workers:
            worker.start()

    @property
    def stopped(self) -> bool:
        with self._condition:
            return self._stopped

    def enqueue(self, task: Callable[[], None]) -> bool:
        """Queue `task`; returns False when the pool is shut down"""
        with self._condition:
            if self._stopped:
                return False
            self._tasks.append(task)
            self._condition.notify()
        return True

    def shutdown(self):
        with self._condition:
            if self._stopped:
                return
            self._stopped = True
            self._tasks.clear()
            self._condition.notify_all()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

    def _work(self):
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._stopped or self._tasks)
                if self._stopped:
                    return
                task = self._tasks.popleft()
            try:
                task()
            except Exception:
                logger.exception("Task raised in worker pool")
