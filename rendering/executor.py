from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_THREADS = 16


class TaskExecutor:
    """
    Fork-join facade over a thread pool.

    One generation = one work item per task number, followed by a barrier
    that waits for every item before returning. Work items must write to
    disjoint regions of any shared buffer; no locking is done here.
    The numba kernels release the GIL, so items run concurrently.
    """

    def __init__(
        self,
        num_threads: Optional[int] = DEFAULT_THREADS,
        *,
        telemetry: Optional[Callable[[str], None]] = None,
    ) -> None:
        if num_threads is None:
            num_threads = os.cpu_count() or 1
        if num_threads <= 0:
            raise ValueError(f"num_threads must be positive, got {num_threads}.")
        self.num_threads = int(num_threads)
        self._pool: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=self.num_threads, thread_name_prefix="task")
        self.log = telemetry or logger.debug
        self.generations = 0

    # ---- Lifecycle ------------------------------------------------------

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ---- Fork-join ------------------------------------------------------

    def run_generation(self, func: Callable[..., Any], task_size: int, *args: Any) -> List[Any]:
        """
        Call func(*args, task_num, task_size) for every task_num in range(task_size)
        and block until all of them finished.
        Returns the results indexed by task number. The first task failure
        is re-raised after the barrier.
        """
        if self._pool is None:
            raise RuntimeError("TaskExecutor is closed")
        if task_size <= 0:
            raise ValueError(f"task_size must be positive, got {task_size}.")

        t0 = time.perf_counter()
        futs: Dict[Any, int] = {}
        for task_num in range(task_size):
            futs[self._pool.submit(func, *args, task_num, task_size)] = task_num

        results: List[Any] = [None] * task_size
        failure: Optional[BaseException] = None
        for fut in as_completed(futs):
            exc = fut.exception()
            if exc is not None:
                if failure is None:
                    failure = exc
                continue
            results[futs[fut]] = fut.result()

        self.generations += 1
        elapsed = (time.perf_counter() - t0) * 1000.0
        self.log(f"[TaskExecutor] generation {self.generations}: {task_size} tasks "
                 f"on {self.num_threads} threads in {elapsed:.2f} ms")

        if failure is not None:
            raise failure
        return results


def reduce_sum(values: Sequence[int]) -> int:
    total = 0
    for v in values:
        total += int(v)
    return total
