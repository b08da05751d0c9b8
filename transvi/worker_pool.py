"""Runs one task per item with a cap on how many run at once."""

import logging
import queue
import threading
from typing import Callable, Iterable, List, TypeVar

from tqdm import tqdm

from .models import PoolResult, TaskFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")

class BoundedWorkerPool:
    """
    Starts a thread for every item up front and lets at most `max_workers`
    of them run their task at the same time.

    Failures are collected, never raised: every item is attempted no matter
    how many others fail, and `run` only returns once all of them finished.
    """

    def __init__(self, max_workers: int, show_progress: bool = True, desc: str = "Processing"):
        """
        Args:
            max_workers: Number of tasks allowed to run concurrently (>= 1).
            show_progress: Whether to display a tqdm progress bar.
            desc: Label for the progress bar.

        Raises:
            ValueError: If max_workers is less than 1.
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers
        self.show_progress = show_progress
        self.desc = desc

    def run(self, items: Iterable[T], task: Callable[[T], None]) -> PoolResult:
        """
        Calls `task(item)` for every item and waits for all calls to finish.

        Args:
            items: Work items. Each one is handed to exactly one task call.
            task: Callable doing the work; any exception it raises is recorded
                  as a failure for that item.

        Returns:
            A PoolResult listing every failed item, in completion order.
        """
        items = list(items)
        gate = threading.BoundedSemaphore(self.max_workers)
        failures: "queue.Queue[TaskFailure]" = queue.Queue()

        logger.info(f"Starting {len(items)} tasks with up to {self.max_workers} running at once")

        with tqdm(total=len(items), unit="segment", desc=self.desc, disable=not self.show_progress) as pbar:

            def worker(item):
                try:
                    with gate:
                        task(item)
                except Exception as e:
                    logger.error(f"Error processing {item}: {e}")
                    failures.put(TaskFailure(item=item, error=e))
                finally:
                    pbar.update(1)

            threads: List[threading.Thread] = []
            for i, item in enumerate(items):
                thread = threading.Thread(target=worker, args=(item,), name=f"worker-{i + 1}", daemon=True)
                thread.start()
                threads.append(thread)

            for thread in threads:
                thread.join()

        result = PoolResult(total=len(items))
        while not failures.empty():
            result.failures.append(failures.get_nowait())

        logger.info(f"Finished {result.total} tasks, {len(result.failures)} failed")
        return result
