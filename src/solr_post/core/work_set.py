"""
Parallel content filtering that produces the run's work set.
"""

import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import FrozenSet, Iterable, List, Optional, Set

from .content_filter import ContentFilter

logger = logging.getLogger(__name__)


class WorkSetBuilder:
    """
    Evaluates the content filter for every candidate on a thread pool.

    Accepted paths are collected into one shared set. The lock guarding it is
    taken only for the insert; file reads and pattern matching happen outside
    it. ``build`` returns only once every candidate has been evaluated.
    """

    def __init__(
        self,
        content_filter: ContentFilter,
        max_workers: Optional[int] = None,
    ):
        """
        Initialize work set builder.

        Args:
            content_filter: Admission rules applied to each candidate
            max_workers: Thread pool size (``None`` uses the executor default)
        """
        self.content_filter = content_filter
        self.max_workers = max_workers
        self._accepted: Set[str] = set()
        self._lock = threading.Lock()

    def _evaluate(self, path: str) -> None:
        if not self.content_filter.admit(path):
            return

        with self._lock:
            self._accepted.add(path)

    def build(self, candidates: Iterable[str]) -> FrozenSet[str]:
        """
        Filter candidates in parallel and return the accepted paths.

        Args:
            candidates: Paths produced by the scan (duplicates are allowed)

        Returns:
            Immutable set of admitted paths

        Raises:
            FilterReadError: If any candidate cannot be read; remaining work is
                cancelled and no partial result is returned
        """
        candidate_list = list(candidates)
        self._accepted = set()
        start_time = time.time()

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="solr-post-filter"
        ) as executor:
            futures: List[Future[None]] = [
                executor.submit(self._evaluate, path) for path in candidate_list
            ]
            done, not_done = wait(futures, return_when=FIRST_EXCEPTION)

            failed = next((f for f in done if f.exception() is not None), None)
            if failed is not None:
                for future in not_done:
                    future.cancel()
                error = failed.exception()
                logger.error(f"Content filtering aborted: {error}")
                raise error  # type: ignore[misc]

        with self._lock:
            work_set = frozenset(self._accepted)

        logger.info(
            f"Admitted {len(work_set)}/{len(candidate_list)} candidates "
            f"in {time.time() - start_time:.2f}s"
        )
        return work_set
