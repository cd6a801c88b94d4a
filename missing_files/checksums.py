import threading
import time
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Optional, Sequence

import humanize
from loguru import logger
from mpire import WorkerPool

from missing_files.algorithms import DEFAULT_ALGORITHM, Algorithm
from missing_files.config import ErrorPolicy
from missing_files.errors import HashingError, SkippedPath
from missing_files.workers import hash_path

ProgressCallback = Callable[[int, int], None]


class ProgressMeter:
    """
    Thread-safe processed/total counter.

    Every ``advance`` is forwarded to the optional callback as ``(done, total)``
    after the lock is released, so the callback may read or advance the meter.
    """

    def __init__(self, total: int, callback: Optional[ProgressCallback] = None):
        self.total = total
        self.done = 0
        self._callback = callback
        self._lock = threading.Lock()
        self._started = time.monotonic()

    def advance(self, count: int = 1) -> int:
        with self._lock:
            self.done += count
            done = self.done
        if self._callback is not None:
            self._callback(done, self.total)
        return done

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._started

    @property
    def rate(self) -> float:
        elapsed = self.elapsed
        return self.done / elapsed if elapsed > 0 else 0.0


@dataclass
class ChecksumRun:
    """digests[i] belongs to paths[i]; a skipped file keeps its slot with digest None."""

    paths: list[str]
    digests: list[Optional[str]]
    algorithm: Algorithm
    skipped: list[SkippedPath] = field(default_factory=list)

    def pairs(self) -> list[tuple[str, str]]:
        return [(p, d) for p, d in zip(self.paths, self.digests) if d is not None]


def create_checksums(
    paths: Sequence[str],
    message: str = "Calculating checksums",
    algorithm: Algorithm = DEFAULT_ALGORITHM,
    on_error: ErrorPolicy = ErrorPolicy.FAIL,
    n_jobs: Optional[int] = None,
    start_method: Optional[str] = None,
    progress_bar: bool = True,
    on_progress: Optional[ProgressCallback] = None,
) -> ChecksumRun:
    """
    Compute one digest per path in parallel, preserving input order.

    Args:
        paths: Files to hash
        message: Progress bar description
        algorithm: Digest algorithm
        on_error: FAIL raises HashingError for the first unreadable file, SKIP records it
        n_jobs: Worker count (default: number of CPU cores)
        start_method: mpire start method, None for the platform default
        progress_bar: Render a progress bar with count, total and throughput
        on_progress: Called with (done, total) after each file

    Returns:
        ChecksumRun whose digests line up with paths
    """
    paths = [str(p) for p in paths]
    on_error = ErrorPolicy(on_error)
    run = ChecksumRun(paths=paths, digests=[None] * len(paths), algorithm=algorithm)
    if not paths:
        return run

    logger.info(f"{message}: {humanize.intcomma(len(paths))} files using {algorithm}")
    meter = ProgressMeter(len(paths), on_progress)
    pool_options = {"n_jobs": n_jobs}
    if start_method is not None:
        pool_options["start_method"] = start_method

    with WorkerPool(**pool_options) as pool:
        # imap yields in submission order even though workers finish out of order
        results = pool.imap(
            partial(hash_path, algorithm=algorithm),
            paths,
            progress_bar=progress_bar,
            progress_bar_options={"desc": message},
        )
        for i, result in enumerate(results):
            if result.error is not None:
                if on_error is ErrorPolicy.FAIL:
                    raise HashingError(result.path, result.error)
                logger.warning(f"Hashing {result.path} failed: {result.error}")
                run.skipped.append(SkippedPath(path=result.path, stage="hashing", reason=result.error))
            run.digests[i] = result.digest
            meter.advance()

    logger.info(
        f"{message}: done {humanize.intcomma(meter.done)} files in "
        f"{humanize.precisedelta(meter.elapsed, minimum_unit='milliseconds')} ({meter.rate:.1f} files/s)"
    )
    return run
