from dataclasses import dataclass, field
from typing import Optional

import humanize
from loguru import logger

from missing_files.algorithms import Algorithm
from missing_files.checksums import ProgressCallback, create_checksums
from missing_files.config import CompareConfig
from missing_files.errors import SkippedPath
from missing_files.index import find_missing
from missing_files.storage import save_digests
from missing_files.walker import scan_directory


@dataclass
class ComparisonResult:
    missing: list[str]
    algorithm: Algorithm
    old_count: int = 0
    new_count: int = 0
    skipped: list[SkippedPath] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every discovered entry was read; a SKIP run may otherwise be partial."""
        return not self.skipped


def compare_trees(config: CompareConfig, on_progress: Optional[ProgressCallback] = None) -> ComparisonResult:
    """
    Report every old-tree file whose content does not appear anywhere in the new tree.

    Roots are validated before any traversal. With the default FAIL policy the first
    unreadable directory or file raises; with SKIP the offending paths are collected
    in ComparisonResult.skipped and left out of the missing list.
    """
    config.validate()

    old_scan = scan_directory(config.old_folder, config.max_depth, config.on_error)
    new_scan = scan_directory(config.new_folder, config.max_depth, config.on_error)

    hashing = dict(
        algorithm=config.algorithm,
        on_error=config.on_error,
        n_jobs=config.workers,
        start_method=config.start_method,
        progress_bar=config.progress_bar,
        on_progress=on_progress,
    )
    old_run = create_checksums(old_scan.files, "Calculating checksums for old files", **hashing)
    new_run = create_checksums(new_scan.files, "Calculating checksums for new files", **hashing)

    if config.save_digests is not None:
        save_digests(old_run, config.save_digests / "old_digests.parquet")
        save_digests(new_run, config.save_digests / "new_digests.parquet")

    missing = find_missing(old_run.pairs(), new_run.pairs())
    logger.info(
        f"{humanize.intcomma(len(missing))} of {humanize.intcomma(len(old_run.paths))} old files "
        f"missing from {config.new_folder}"
    )
    return ComparisonResult(
        missing=missing,
        algorithm=config.algorithm,
        old_count=len(old_run.paths),
        new_count=len(new_run.paths),
        skipped=old_scan.skipped + new_scan.skipped + old_run.skipped + new_run.skipped,
    )
