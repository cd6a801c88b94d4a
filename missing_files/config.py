import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Optional

from missing_files.algorithms import DEFAULT_ALGORITHM, Algorithm, get_algorithm
from missing_files.errors import ConfigurationError

DEFAULT_MAX_DEPTH = 1000
READ_BLOCK_SIZE = 512 * 1024  # 1k * 512 byte disk sectors - benchmarks pretty well


class ErrorPolicy(StrEnum):
    FAIL = "fail"
    SKIP = "skip"


@dataclass
class CompareConfig:
    """
    Settings for one old-vs-new comparison run.

    Args:
        old_folder: Root of the tree whose files must all be present in the new tree
        new_folder: Root of the tree searched for matching content
        max_depth: Recursion budget for the tree walk; 1 lists only direct children
        algorithm: Digest algorithm used for both trees
        on_error: Abort on the first unreadable entry (fail) or record it and continue (skip)
        n_jobs: Number of hashing workers (default: number of CPU cores)
        start_method: mpire start method; None uses the platform default
        progress_bar: Show a progress bar while hashing
        save_digests: Directory to write the digest tables to, if any
    """

    old_folder: Path
    new_folder: Path
    max_depth: int = DEFAULT_MAX_DEPTH
    algorithm: Algorithm = DEFAULT_ALGORITHM
    on_error: ErrorPolicy = ErrorPolicy.FAIL
    n_jobs: Optional[int] = None
    start_method: Optional[str] = None
    progress_bar: bool = True
    save_digests: Optional[Path] = None

    def __post_init__(self):
        self.old_folder = Path(self.old_folder)
        self.new_folder = Path(self.new_folder)
        if self.save_digests is not None:
            self.save_digests = Path(self.save_digests)
        self.on_error = ErrorPolicy(self.on_error)

    @property
    def workers(self) -> int:
        return self.n_jobs or os.cpu_count() or 1

    def validate(self) -> "CompareConfig":
        for root in (self.old_folder, self.new_folder):
            if not root.exists():
                raise ConfigurationError(root, "folder does not exist")
            if not root.is_dir():
                raise ConfigurationError(root, "not a directory")
        try:
            self.algorithm = get_algorithm(self.algorithm)
        except ValueError as err:
            raise ConfigurationError(self.algorithm, str(err)) from None
        if self.n_jobs is not None and self.n_jobs < 1:
            raise ConfigurationError(self.n_jobs, "number of jobs must be at least 1")
        return self
