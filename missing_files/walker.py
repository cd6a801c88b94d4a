import os
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

import humanize
from loguru import logger

from missing_files.config import DEFAULT_MAX_DEPTH, ErrorPolicy
from missing_files.errors import SkippedPath, TraversalError


@dataclass
class TreeScan:
    root: str
    files: list[str] = field(default_factory=list)
    skipped: list[SkippedPath] = field(default_factory=list)


def _traversal_failure(scan: TreeScan, path, err: OSError, on_error: ErrorPolicy, what: str):
    if on_error is ErrorPolicy.FAIL:
        raise TraversalError(path, f"{what}: {err}") from err
    logger.warning(f"Skipping {path}, {what}: {err}")
    scan.skipped.append(SkippedPath(path=str(path), stage="traversal", reason=f"{what}: {err}"))


def scan_single_directory(directory_path: str, scan: TreeScan, on_error: ErrorPolicy) -> list[str]:
    """
    List regular files in one directory (non-recursive).

    Files are appended to scan.files; subdirectory paths are returned for the caller
    to queue. Anything that is neither a regular file nor a directory (symlinks,
    devices, sockets, fifos) is ignored and symlinks are never followed.
    """
    try:
        with os.scandir(directory_path) as entries:
            children = list(entries)
    except OSError as err:
        _traversal_failure(scan, directory_path, err, on_error, "cannot list directory")
        return []

    subdirectories = []
    for entry in children:
        try:
            is_file = entry.is_file(follow_symlinks=False)
            is_dir = not is_file and entry.is_dir(follow_symlinks=False)
        except OSError as err:
            _traversal_failure(scan, entry.path, err, on_error, "cannot determine file type")
            continue
        if is_file:
            scan.files.append(entry.path)
        elif is_dir:
            subdirectories.append(entry.path)
        else:
            logger.debug(f"Ignoring non-regular entry {entry.path}")
    return subdirectories


def scan_directory(root_path, max_depth: int = DEFAULT_MAX_DEPTH, on_error: ErrorPolicy = ErrorPolicy.FAIL) -> TreeScan:
    """
    Recursively collect regular file paths below root_path.

    Args:
        root_path: Directory to walk
        max_depth: Recursion budget; each descent into a subdirectory costs one unit
        on_error: FAIL raises TraversalError on the first problem, SKIP records it and continues

    Returns:
        TreeScan with discovered file paths (in no particular order) and any skipped paths
    """
    root = str(Path(root_path))
    logger.info(f"Scanning {root} (max depth {max_depth})...")
    scan = TreeScan(root=root)
    on_error = ErrorPolicy(on_error)

    # (directory, remaining budget); a directory reached with budget <= 0 is not listed
    directory_queue = deque([(root, max_depth)])
    while directory_queue:
        current_dir, budget = directory_queue.popleft()
        if budget <= 0:
            continue
        directory_queue.extend(
            (subdirectory, budget - 1) for subdirectory in scan_single_directory(current_dir, scan, on_error)
        )

    logger.info(f"Found {humanize.intcomma(len(scan.files))} files in {root}")
    if scan.skipped:
        logger.warning(f"Skipped {humanize.intcomma(len(scan.skipped))} entries in {root}")
    return scan
