from typing import Iterable

from loguru import logger

# path -> digest for the old tree, digest -> path for the new tree
OldIndex = dict[str, str]
NewIndex = dict[str, str]


def build_old_index(pairs: Iterable[tuple[str, str]]) -> OldIndex:
    """Keyed by path, sorted ascending so reconciliation walks paths in order."""
    return dict(sorted(pairs))


def build_new_index(pairs: Iterable[tuple[str, str]]) -> NewIndex:
    """
    Keyed by digest. When several new files share content the last one wins;
    only the presence of the digest matters downstream.
    """
    return {digest: path for path, digest in pairs}


def reconcile(old_index: OldIndex, new_index: NewIndex) -> list[str]:
    """Old-tree paths, in ascending order, whose digest does not occur in the new tree."""
    missing = [path for path, digest in sorted(old_index.items()) if digest not in new_index]
    logger.debug(f"{len(missing)} of {len(old_index)} old files have no content match")
    return missing


def find_missing(old_pairs: Iterable[tuple[str, str]], new_pairs: Iterable[tuple[str, str]]) -> list[str]:
    return reconcile(build_old_index(old_pairs), build_new_index(new_pairs))
