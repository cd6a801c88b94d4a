from dataclasses import dataclass


class ComparisonError(Exception):
    """Base for every error that aborts a comparison run."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ConfigurationError(ComparisonError):
    """A root path is missing or not a directory, or an option is invalid."""


class TraversalError(ComparisonError):
    """A directory could not be listed or an entry could not be classified."""


class HashingError(ComparisonError):
    """A discovered file could not be opened or fully read."""


@dataclass(frozen=True)
class SkippedPath:
    path: str
    stage: str  # "traversal" or "hashing"
    reason: str
