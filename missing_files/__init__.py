"""Find files from an old directory tree whose content is missing from a new one."""

from missing_files.algorithms import Algorithm
from missing_files.compare import ComparisonResult, compare_trees
from missing_files.config import CompareConfig, ErrorPolicy
from missing_files.errors import ComparisonError, ConfigurationError, HashingError, TraversalError

__version__ = "0.3.0"

__all__ = [
    "Algorithm",
    "CompareConfig",
    "ComparisonError",
    "ComparisonResult",
    "ConfigurationError",
    "ErrorPolicy",
    "HashingError",
    "TraversalError",
    "compare_trees",
]
