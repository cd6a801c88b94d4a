from pathlib import Path
from typing import NamedTuple, Optional

from missing_files.algorithms import Algorithm, new_hasher
from missing_files.config import READ_BLOCK_SIZE


class DigestResult(NamedTuple):
    path: str
    digest: Optional[str]
    error: Optional[str] = None


def get_digest(path: Path, algorithm: Algorithm) -> str:
    """
    Compute a file digest
    :param path: pathlib Path object
    :param algorithm: Algorithm used to fold the file content
    :return: digest: hexadecimal string
    """
    result = new_hasher(algorithm)
    with path.open(mode="rb") as f:
        while data := f.read(READ_BLOCK_SIZE):
            result.update(data)
    return result.hexdigest()


def hash_path(path: str, algorithm: Algorithm) -> DigestResult:
    """Runs inside pool workers; read failures come back as data so the caller applies its error policy."""
    try:
        return DigestResult(path, get_digest(Path(path), algorithm))
    except OSError as err:
        return DigestResult(path, None, f"{type(err).__name__}: {err}")
