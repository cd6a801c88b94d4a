"""
Digest algorithms selectable at runtime.

Every variant is reached through ``ALGORITHMS``, a single table mapping the
``Algorithm`` value to a factory returning a fresh hasher with the hashlib
interface (``update`` / ``hexdigest``).
"""
import hashlib
import zlib
from enum import StrEnum
from typing import Callable, Protocol


class Algorithm(StrEnum):
    CRC32 = "crc32"
    ADLER32 = "adler32"
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    BLAKE2B = "blake2b"


DEFAULT_ALGORITHM = Algorithm.CRC32


class Hasher(Protocol):
    def update(self, data: bytes) -> None: ...

    def hexdigest(self) -> str: ...


class _ZlibChecksum:
    """Running zlib checksum (crc32 / adler32) behind the hashlib interface."""

    def __init__(self, func: Callable[[bytes, int], int], start: int):
        self._func = func
        self._value = start

    def update(self, data: bytes) -> None:
        self._value = self._func(data, self._value)

    def hexdigest(self) -> str:
        return f"{self._value & 0xFFFFFFFF:08x}"


ALGORITHMS: dict[Algorithm, Callable[[], Hasher]] = {
    Algorithm.CRC32: lambda: _ZlibChecksum(zlib.crc32, 0),
    Algorithm.ADLER32: lambda: _ZlibChecksum(zlib.adler32, 1),
    Algorithm.MD5: hashlib.md5,
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.BLAKE2B: hashlib.blake2b,
}


def get_algorithm(name) -> Algorithm:
    """
    Resolve an algorithm name to its enum value.

    Args:
        name: Algorithm value or its string name, case-insensitive

    Returns:
        The matching Algorithm

    Raises:
        ValueError: if the name is not a known algorithm
    """
    try:
        return Algorithm(str(name).lower())
    except ValueError:
        choices = ", ".join(a.value for a in Algorithm)
        raise ValueError(f"Unknown algorithm '{name}'. Choose one of: {choices}") from None


def new_hasher(algorithm: Algorithm) -> Hasher:
    return ALGORITHMS[get_algorithm(algorithm)]()


def digest_bytes(data: bytes, algorithm: Algorithm = DEFAULT_ALGORITHM) -> str:
    hasher = new_hasher(algorithm)
    hasher.update(data)
    return hasher.hexdigest()
