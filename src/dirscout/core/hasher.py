"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements content fingerprinting using pluggable hash algorithms.

HasherImpl streams a file block by block through the selected algorithm and
renders the 64-bit digest as 16 uppercase hex digits. Any I/O failure yields an
empty fingerprint; callers treat that as "hash unavailable".
"""

import logging
import xxhash

from dirscout.core.interfaces import HashAlgorithm, HashState

logger = logging.getLogger(__name__)

FNV_OFFSET_BASIS = 14695981039346656037
FNV_PRIME = 1099511628211
_MASK_64 = 0xFFFFFFFFFFFFFFFF


class FNV1a64:
    """
    64-bit FNV-1a running state.
    Non-cryptographic: used for equality filtering only.
    """

    def __init__(self, data: bytes = b""):
        self._acc = FNV_OFFSET_BASIS
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        acc = self._acc
        prime = FNV_PRIME
        mask = _MASK_64
        for byte in data:
            acc = ((acc ^ byte) * prime) & mask
        self._acc = acc

    def intdigest(self) -> int:
        return self._acc

    def hexdigest(self) -> str:
        return f"{self._acc:016X}"


# Use the same way to implement and use any other hashing algorithm
class FNV1aAlgorithmImpl(HashAlgorithm):
    name = "fnv1a"

    def new(self) -> HashState:
        return FNV1a64()


class XXHashAlgorithmImpl(HashAlgorithm):
    name = "xxh64"

    def new(self) -> HashState:
        return xxhash.xxh64()


HASH_ALGORITHMS = {
    FNV1aAlgorithmImpl.name: FNV1aAlgorithmImpl,
    XXHashAlgorithmImpl.name: XXHashAlgorithmImpl,
}


class HasherImpl:
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Computes whole-file fingerprints without loading files into memory.
    """

    BLOCK_SIZE = 64 * 1024

    def __init__(self, algorithm: HashAlgorithm = None):
        self.algorithm = algorithm or FNV1aAlgorithmImpl()

    def compute_fingerprint(self, path: str) -> str:
        """Returns the fingerprint of the file, or "" if it cannot be read."""
        state = self.algorithm.new()
        try:
            with open(path, "rb") as f:
                while True:
                    block = f.read(self.BLOCK_SIZE)
                    if not block:
                        break
                    state.update(block)
        except OSError as e:
            logger.debug(f"Could not hash {path}: {e}")
            return ""
        return state.hexdigest().upper()

    @staticmethod
    def fingerprint_bytes(data: bytes, algorithm: HashAlgorithm = None) -> str:
        """Fingerprint of an in-memory buffer, same format as compute_fingerprint."""
        state = (algorithm or FNV1aAlgorithmImpl()).new()
        state.update(data)
        return state.hexdigest().upper()
