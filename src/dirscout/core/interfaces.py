"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the scanning core.
These protocols enforce structural typing using Python's `typing.Protocol` so the
walker, hasher and safety guard can be swapped for fakes in tests.

Key Components:
---------------
- HashState / HashAlgorithm: incremental hash functions (FNV-1a, xxHash64).
- ContentHasher: computes a fingerprint string for a file path.
- DirectoryWalker: enumerates a directory and returns Entry objects.
- MountReader: returns the current mount table.
"""

from typing import Protocol, List, Optional, Callable
from dirscout.core.models import Entry, MountRecord


# ===== Interfaces =====

class HashState(Protocol):
    """Running hash state, fed block by block."""
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different fingerprint functions without affecting the
    walker or the groupers. Digests are rendered as 16 uppercase hex digits.
    """
    name: str

    def new(self) -> HashState:
        """Returns a fresh hash state."""
        ...


class ContentHasher(Protocol):
    """Interface for fingerprinting whole files."""
    def compute_fingerprint(self, path: str) -> str:
        """Returns the fingerprint, or an empty string if the file cannot be read."""
        ...


class DirectoryWalker(Protocol):
    """
    Interface for scanning a directory and collecting entry metadata.
    """
    def scan(
        self,
        path: str,
        recursive: bool = False,
        include_parent_marker: bool = False,
        progress_callback: Optional[Callable[[int], None]] = None,
        stopped_flag: Optional[Callable[[], bool]] = None,
    ) -> List[Entry]:
        """
        Scan the given directory.

        Args:
            path: Directory to enumerate.
            recursive: Walk the full subtree instead of direct children only.
            include_parent_marker: Emit a synthetic ".." entry (flat scans only).
            progress_callback: Called with the running entry count.
            stopped_flag: Function that returns True if the walk should stop.

        Returns:
            Sorted list of entries.
        """
        ...


class MountReader(Protocol):
    """Interface for reading the live mount table."""
    def read(self) -> List[MountRecord]: ...
