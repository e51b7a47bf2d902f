"""
Core scanning engine — walker, hasher, sorter, groupers and deletion policy.

This package contains the I/O-heavy foundation of dirscout:
- DirectoryWalkerImpl: flat or recursive enumeration with fingerprinting
- HasherImpl + FNV1aAlgorithmImpl / XXHashAlgorithmImpl: 64-bit content fingerprints
- EntrySorter: parent marker, directories, then names
- DuplicateGrouper / ZeroByteGrouper: filters behind the duplicate and zero-byte views
- DeletionSafetyGuard: layered policy consulted before any delete
- Models: Entry, DuplicateGroup, DeletionVerdict, MountRecord, DeletionResult

All components are pure Python with no UI dependencies.
"""

from .models import (
    Entry, EntryCategory, DuplicateGroup, DeletionVerdict, DeletionResult,
    MountRecord, ScanParams)
from .hasher import HasherImpl, FNV1aAlgorithmImpl, XXHashAlgorithmImpl, FNV1a64, HASH_ALGORITHMS
from .sorter import EntrySorter
from .scanner import DirectoryWalkerImpl, ScanConfig
from .grouper import DuplicateGrouper, ZeroByteGrouper
from .safety import DeletionSafetyGuard, MountTable

__all__ = [
    "Entry",
    "EntryCategory",
    "DuplicateGroup",
    "DeletionVerdict",
    "DeletionResult",
    "MountRecord",
    "ScanParams",
    "HasherImpl",
    "FNV1aAlgorithmImpl",
    "XXHashAlgorithmImpl",
    "FNV1a64",
    "HASH_ALGORITHMS",
    "EntrySorter",
    "DirectoryWalkerImpl",
    "ScanConfig",
    "DuplicateGrouper",
    "ZeroByteGrouper",
    "DeletionSafetyGuard",
    "MountTable",
]
