"""
dirscout — directory scan and classification engine for a terminal file browser.

Core features:
- Flat or recursive directory scans with 64-bit content fingerprints (FNV-1a or xxHash64)
- Duplicate groups with reclaimable space, zero-byte file detection
- Deletion safety guard (system paths, home, virtual filesystems, mount points, removable media)
- Permanent deletion only after the guard and an explicit confirmation
- CLI interface with an optional interactive browser
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("dirscout")
except PackageNotFoundError:
    __version__ = "0.0.0+local"

# Public API: only what users should import directly
from dirscout.commands import DeleteCommand
from dirscout.core import (
    Entry, EntryCategory, DuplicateGroup, DeletionVerdict, DeletionResult,
    DirectoryWalkerImpl, EntrySorter, DuplicateGrouper, ZeroByteGrouper,
    DeletionSafetyGuard, HasherImpl)
from dirscout.services.deletion_service import DeletionService
from dirscout.session import BrowsingSession
from dirscout.utils.convert_utils import ConvertUtils

__all__ = [
    "DeleteCommand",
    "Entry",
    "EntryCategory",
    "DuplicateGroup",
    "DeletionVerdict",
    "DeletionResult",
    "DirectoryWalkerImpl",
    "EntrySorter",
    "DuplicateGrouper",
    "ZeroByteGrouper",
    "DeletionSafetyGuard",
    "HasherImpl",
    "DeletionService",
    "BrowsingSession",
    "ConvertUtils",
    "__version__",
]
