"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for directory scanning, classification and guarded deletion.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import os
import stat
import logging
from enum import Enum

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class EntryCategory(Enum):
    """
    Display classification of a scanned entry.
    Precedence follows declaration order: a zero-byte file is reported as
    ZERO_BYTE even if it is also flagged as duplicate.
    """
    ZERO_BYTE = "zero-byte"
    DUPLICATE = "duplicate"
    DIRECTORY = "directory"
    EXECUTABLE = "executable"
    REGULAR = "regular"

    @property
    def marker(self) -> str:
        """Short marker used by text front ends instead of terminal colours."""
        mapping = {
            EntryCategory.ZERO_BYTE: "!",
            EntryCategory.DUPLICATE: "=",
            EntryCategory.DIRECTORY: "/",
            EntryCategory.EXECUTABLE: "*",
            EntryCategory.REGULAR: " ",
        }
        return mapping.get(self, " ")


class DeletionVerdict(Enum):
    """
    Outcome of a deletion safety evaluation.
    Only ALLOWED and WARNING_REMOVABLE_MEDIA let the caller proceed.
    """
    ALLOWED = "allowed"
    BLOCKED_SYSTEM_PATH = "blocked-system-path"
    BLOCKED_HOME = "blocked-home"
    BLOCKED_VIRTUAL_FILESYSTEM = "blocked-virtual-filesystem"
    BLOCKED_MOUNT_POINT = "blocked-mount-point"
    WARNING_REMOVABLE_MEDIA = "warning-removable-media"

    @property
    def is_blocked(self) -> bool:
        return self.value.startswith("blocked")

    @property
    def is_warning(self) -> bool:
        return self is DeletionVerdict.WARNING_REMOVABLE_MEDIA

    @property
    def permits_deletion(self) -> bool:
        """True if the caller may proceed after explicit user confirmation."""
        return not self.is_blocked

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass
class Entry:
    """
    One filesystem object encountered during a scan.

    Invariants:
    - the parent marker is a directory of size 0 without fingerprint
    - a fingerprint is only present for non-directories with size > 0
    Flags are mutated by the groupers, never by the walker.
    """
    path: str
    size: int = 0  # in bytes, 0 for directories
    is_directory: bool = False
    is_parent_marker: bool = False
    fingerprint: str = ""
    is_executable: bool = False
    is_duplicate: bool = False
    is_broken: bool = False

    def __post_init__(self):
        if self.is_parent_marker:
            self.is_directory = True
            self.size = 0
            self.fingerprint = ""
        if self.is_directory:
            self.is_executable = False

    @property
    def name(self) -> str:
        """Basename of the path (empty for a filesystem root)."""
        return os.path.basename(os.path.normpath(self.path))

    @property
    def display_name(self) -> str:
        """
        Name shown in listings: ".." for the parent marker, basename with a
        trailing separator for directories, the full path for a root directory.
        """
        if self.is_parent_marker:
            return ".."
        name = self.name
        if self.is_directory:
            if not name:
                return self.path
            return name + os.sep
        return name

    @property
    def is_zero_byte(self) -> bool:
        return self.size == 0 and not self.is_directory and not self.is_parent_marker

    @property
    def category(self) -> EntryCategory:
        if self.is_zero_byte:
            return EntryCategory.ZERO_BYTE
        if self.is_duplicate:
            return EntryCategory.DUPLICATE
        if self.is_directory:
            return EntryCategory.DIRECTORY
        if self.is_executable:
            return EntryCategory.EXECUTABLE
        return EntryCategory.REGULAR

    def reset_flags(self) -> None:
        self.is_duplicate = False
        self.is_broken = False

    @classmethod
    def from_path(cls, path: str) -> "Entry":
        """
        Builds an Entry for an arbitrary path with best-effort metadata.
        The fingerprint is left empty; hashing is the walker's job.
        """
        try:
            is_dir = os.path.isdir(path) and not os.path.islink(path)
        except OSError:
            is_dir = False

        size = 0
        executable = False
        if not is_dir:
            try:
                st = os.stat(path)
                size = st.st_size
                executable = bool(st.st_mode & stat.S_IXUSR)
            except OSError as e:
                logger.debug(f"Could not stat {path}: {e}")

        return cls(path=str(path), size=size, is_directory=is_dir, is_executable=executable)

    def __repr__(self):
        kind = "dir" if self.is_directory else "file"
        return f"<Entry {kind} path={self.path}, size={self.size}>"


@dataclass
class DuplicateGroup:
    """
    Entries sharing one fingerprint. Groups of a single entry are never built
    by the grouper, so members always holds at least two entries.
    """
    fingerprint: str
    members: List[Entry] = field(default_factory=list)

    @property
    def size(self) -> int:
        """Size of one copy; every member has the same size."""
        return self.members[0].size if self.members else 0

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def wasted_bytes(self) -> int:
        """Bytes reclaimable by keeping exactly one copy."""
        if not self.members:
            return 0
        return (len(self.members) - 1) * self.members[0].size

    def __repr__(self):
        return f"<DuplicateGroup fingerprint={self.fingerprint}, count={len(self.members)}>"


@dataclass
class MountRecord:
    """One row of the live mount table."""
    device: str
    mount_point: str
    filesystem_type: str
    is_root: bool = False
    is_removable_heuristic: bool = False

    def contains(self, path: str) -> bool:
        """True if path is the mount point itself or lies below it."""
        if self.mount_point == os.sep:
            return path.startswith(os.sep)
        return path == self.mount_point or path.startswith(self.mount_point + os.sep)


@dataclass
class DeletionResult:
    """Outcome of a deletion attempt; deletion code reports instead of raising."""
    success: bool
    message: str
    items_deleted: int = 0
    verdict: Optional[DeletionVerdict] = None

    def __bool__(self) -> bool:
        return self.success


@dataclass
class ScanParams:
    """
    Parameters for one directory scan, validated on construction.
    Interface-agnostic: used by the walker, the session and the CLI.
    """
    path: str
    recursive: bool = False
    include_parent_marker: bool = True

    def __post_init__(self):
        if not self.path:
            raise ValueError("Scan path cannot be empty")
        self.path = str(self.path)

    @property
    def emits_parent_marker(self) -> bool:
        """The parent marker is only produced for flat listings."""
        return self.include_parent_marker and not self.recursive
