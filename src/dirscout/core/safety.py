"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/safety.py
Deletion safety policy: decides whether a path may be removed at all.

CHECK ORDER (first match wins)
------------------------------
1. Critical system paths        -> BLOCKED_SYSTEM_PATH
2. The user's home directory    -> BLOCKED_HOME
3. Virtual/pseudo filesystems   -> BLOCKED_VIRTUAL_FILESYSTEM (also when the probe fails)
4. Mount points                 -> BLOCKED_MOUNT_POINT
5. Removable media              -> WARNING_REMOVABLE_MEDIA
6. Anything else                -> ALLOWED

The system path, home and mount point checks match the path as given and its
form with symlinked parents resolved. The mount table is re-read on every
evaluation, never cached.
"""

import os
import logging
from typing import Callable, List, Optional

import psutil

from dirscout.core.interfaces import MountReader
from dirscout.core.models import DeletionVerdict, MountRecord

logger = logging.getLogger(__name__)


class MountTable(MountReader):
    """Reads the live mount table through psutil."""

    REMOVABLE_ROOTS = ("/media", "/mnt", "/run/media")

    def read(self) -> List[MountRecord]:
        try:
            partitions = psutil.disk_partitions(all=True)
        except OSError as e:
            logger.warning(f"Could not read mount table: {e}")
            return []

        return [
            MountRecord(
                device=part.device,
                mount_point=part.mountpoint,
                filesystem_type=part.fstype,
                is_root=(part.mountpoint == os.sep),
                is_removable_heuristic=self.is_removable_mount_point(part.mountpoint),
            )
            for part in partitions
        ]

    @classmethod
    def is_removable_mount_point(cls, mount_point: str) -> bool:
        return any(
            mount_point == root or mount_point.startswith(root + os.sep)
            for root in cls.REMOVABLE_ROOTS
        )


class DeletionSafetyGuard:
    """
    Evaluates a path against the layered deletion policy.
    Pure with respect to its inputs: reads system state, never changes it.
    """

    CRITICAL_PATHS = frozenset({
        "/", "/boot", "/dev", "/etc", "/lib", "/lib64",
        "/proc", "/root", "/run", "/sys", "/usr", "/var",
        "/bin", "/sbin", "/opt", "/srv", "/tmp",
    })

    # Names as reported in the mount table (see /usr/include/linux/magic.h for the magic numbers)
    VIRTUAL_FILESYSTEMS = frozenset({
        "proc",        # PROC_SUPER_MAGIC 0x9fa0
        "sysfs",       # SYSFS_MAGIC 0x62656572
        "tmpfs",       # TMPFS_MAGIC 0x01021994
        "ramfs",       # RAMFS_MAGIC 0x858458f6
        "devpts",      # DEVPTS_SUPER_MAGIC 0x1cd1
        "securityfs",  # SECURITYFS_MAGIC 0x73636673
        "cgroup",      # CGROUP_SUPER_MAGIC 0x27e0eb
        "cgroup2",     # CGROUP2_SUPER_MAGIC 0x63677270
    })

    SYSFS_BLOCK_DIR = "/sys/class/block"

    def __init__(
        self,
        mount_reader: MountReader = None,
        home_provider: Optional[Callable[[], Optional[str]]] = None,
        sysfs_block_dir: Optional[str] = None,
    ):
        self.mount_reader = mount_reader or MountTable()
        self.home_provider = home_provider or (lambda: os.environ.get("HOME"))
        self.sysfs_block_dir = sysfs_block_dir or self.SYSFS_BLOCK_DIR

    # =============================
    # Policy
    # =============================

    def evaluate(self, path: str) -> DeletionVerdict:
        """Returns the verdict for deleting path."""
        normalized = self.normalize(path)
        # Both the path as given and the one its symlinked parents lead to
        forms = (normalized, self.resolve(normalized))

        if any(self.is_system_path(form) for form in forms):
            return DeletionVerdict.BLOCKED_SYSTEM_PATH

        if any(self.is_user_home(form) for form in forms):
            return DeletionVerdict.BLOCKED_HOME

        mounts = self.mount_reader.read()

        if self.is_protected_filesystem(normalized, mounts):
            return DeletionVerdict.BLOCKED_VIRTUAL_FILESYSTEM

        if any(self.is_mount_point(form, mounts) for form in forms):
            return DeletionVerdict.BLOCKED_MOUNT_POINT

        if self.is_removable_media(normalized, mounts):
            return DeletionVerdict.WARNING_REMOVABLE_MEDIA

        return DeletionVerdict.ALLOWED

    @staticmethod
    def describe(verdict: DeletionVerdict, path: str) -> str:
        """Human-readable message for a verdict, always naming the path."""
        templates = {
            DeletionVerdict.ALLOWED: "Deletion allowed: {path}",
            DeletionVerdict.BLOCKED_SYSTEM_PATH: "Cannot delete system directory: {path}",
            DeletionVerdict.BLOCKED_HOME: "Cannot delete your home directory: {path}",
            DeletionVerdict.BLOCKED_VIRTUAL_FILESYSTEM: "Cannot delete virtual/system filesystem: {path}",
            DeletionVerdict.BLOCKED_MOUNT_POINT: "Cannot delete mount point: {path}",
            DeletionVerdict.WARNING_REMOVABLE_MEDIA: "This is on removable media: {path}",
        }
        return templates.get(verdict, "Unknown status: {path}").format(path=path)

    # =============================
    # Individual checks
    # =============================

    @staticmethod
    def normalize(path: str) -> str:
        """Absolute, normalized form; trailing separators and '..' are collapsed."""
        normalized = os.path.abspath(str(path))
        # POSIX keeps a leading '//' as implementation-defined, treat it as '/'
        if normalized.startswith("//"):
            normalized = os.sep + normalized.lstrip("/")
        return normalized

    def is_system_path(self, path: str) -> bool:
        return self.normalize(path) in self.CRITICAL_PATHS

    def is_user_home(self, path: str) -> bool:
        home = self.home_provider()
        if not home:
            return False
        normalized = self.normalize(path)
        home = self.normalize(home)
        return normalized in (home, os.path.realpath(home))

    def is_mount_point(self, path: str, mounts: Optional[List[MountRecord]] = None) -> bool:
        if mounts is None:
            mounts = self.mount_reader.read()
        normalized = self.normalize(path)
        return any(mount.mount_point == normalized for mount in mounts)

    def is_protected_filesystem(self, path: str, mounts: Optional[List[MountRecord]] = None) -> bool:
        """
        True if the backing filesystem is virtual, or if its type cannot be
        determined at all (fail closed).
        """
        if mounts is None:
            mounts = self.mount_reader.read()
        fs_type = self.filesystem_type(path, mounts)
        if fs_type is None:
            logger.debug(f"Filesystem probe failed for {path}, treating as protected")
            return True
        return fs_type in self.VIRTUAL_FILESYSTEMS

    def is_removable_media(self, path: str, mounts: Optional[List[MountRecord]] = None) -> bool:
        if mounts is None:
            mounts = self.mount_reader.read()
        resolved = self.resolve(path)
        for mount in mounts:
            if not mount.contains(resolved):
                continue
            if mount.is_removable_heuristic:
                return True
            if self.is_removable_device(mount.device):
                return True
        return False

    # =============================
    # Probes
    # =============================

    @staticmethod
    def resolve(path: str) -> str:
        """
        Resolves symlinks in the parent chain. A trailing symlink is not followed.
        """
        normalized = DeletionSafetyGuard.normalize(path)
        if os.path.islink(normalized):
            parent, name = os.path.split(normalized)
            return os.path.join(os.path.realpath(parent), name)
        return os.path.realpath(normalized)

    def filesystem_type(self, path: str, mounts: List[MountRecord]) -> Optional[str]:
        """
        Type of the filesystem backing path, or None if the path cannot be
        stat'ed or no mount contains it.
        """
        try:
            os.lstat(path)
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return None

        mount = self.mount_for(self.resolve(path), mounts)
        return mount.filesystem_type if mount else None

    @staticmethod
    def mount_for(path: str, mounts: List[MountRecord]) -> Optional[MountRecord]:
        """Innermost mount containing path; later entries shadow earlier ones."""
        best = None
        best_key = None
        for index, mount in enumerate(mounts):
            if not mount.contains(path):
                continue
            key = (len(mount.mount_point), index)
            if best_key is None or key > best_key:
                best, best_key = mount, key
        return best

    def is_removable_device(self, device: str) -> bool:
        """
        Reads the kernel's removable flag for a block device; partitions
        report the flag of their parent disk.
        """
        if not device.startswith("/dev/"):
            return False

        name = os.path.basename(os.path.realpath(device))
        block_dir = os.path.join(self.sysfs_block_dir, name)
        if not os.path.exists(block_dir):
            return False

        if os.path.exists(os.path.join(block_dir, "partition")):
            block_dir = os.path.dirname(os.path.realpath(block_dir))

        try:
            with open(os.path.join(block_dir, "removable")) as f:
                return f.read().strip() == "1"
        except OSError as e:
            logger.debug(f"Could not read removable flag for {device}: {e}")
            return False

