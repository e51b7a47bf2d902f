"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/deletion_service.py
Permanent removal of files and directory trees.

This is mechanism only: no safety policy is applied here. Callers must obtain
an ALLOWED or WARNING_REMOVABLE_MEDIA verdict and user confirmation first
(dirscout.commands.DeleteCommand does both).
"""
import os
import shutil
import logging

from dirscout.core.models import Entry, DeletionResult

logger = logging.getLogger(__name__)


class DeletionService:
    """
    Removes filesystem objects and reports the outcome as DeletionResult.
    Filesystem errors are reported with their system error text, never raised.
    """

    @staticmethod
    def delete_file(entry: Entry) -> DeletionResult:
        """
        Removes exactly one non-directory path. A symlink is unlinked even when
        it points at a directory; its target is left alone.
        """
        path = entry.path
        if os.path.isdir(path) and not os.path.islink(path):
            return DeletionResult(False, f"Not a file: {path}")

        try:
            os.remove(path)
        except OSError as e:
            logger.debug(f"Failed to delete {path}: {e}")
            return DeletionResult(False, f"Failed to delete {path}: {e.strerror or e}")

        logger.debug(f"Deleted file {path}")
        return DeletionResult(True, f"Deleted: {path}", items_deleted=1)

    @staticmethod
    def delete_directory(entry: Entry, recursive: bool = False) -> DeletionResult:
        """
        Non-recursive: removes the directory only if it is empty.
        Recursive: counts all descendants, then removes the whole tree.
        items_deleted is the number of descendants (the directory itself excluded).
        """
        path = entry.path
        if os.path.islink(path) or not os.path.isdir(path):
            return DeletionResult(False, f"Not a directory: {path}")

        if not recursive:
            try:
                os.rmdir(path)
            except OSError as e:
                logger.debug(f"Failed to remove directory {path}: {e}")
                return DeletionResult(False, f"Failed to delete {path}: {e.strerror or e}")
            return DeletionResult(True, f"Deleted empty directory: {path}", items_deleted=0)

        count = DeletionService.count_descendants(path)
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.debug(f"Failed to remove tree {path}: {e}")
            return DeletionResult(False, f"Failed to delete {path}: {e.strerror or e}")

        logger.debug(f"Deleted directory {path} with {count} items")
        return DeletionResult(True, f"Deleted {path} ({count} items)", items_deleted=count)

    @staticmethod
    def count_descendants(path: str) -> int:
        """Number of files and directories below path; symlinks are counted, not followed."""
        count = 0
        for root, dirs, files in os.walk(path):
            count += len(dirs) + len(files)
        return count
