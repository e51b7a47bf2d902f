"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements directory enumeration with fingerprinting of non-empty files.
Features:
- Flat listing of direct children, or depth-first walk of the whole subtree
- Optional synthetic ".." entry for flat listings
- Best-effort metadata: unreadable sizes become 0, failed hashes stay empty
- Throttled progress callback plus a final count
- Returns entries sorted by EntrySorter
"""

import os
import stat
import time
import logging
from typing import Iterator, List, Optional, Callable

from dirscout.core.models import Entry, ScanParams
from dirscout.core.hasher import HasherImpl
from dirscout.core.interfaces import ContentHasher, DirectoryWalker
from dirscout.core.sorter import EntrySorter

logger = logging.getLogger(__name__)


class ScanConfig:
    PROGRESS_INTERVAL = 100             # flat listings
    RECURSIVE_PROGRESS_INTERVAL = 1000  # recursive walks are typically much larger

    @staticmethod
    def progress_interval(recursive: bool) -> int:
        if recursive:
            return ScanConfig.RECURSIVE_PROGRESS_INTERVAL
        return ScanConfig.PROGRESS_INTERVAL


class DirectoryWalkerImpl(DirectoryWalker):
    """
    Enumerates a directory and builds Entry objects, hashing eligible files
    with the injected ContentHasher.

    Enumeration errors never escape: an unreadable root yields whatever was
    collected (possibly only the parent marker), an unreadable subdirectory
    is skipped and the walk goes on with its siblings.
    """

    def __init__(self, hasher: ContentHasher = None):
        self.hasher = hasher or HasherImpl()

    def scan(self,
             path: str,
             recursive: bool = False,
             include_parent_marker: bool = False,
             progress_callback: Optional[Callable[[int], None]] = None,
             stopped_flag: Optional[Callable[[], bool]] = None) -> List[Entry]:
        params = ScanParams(path=path, recursive=recursive, include_parent_marker=include_parent_marker)
        logger.debug(f"Starting scan: {params.path} (recursive={params.recursive})")

        entries: List[Entry] = []
        if params.emits_parent_marker:
            parent = self._parent_of(params.path)
            if parent is not None:
                entries.append(Entry(path=parent, is_parent_marker=True, is_directory=True))

        progress_interval = ScanConfig.progress_interval(params.recursive)
        progress_counter = 0
        processed = 0
        start_time = time.time()

        try:
            for dir_entry in self._iter_dir_entries(params.path, params.recursive):
                if stopped_flag and stopped_flag():
                    logger.debug("Scan interrupted by caller")
                    break

                entries.append(self._process_entry(dir_entry))
                processed += 1
                progress_counter += 1

                if progress_callback and progress_counter >= progress_interval:
                    progress_callback(processed)
                    progress_counter = 0
        except OSError as e:
            logger.warning(f"Scan of {params.path} ended early: {e}")

        # Final update, also for very small directories
        if progress_callback:
            progress_callback(processed)

        EntrySorter.sort(entries, params.include_parent_marker)

        logger.debug(f"Scan completed in {time.time() - start_time:.2f}s, {processed} entries")
        return entries

    @staticmethod
    def _parent_of(path: str) -> Optional[str]:
        abs_path = os.path.abspath(path)
        parent = os.path.dirname(abs_path)
        if parent == abs_path:
            return None
        return parent

    @staticmethod
    def _iter_dir_entries(root: str, recursive: bool) -> Iterator[os.DirEntry]:
        """
        Yields directory entries depth-first (a directory precedes its children).
        Symlinked directories are listed but never descended into.
        """
        stack = [os.scandir(root)]
        try:
            while stack:
                iterator = stack[-1]
                try:
                    dir_entry = next(iterator)
                except StopIteration:
                    stack.pop().close()
                    continue
                except OSError as e:
                    if len(stack) == 1:
                        raise
                    logger.debug(f"Enumeration stopped early in subtree: {e}")
                    stack.pop().close()
                    continue

                yield dir_entry

                if recursive and DirectoryWalkerImpl._is_walkable_dir(dir_entry):
                    try:
                        stack.append(os.scandir(dir_entry.path))
                    except OSError as e:
                        logger.debug(f"Skipping unreadable directory {dir_entry.path}: {e}")
        finally:
            for iterator in stack:
                iterator.close()

    @staticmethod
    def _is_walkable_dir(dir_entry: os.DirEntry) -> bool:
        try:
            return dir_entry.is_dir(follow_symlinks=False)
        except OSError:
            return False

    def _process_entry(self, dir_entry: os.DirEntry) -> Entry:
        try:
            is_dir = dir_entry.is_dir()
        except OSError:
            is_dir = False

        size = 0
        executable = False
        regular = False
        if not is_dir:
            try:
                st = dir_entry.stat()
                size = st.st_size
                executable = bool(st.st_mode & stat.S_IXUSR)
                regular = stat.S_ISREG(st.st_mode)
            except OSError as e:
                logger.debug(f"Could not get size of {dir_entry.path}: {e}")

        entry = Entry(
            path=dir_entry.path,
            size=size,
            is_directory=is_dir,
            is_executable=executable,
        )

        # Hash only non-empty regular files (never FIFOs or devices)
        if regular and size > 0:
            entry.fingerprint = self.hasher.compute_fingerprint(entry.path)

        return entry
