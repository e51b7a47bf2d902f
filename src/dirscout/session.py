"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

session.py

Browsing session: the state a file browser keeps for one open directory.

The class `BrowsingSession` acts as a facade over the core for a UI:
- Scanning in the background with progress (`scan_async`) or inline (`scan`)
- Navigation by entry index (`enter`)
- Duplicate and zero-byte views with a backup of the unfiltered listing
- Guarded deletion followed by a rescan (`delete`)

Only one scan runs at a time: requests are queued on a single worker thread,
so a new scan always starts after the previous one has finished.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional

from dirscout.commands import ConfirmCallback, DeleteCommand
from dirscout.core.grouper import DuplicateGrouper, ZeroByteGrouper
from dirscout.core.interfaces import DirectoryWalker
from dirscout.core.models import DeletionResult, DuplicateGroup, Entry, ScanParams
from dirscout.core.scanner import DirectoryWalkerImpl

logger = logging.getLogger(__name__)


class BrowsingSession:
    """
    Owns the entry list of one browsing context.
    Entries are addressed by index into `entries`; callers never need to map a
    rendered label back to an Entry.
    """

    def __init__(
        self,
        path: str,
        recursive: bool = False,
        include_parent_marker: bool = True,
        walker: DirectoryWalker = None,
        duplicate_grouper: DuplicateGrouper = None,
        delete_command: DeleteCommand = None,
    ):
        self.params = ScanParams(path=path, recursive=recursive, include_parent_marker=include_parent_marker)
        self.walker = walker or DirectoryWalkerImpl()
        self.duplicate_grouper = duplicate_grouper or DuplicateGrouper()
        self.zero_byte_grouper = ZeroByteGrouper()
        self.delete_command = delete_command or DeleteCommand()

        self.entries: List[Entry] = []
        self.backup: Optional[List[Entry]] = None
        self.duplicate_groups: List[DuplicateGroup] = []

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dirscout-scan")
        self._lock = threading.Lock()
        self._pending: Optional[Future] = None
        self._generation = 0
        self._running_stop: Optional[threading.Event] = None

    # =============================
    # Scanning
    # =============================

    @property
    def path(self) -> str:
        return self.params.path

    @property
    def is_filtered(self) -> bool:
        return self.backup is not None

    def scan(self, progress_callback: Optional[Callable[[int], None]] = None) -> List[Entry]:
        """Scans the current directory on the calling thread."""
        return self.scan_async(progress_callback).result()

    def scan_async(self, progress_callback: Optional[Callable[[int], None]] = None) -> Future:
        """
        Queues a scan of the current directory on the worker thread.
        The future resolves to the new entry list, which also replaces the
        session's entries unless discard_pending() was called meanwhile.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            params = self.params
            stop_event = threading.Event()
            future = self._executor.submit(self._run_scan, params, generation, progress_callback, stop_event)
            self._pending = future
        return future

    def _run_scan(self, params: ScanParams, generation: int,
                  progress_callback: Optional[Callable[[int], None]],
                  stop_event: threading.Event) -> List[Entry]:
        with self._lock:
            self._running_stop = stop_event
        try:
            entries = self.walker.scan(
                params.path,
                recursive=params.recursive,
                include_parent_marker=params.include_parent_marker,
                progress_callback=progress_callback,
                stopped_flag=stop_event.is_set,
            )
        finally:
            with self._lock:
                if self._running_stop is stop_event:
                    self._running_stop = None
        with self._lock:
            if generation == self._generation:
                self.entries = entries
                self.backup = None
                self.duplicate_groups = []
            else:
                logger.debug(f"Discarding result of superseded scan of {params.path}")
        return entries

    def discard_pending(self) -> None:
        """Stop listening for the in-flight scan; its result will not be applied."""
        with self._lock:
            self._generation += 1
            self._pending = None

    def stop(self) -> None:
        """
        Asks the running scan to stop early; entries collected so far are kept.
        Scans still queued behind it are not affected.
        """
        with self._lock:
            if self._running_stop is not None:
                self._running_stop.set()

    def wait(self) -> None:
        """Blocks until the pending scan, if any, has completed."""
        pending = self._pending
        if pending is not None:
            pending.result()

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # =============================
    # Navigation
    # =============================

    def entry(self, index: int) -> Entry:
        if index < 0 or index >= len(self.entries):
            raise IndexError(f"No entry at index {index}")
        return self.entries[index]

    def set_recursive(self, recursive: bool) -> None:
        self.params = ScanParams(self.params.path, recursive, self.params.include_parent_marker)

    def change_directory(self, path: str) -> List[Entry]:
        self.params = ScanParams(path, self.params.recursive, self.params.include_parent_marker)
        return self.scan()

    def enter(self, index: int) -> List[Entry]:
        """Opens the directory (or parent marker) at index and rescans."""
        target = self.entry(index)
        if not target.is_directory:
            raise ValueError(f"Not a directory: {target.path}")
        return self.change_directory(target.path)

    # =============================
    # Filtered views
    # =============================

    def _clear_flags(self) -> None:
        for entry in self.backup if self.backup is not None else self.entries:
            entry.reset_flags()

    def show_duplicates(self) -> List[DuplicateGroup]:
        """
        Replaces the displayed entries with duplicate group members, grouped
        together. The unfiltered listing is kept for restore().
        """
        self._clear_flags()
        source = self.backup if self.backup is not None else self.entries
        groups = self.duplicate_grouper.find_duplicates(source)

        self.backup = source
        self.duplicate_groups = groups
        self.entries = [member for group in groups for member in group.members]
        return groups

    def show_zero_byte_files(self) -> List[Entry]:
        self._clear_flags()
        source = self.backup if self.backup is not None else self.entries
        found = self.zero_byte_grouper.find_zero_byte_files(source)

        self.backup = source
        self.duplicate_groups = []
        self.entries = list(found)
        return found

    def restore(self) -> List[Entry]:
        """Brings back the unfiltered listing."""
        if self.backup is not None:
            self.entries = self.backup
            self.backup = None
            self.duplicate_groups = []
        return self.entries

    def total_wasted_space(self) -> int:
        return DuplicateGrouper.total_wasted_space(self.duplicate_groups)

    # =============================
    # Deletion
    # =============================

    def delete(self, index: int, recursive: bool = False,
               confirm: Optional[ConfirmCallback] = None) -> DeletionResult:
        """Checked delete of the entry at index; rescans after a successful removal."""
        target = self.entry(index)
        result = self.delete_command.execute(target, recursive=recursive, confirm=confirm)
        if result.success:
            self.scan()
        return result
