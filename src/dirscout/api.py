"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

api.py

Function-level interface to the scanning core for UI collaborators.

Each function delegates to a core component:
- `scan`, `sort`                               -> DirectoryWalkerImpl, EntrySorter
- `find_duplicates`, `total_wasted_space`      -> DuplicateGrouper
- `find_zero_byte_files`                       -> ZeroByteGrouper
- `evaluate_deletion`, `describe_verdict`      -> DeletionSafetyGuard
- `delete_file`, `delete_directory`            -> DeletionService (no policy applied)
- `checked_delete`                             -> DeleteCommand (policy + confirmation)
"""
from typing import Callable, List, Optional

from dirscout.commands import ConfirmCallback, DeleteCommand
from dirscout.core.grouper import DuplicateGrouper, ZeroByteGrouper
from dirscout.core.hasher import HasherImpl
from dirscout.core.models import DeletionResult, DeletionVerdict, DuplicateGroup, Entry
from dirscout.core.safety import DeletionSafetyGuard
from dirscout.core.scanner import DirectoryWalkerImpl
from dirscout.core.sorter import EntrySorter
from dirscout.services.deletion_service import DeletionService


def compute_fingerprint(path: str) -> str:
    return HasherImpl().compute_fingerprint(path)


def scan(
    path: str,
    recursive: bool = False,
    include_parent_marker: bool = False,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> List[Entry]:
    return DirectoryWalkerImpl().scan(
        path,
        recursive=recursive,
        include_parent_marker=include_parent_marker,
        progress_callback=progress_callback,
    )


def sort(entries: List[Entry], include_parent_marker: bool = True) -> None:
    EntrySorter.sort(entries, include_parent_marker)


def find_duplicates(entries: List[Entry], confirm_content: bool = False) -> List[DuplicateGroup]:
    return DuplicateGrouper(confirm_content=confirm_content).find_duplicates(entries)


def total_wasted_space(groups: List[DuplicateGroup]) -> int:
    return DuplicateGrouper.total_wasted_space(groups)


def find_zero_byte_files(entries: List[Entry]) -> List[Entry]:
    return ZeroByteGrouper().find_zero_byte_files(entries)


def evaluate_deletion(path: str) -> DeletionVerdict:
    return DeletionSafetyGuard().evaluate(path)


def describe_verdict(verdict: DeletionVerdict, path: str) -> str:
    return DeletionSafetyGuard.describe(verdict, path)


def delete_file(entry: Entry) -> DeletionResult:
    return DeletionService.delete_file(entry)


def delete_directory(entry: Entry, recursive: bool = False) -> DeletionResult:
    return DeletionService.delete_directory(entry, recursive=recursive)


def checked_delete(entry: Entry, recursive: bool = False,
                   confirm: Optional[ConfirmCallback] = None) -> DeletionResult:
    return DeleteCommand().execute(entry, recursive=recursive, confirm=confirm)
