"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure sorting logic for scanned entries.
"""
from typing import List
from dirscout.core.models import Entry


class EntrySorter:
    """
    Sorts entries in-place.
    Sorting priority (applied lexicographically):
    1. Parent marker first (only when include_parent_marker is set)
    2. Directories before files
    3. Case-sensitive display name
    """

    @staticmethod
    def sort_key(entry: Entry, include_parent_marker: bool = True):
        parent_rank = 0 if (include_parent_marker and entry.is_parent_marker) else 1
        return (
            parent_rank,
            not entry.is_directory,
            entry.display_name,
        )

    @staticmethod
    def sort(entries: List[Entry], include_parent_marker: bool = True) -> None:
        if not entries:
            return
        entries.sort(key=lambda e: EntrySorter.sort_key(e, include_parent_marker))
