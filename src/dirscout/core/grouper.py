"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements the entry filters behind the duplicate and zero-byte views.
Both mark matching entries in place; neither clears flags from earlier runs.
"""

import filecmp
import logging
from collections import defaultdict
from typing import List, Dict, Any, Callable

from dirscout.core.models import Entry, DuplicateGroup

logger = logging.getLogger(__name__)


class DuplicateGrouper:
    """
    Partitions entries by fingerprint and reports partitions of two or more.

    With confirm_content=True every fingerprint partition is further split into
    byte-identical sub-partitions, so a hash collision can never label two
    different files as duplicates.
    """

    def __init__(self, confirm_content: bool = False):
        self.confirm_content = confirm_content

    @staticmethod
    def is_eligible(entry: Entry) -> bool:
        return (
            not entry.is_directory
            and not entry.is_parent_marker
            and entry.size > 0
            and bool(entry.fingerprint)
        )

    def find_duplicates(self, entries: List[Entry]) -> List[DuplicateGroup]:
        """
        Groups eligible entries by fingerprint and marks every grouped entry
        as duplicate. Group order follows first appearance in entries.
        """
        eligible = [e for e in entries if self.is_eligible(e)]
        partitions = self._group_by(eligible, lambda e: e.fingerprint)

        groups = []
        for fingerprint, members in partitions.items():
            if self.confirm_content:
                subgroups = self._split_by_content(members)
            else:
                subgroups = [members]

            for subgroup in subgroups:
                if len(subgroup) < 2:
                    continue
                for entry in subgroup:
                    entry.is_duplicate = True
                groups.append(DuplicateGroup(fingerprint=fingerprint, members=subgroup))

        logger.debug(f"Found {len(groups)} duplicate groups among {len(eligible)} eligible entries")
        return groups

    @staticmethod
    def total_wasted_space(groups: List[DuplicateGroup]) -> int:
        return sum(group.wasted_bytes for group in groups)

    @staticmethod
    def _group_by(entries: List[Entry], key_func: Callable[[Entry], Any]) -> Dict[Any, List[Entry]]:
        """
        Helper method to group entries by any computed key, keeping only
        groups with 2+ entries.
        """
        groups = defaultdict(list)
        for entry in entries:
            key = key_func(entry)
            if key is not None:
                groups[key].append(entry)

        # Avoid groups with less than 2 entries
        return {key: group for key, group in groups.items() if len(group) >= 2}

    @staticmethod
    def _split_by_content(members: List[Entry]) -> List[List[Entry]]:
        """
        Splits a fingerprint partition into byte-identical subsets.
        Entries whose content cannot be compared end up alone and are dropped
        by the caller.
        """
        subsets: List[List[Entry]] = []
        for entry in members:
            for subset in subsets:
                try:
                    same = filecmp.cmp(subset[0].path, entry.path, shallow=False)
                except OSError as e:
                    logger.debug(f"Could not compare {entry.path}: {e}")
                    same = False
                if same:
                    subset.append(entry)
                    break
            else:
                subsets.append([entry])
        return subsets


class ZeroByteGrouper:
    """
    Filters zero-length files (never directories or the parent marker) and
    marks them as broken.
    """

    @staticmethod
    def is_eligible(entry: Entry) -> bool:
        return entry.size == 0 and not entry.is_directory and not entry.is_parent_marker

    def find_zero_byte_files(self, entries: List[Entry]) -> List[Entry]:
        found = [e for e in entries if self.is_eligible(e)]
        for entry in found:
            entry.is_broken = True
        logger.debug(f"Found {len(found)} zero-byte files")
        return found
