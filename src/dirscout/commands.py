"""
Unified command orchestrator for guarded deletion.
This is the SINGLE entry point for destructive actions — used by the session and the CLI.
"""
import logging
import os
from typing import Callable, Optional

from dirscout.core.models import Entry, DeletionResult, DeletionVerdict
from dirscout.core.safety import DeletionSafetyGuard
from dirscout.services.deletion_service import DeletionService

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[DeletionVerdict, str], bool]


class DeleteCommand:
    """
    Orchestrates a checked delete:
    1. Evaluate the path with DeletionSafetyGuard
    2. Stop on any blocked verdict (no override exists)
    3. Ask the caller to confirm, passing the verdict and its message
    4. Remove the file or directory with DeletionService (symlinks are unlinked, never followed)

    Usage:
        command = DeleteCommand()
        result = command.execute(entry, recursive=True, confirm=ask_user)
        if not result:
            show_error(result.message)
    """

    def __init__(self, guard: DeletionSafetyGuard = None, service: DeletionService = None):
        self.guard = guard or DeletionSafetyGuard()
        self.service = service or DeletionService()

    def check(self, entry: Entry) -> DeletionVerdict:
        return self.guard.evaluate(entry.path)

    def execute(
            self,
            entry: Entry,
            recursive: bool = False,
            confirm: Optional[ConfirmCallback] = None
    ) -> DeletionResult:
        """
        Args:
            entry: Entry to delete
            recursive: Remove non-empty directories with their contents
            confirm: (verdict, message) -> bool; without it nothing is deleted

        Returns:
            DeletionResult carrying the verdict that was evaluated
        """
        if entry.is_parent_marker:
            return DeletionResult(False, f"Cannot delete parent entry: {entry.path}")

        verdict = self.check(entry)
        message = self.guard.describe(verdict, entry.path)

        if verdict.is_blocked:
            logger.info(message)
            return DeletionResult(False, message, verdict=verdict)

        if confirm is None or not confirm(verdict, message):
            return DeletionResult(False, f"Deletion cancelled: {entry.path}", verdict=verdict)

        if entry.is_directory and not os.path.islink(entry.path):
            result = self.service.delete_directory(entry, recursive=recursive)
        else:
            result = self.service.delete_file(entry)

        result.verdict = verdict
        return result
