#!/usr/bin/env python3
"""
dirscout CLI — command line front end for the scanning core.
Lists directories, shows duplicate and zero-byte files, and performs guarded deletion.
Deletion is permanent: every target passes the safety guard and a confirmation first.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import Callable, Dict, List, NoReturn, Optional, Tuple
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from dirscout.aliases import (
    Action, ACTION_TABLE,
    HASH_CHOICES, HASH_HELP_TEXT, EPILOG_TEXT
)
from dirscout.commands import DeleteCommand
from dirscout.core.grouper import DuplicateGrouper
from dirscout.core.hasher import HASH_ALGORITHMS, HasherImpl
from dirscout.core.models import DeletionVerdict, DuplicateGroup, Entry
from dirscout.core.scanner import DirectoryWalkerImpl
from dirscout.session import BrowsingSession
from dirscout.utils.convert_utils import ConvertUtils


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self, actions: Dict[Action, Tuple[str, str]] = None):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.actions = actions or ACTION_TABLE
        self.shortcuts = {shortcut: action for action, (shortcut, _label) in self.actions.items()}

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dirscout",
            description="dirscout — directory scanner with duplicate detection and guarded deletion",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "path",
            nargs="?",
            default=".",
            help="Directory to scan. Default: current directory"
        )

        # Scan options
        parser.add_argument(
            "--recursive", "-r",
            action="store_true",
            help="Scan the whole subtree instead of direct children"
        )
        parser.add_argument(
            "--no-parent",
            action="store_true",
            help="Do not list the '..' entry"
        )
        parser.add_argument(
            "--hash",
            choices=HASH_CHOICES,
            default="fnv1a",
            type=str,
            help=HASH_HELP_TEXT
        )

        # Views
        view = parser.add_mutually_exclusive_group()
        view.add_argument(
            "--duplicates", "-d",
            action="store_true",
            help="Show groups of files with identical content and the space they waste"
        )
        view.add_argument(
            "--zero-bytes", "-z",
            action="store_true",
            dest="zero_bytes",
            help="Show zero-byte files"
        )
        view.add_argument(
            "--browse", "-b",
            action="store_true",
            help="Interactive browser"
        )
        parser.add_argument(
            "--confirm-content",
            action="store_true",
            help="Confirm fingerprint matches with a byte-by-byte comparison"
        )

        # Actions
        parser.add_argument(
            "--delete",
            nargs="+",
            default=[],
            type=str,
            metavar="TARGET",
            help="Permanently delete files or directories (space separated), after safety checks"
        )
        parser.add_argument(
            "--recursive-delete",
            action="store_true",
            help="Allow --delete to remove non-empty directories with their contents"
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompts for --delete (for automation/scripts)"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.delete:
            self.error_exit("--force can only be used with --delete")

        if args.recursive_delete and not args.delete:
            self.error_exit("--recursive-delete can only be used with --delete")

        if args.delete and (args.duplicates or args.zero_bytes or args.browse):
            self.error_exit("--delete cannot be combined with a view option")

        # Prevent interactive confirmation in non-TTY environments
        if (args.delete and not args.force) or args.browse:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        if not args.delete:
            if not os.path.exists(args.path):
                self.error_exit(f"Directory not found: {args.path}")
            if not os.path.isdir(args.path):
                self.error_exit(f"Path is not a directory: {args.path}")

    def create_session(self, args: argparse.Namespace) -> BrowsingSession:
        hasher = HasherImpl(HASH_ALGORITHMS[args.hash]())
        return BrowsingSession(
            path=os.path.abspath(args.path),
            recursive=args.recursive,
            include_parent_marker=not args.no_parent,
            walker=DirectoryWalkerImpl(hasher),
            duplicate_grouper=DuplicateGrouper(confirm_content=args.confirm_content),
        )

    def progress_callback(self, count: int) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return
        sys.stderr.write(f"\r  [scanning] {count} entries processed...")
        sys.stderr.flush()

    # =============================
    # Output
    # =============================

    @staticmethod
    def format_entry(index: int, entry: Entry) -> str:
        size = "" if entry.is_directory else ConvertUtils.bytes_to_human(entry.size)
        return f"{index:>5} {entry.category.marker} {entry.display_name:<48} {size:>10}"

    def output_listing(self, entries: List[Entry]) -> None:
        if self.quiet:
            return
        for index, entry in enumerate(entries):
            print(self.format_entry(index, entry))
        files = sum(1 for e in entries if not e.is_directory)
        dirs = sum(1 for e in entries if e.is_directory and not e.is_parent_marker)
        print(f"\n{dirs} directories, {files} files")

    def output_duplicates(self, groups: List[DuplicateGroup]) -> None:
        if not groups:
            print("No duplicate groups found.")
            return

        if not self.quiet:
            total_files = sum(g.member_count for g in groups)
            print(f"\nFound {len(groups)} duplicate groups ({total_files} files)")

            for idx, group in enumerate(groups, 1):
                size_str = ConvertUtils.bytes_to_human(group.size)
                wasted_str = ConvertUtils.bytes_to_human(group.wasted_bytes)
                print(f"\n📁 Group {idx} | {group.fingerprint} | Size: {size_str} "
                      f"| Files: {group.member_count} | Wasted: {wasted_str}")
                for entry in group.members:
                    print(f"   {entry.path}")

        total = DuplicateGrouper.total_wasted_space(groups)
        print(f"\nTotal wasted space: {ConvertUtils.bytes_to_human(total)}")

    def output_zero_bytes(self, entries: List[Entry]) -> None:
        if not self.quiet:
            for entry in entries:
                print(f"⚠️  Possibly defective (0 bytes): {entry.path}")
        print(f"Zero-byte files: {len(entries)}")

    # =============================
    # Deletion
    # =============================

    def confirm_deletion(self, force: bool = False) -> Callable[[DeletionVerdict, str], bool]:
        """Builds the confirmation callback handed to DeleteCommand."""
        def confirm(verdict: DeletionVerdict, message: str) -> bool:
            if verdict.is_warning:
                print(f"⚠️  WARNING: {message}")
            if force:
                return True
            response = input("Delete permanently? This cannot be undone. [y/N]: ")
            return response.strip().lower() in ("y", "yes")
        return confirm

    def report_deletion(self, result) -> None:
        if result.success:
            if not self.quiet:
                print(f"✅ {result.message}")
        elif result.verdict is not None and result.verdict.is_blocked:
            print(f"❌ {result.message}", file=sys.stderr)
        else:
            self.warning(result.message)

    def execute_delete(self, targets: List[str], recursive: bool = False, force: bool = False) -> int:
        """Runs a checked delete per target. Returns the number of targets not deleted."""
        command = DeleteCommand()
        confirm = self.confirm_deletion(force)
        failures = 0

        for target in targets:
            if not os.path.lexists(target):
                self.warning(f"Not found: {target}")
                failures += 1
                continue

            entry = Entry.from_path(os.path.abspath(target))
            result = command.execute(entry, recursive=recursive, confirm=confirm)
            self.report_deletion(result)
            if not result.success:
                failures += 1

        return failures

    # =============================
    # Interactive browser
    # =============================

    def parse_command(self, line: str) -> Tuple[Optional[Action], Optional[int]]:
        """Maps 'x 3' style input to (Action, index); unknown input gives (None, None)."""
        parts = line.strip().split()
        if not parts:
            return None, None
        action = self.shortcuts.get(parts[0])
        if action is None and parts[0].isdigit():
            return Action.OPEN, int(parts[0])
        if action is None:
            return None, None
        if action.takes_index:
            if len(parts) < 2 or not parts[1].isdigit():
                return None, None
            return action, int(parts[1])
        return action, None

    def print_help(self) -> None:
        for action, (shortcut, label) in self.actions.items():
            print(f"  {shortcut:<3} {label}")

    def browse(self, session: BrowsingSession) -> None:
        session.scan(self.progress_callback)
        while True:
            mode = "recursive" if session.params.recursive else "flat"
            print(f"\n{session.path} ({mode})")
            self.output_listing(session.entries)
            try:
                line = input("dirscout> ")
            except EOFError:
                return

            action, index = self.parse_command(line)
            if action is None:
                self.print_help()
                continue
            if action is Action.QUIT:
                return

            try:
                self.dispatch(session, action, index)
            except (IndexError, ValueError) as e:
                self.warning(str(e))

    def dispatch(self, session: BrowsingSession, action: Action, index: Optional[int] = None) -> None:
        if action is Action.OPEN:
            session.enter(index)
        elif action is Action.UP:
            session.change_directory(os.path.dirname(session.path) or session.path)
        elif action is Action.RESCAN:
            session.scan(self.progress_callback)
        elif action is Action.TOGGLE_RECURSIVE:
            session.set_recursive(not session.params.recursive)
            session.scan(self.progress_callback)
        elif action is Action.DUPLICATES:
            groups = session.show_duplicates()
            print(f"{len(groups)} duplicate groups, "
                  f"{ConvertUtils.bytes_to_human(session.total_wasted_space())} wasted")
        elif action is Action.ZERO_BYTES:
            found = session.show_zero_byte_files()
            print(f"{len(found)} zero-byte files")
        elif action is Action.RESTORE:
            session.restore()
        elif action in (Action.DELETE, Action.DELETE_RECURSIVE):
            result = session.delete(
                index,
                recursive=(action is Action.DELETE_RECURSIVE),
                confirm=self.confirm_deletion(),
            )
            self.report_deletion(result)
        elif action is Action.HELP:
            self.print_help()

    # =============================
    # Misc
    # =============================

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> int:
        """Main entry point with conditional output behavior. Returns the exit code."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        self.validate_args(args)

        if args.delete:
            failures = self.execute_delete(args.delete, recursive=args.recursive_delete, force=args.force)
            return 1 if failures else 0

        with self.create_session(args) as session:
            if args.browse:
                self.browse(session)
                return 0

            if not self.quiet:
                print(f"Scanning directory: {session.path}")
            session.scan(self.progress_callback)
            if self.verbose:
                sys.stderr.write("\n")

            if args.duplicates:
                self.output_duplicates(session.show_duplicates())
            elif args.zero_bytes:
                self.output_zero_bytes(session.show_zero_byte_files())
            else:
                self.output_listing(session.entries)

        if self.verbose:
            print(f"\n✅ Completed in {time.time() - self.start_time:.2f} seconds")
        return 0


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        sys.exit(app.run())
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
