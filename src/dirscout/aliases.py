from enum import Enum
from typing import Dict, Tuple

from dirscout.core.hasher import HASH_ALGORITHMS


class Action(Enum):
    """Everything the interactive browser can do."""
    OPEN = "open"
    UP = "up"
    RESCAN = "rescan"
    TOGGLE_RECURSIVE = "toggle-recursive"
    DUPLICATES = "duplicates"
    ZERO_BYTES = "zero-bytes"
    RESTORE = "restore"
    DELETE = "delete"
    DELETE_RECURSIVE = "delete-recursive"
    HELP = "help"
    QUIT = "quit"

    @property
    def takes_index(self) -> bool:
        return self in (Action.OPEN, Action.DELETE, Action.DELETE_RECURSIVE)


# (shortcut, label) per action; built once and handed to the browser
ACTION_TABLE: Dict[Action, Tuple[str, str]] = {
    Action.OPEN: ("o", "Open directory <n>"),
    Action.UP: ("u", "Go to parent directory"),
    Action.RESCAN: ("s", "Rescan"),
    Action.TOGGLE_RECURSIVE: ("R", "Toggle recursive scan"),
    Action.DUPLICATES: ("d", "Show duplicates"),
    Action.ZERO_BYTES: ("z", "Show zero-byte files"),
    Action.RESTORE: ("a", "Show all entries again"),
    Action.DELETE: ("x", "Delete entry <n>"),
    Action.DELETE_RECURSIVE: ("X", "Delete directory <n> with contents"),
    Action.HELP: ("?", "Help"),
    Action.QUIT: ("q", "Quit"),
}

HASH_CHOICES = list(HASH_ALGORITHMS.keys())

HASH_HELP_TEXT = (
    "Fingerprint algorithm for duplicate detection:\n"
    "  fnv1a : 64-bit FNV-1a (default), pure Python at a few MB/s\n"
    "  xxh64 : 64-bit xxHash, native code; use it for large recursive scans\n"
)

EPILOG_TEXT = """
Examples:
  List a directory (directories first, then files)
  %(prog)s ~/Downloads

  Find duplicates in the whole tree, confirming matches byte by byte
  %(prog)s ~/Downloads -r --duplicates --confirm-content

  List zero-byte files
  %(prog)s ~/Downloads -r --zero-bytes

  Delete a directory with its contents (asks for confirmation)
  %(prog)s --delete ~/Downloads/old --recursive-delete

  Browse interactively
  %(prog)s ~/Downloads --browse

Deletion is permanent. System paths, your home directory, virtual filesystems
and mount points can never be deleted.
"""
