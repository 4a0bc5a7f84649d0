from .store import ViewStore
from .config import ViewSettings
from .path import RootPath, SEP
from .tool import ToolRunner, CommandEvent
from .configspec import ConfigSpec, apply_config_spec
from .listing import DirectoryTree, DirectoryEntry, FileEntry, EntryKind, parse_line
from .copy import CopyReport, copy_local
from .exceptions import (
    ViewStoreError, ConfigurationError, ToolError, ToolTimeoutError, NotAvailableError,
)

__all__ = [
    "ViewStore", "ViewSettings", "RootPath", "SEP",
    "ToolRunner", "CommandEvent", "ConfigSpec", "apply_config_spec",
    "DirectoryTree", "DirectoryEntry", "FileEntry", "EntryKind", "parse_line",
    "CopyReport", "copy_local",
    "ViewStoreError", "ConfigurationError", "ToolError", "ToolTimeoutError", "NotAvailableError",
]
