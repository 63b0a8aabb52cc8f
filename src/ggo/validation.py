"""Input validators for branch names, aliases, patterns and repository paths.

Each validator returns None on success and raises InvalidNameError with
a human-readable reason otherwise. Callers run them before any mutation.
"""

from __future__ import annotations

from pathlib import Path

from ggo.constants import (
    MAX_ALIAS_LENGTH,
    MAX_BRANCH_NAME_LENGTH,
    MAX_PATTERN_LENGTH,
    MAX_REPO_PATH_LENGTH,
    RESERVED_ALIAS_NAMES,
)
from ggo.exceptions import InvalidNameError

_CONTROL_CHARS = ("\0", "\n", "\r")


def validate_branch_name(name: str) -> None:
    """Reject names git itself would refuse or that parse as revision syntax."""

    def fail(reason: str) -> None:
        raise InvalidNameError("branch", name, reason)

    if not name:
        fail("Branch name cannot be empty")
    if len(name) > MAX_BRANCH_NAME_LENGTH:
        fail(f"Branch name too long (max {MAX_BRANCH_NAME_LENGTH} characters)")
    if any(c in name for c in _CONTROL_CHARS):
        fail("Branch name contains invalid characters (null, newline, or carriage return)")
    if name.startswith("-"):
        fail("Branch name cannot start with '-' (conflicts with git flags)")
    if name.startswith("."):
        fail("Branch name cannot start with '.'")
    if ".." in name:
        fail("Branch name cannot contain '..'")
    if name.endswith("/"):
        fail("Branch name cannot end with '/'")
    if name.endswith("."):
        fail("Branch name cannot end with '.'")
    if "//" in name:
        fail("Branch name cannot contain '//'")
    if " " in name:
        fail("Branch name cannot contain spaces")
    if "@{" in name:
        fail("Branch name cannot contain '@{' (git revision syntax)")
    for char in ("~", "^", ":"):
        if char in name:
            fail(f"Branch name cannot contain '{char}' (git revision syntax)")
    if any(c in name for c in "?*["):
        fail("Branch name cannot contain wildcards (?, *, [)")


def validate_alias_name(alias: str) -> None:
    def fail(reason: str) -> None:
        raise InvalidNameError("alias", alias, reason)

    if not alias:
        fail("Alias name cannot be empty")
    if len(alias) > MAX_ALIAS_LENGTH:
        fail(f"Alias name too long (max {MAX_ALIAS_LENGTH} characters)")
    if alias.startswith("-"):
        fail("Alias name cannot start with '-' (conflicts with command flags)")
    if alias in RESERVED_ALIAS_NAMES:
        fail(f"Alias name '{alias}' is reserved and cannot be used")
    if not all(c.isalnum() or c in "-_" for c in alias):
        fail("Alias name must contain only alphanumeric characters, dash (-), or underscore (_)")


def validate_pattern(pattern: str) -> None:
    """Patterns may be empty (matches everything) but not oversized or NUL-bearing."""
    if len(pattern) > MAX_PATTERN_LENGTH:
        raise InvalidNameError(
            "pattern", pattern, f"Search pattern too long (max {MAX_PATTERN_LENGTH} characters)"
        )
    if "\0" in pattern:
        raise InvalidNameError("pattern", pattern, "Search pattern contains null bytes")


def validate_repo_path(path: str) -> None:
    def fail(reason: str) -> None:
        raise InvalidNameError("path", path, reason)

    if not path:
        fail("Repository path cannot be empty")
    if len(path) > MAX_REPO_PATH_LENGTH:
        fail(f"Repository path too long (max {MAX_REPO_PATH_LENGTH} characters)")
    if "\0" in path:
        fail("Repository path contains null bytes")

    path_obj = Path(path)
    if not path_obj.is_absolute():
        fail("Repository path must be absolute (got relative path)")
    if not path_obj.exists():
        fail(f"Repository path does not exist: {path}")
    if not path_obj.is_dir():
        fail(f"Repository path is not a directory: {path}")
