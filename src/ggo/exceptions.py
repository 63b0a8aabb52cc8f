"""ggo exception hierarchy.

All ggo-specific exceptions inherit from GgoError. Each carries the
structured fields it was raised with so callers can branch on kind
instead of parsing messages.
"""

from __future__ import annotations


class GgoError(Exception):
    """Base exception for all ggo errors."""


class NotARepositoryError(GgoError):
    """Raised when the working directory is not inside a git repository."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(
            "Not in a git repository\n\n"
            "Run this command from within a git repository."
        )


class BranchNotFoundError(GgoError):
    """Raised when a branch lookup fails."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__(
            f"Branch '{branch_name}' not found\n\n"
            f"Run 'git branch' to see available branches."
        )


class NoMatchingBranchesError(GgoError):
    """Raised when no branch matches a search pattern."""

    def __init__(self, pattern: str, *, fuzzy: bool = True) -> None:
        self.pattern = pattern
        self.fuzzy = fuzzy
        hints = [
            "Using a shorter pattern",
            "Running 'ggo --list \"\"' to see all branches",
            "Using case-insensitive mode with '-i'",
        ]
        if not fuzzy:
            hints.append("Enabling fuzzy matching (remove --no-fuzzy)")
        hint_str = "\n".join(f"  - {h}" for h in hints)
        super().__init__(f"No branches match pattern '{pattern}'\n\nTry:\n{hint_str}")


class InvalidNameError(GgoError):
    """Raised when a branch, alias, pattern or path fails validation."""

    KINDS = ("branch", "alias", "pattern", "path")

    def __init__(self, kind: str, value: str, reason: str) -> None:
        self.kind = kind
        self.value = value
        self.reason = reason
        label = {
            "branch": "branch name",
            "alias": "alias name",
            "pattern": "pattern",
            "path": "repository path",
        }.get(kind, kind)
        super().__init__(f"Invalid {label}: {value!r}\n\n{reason}")


class AliasStaleWarning(UserWarning):
    """Issued when an alias points at a branch that no longer exists.

    Not an error: resolution falls through to pattern matching.
    """

    def __init__(self, alias: str, target: str) -> None:
        self.alias = alias
        self.target = target
        super().__init__(
            f"Alias '{alias}' points to non-existent branch '{target}'. "
            f"Falling back to pattern matching."
        )


class StorageError(GgoError):
    """Raised when the usage store cannot complete an operation."""

    def __init__(self, cause: BaseException | str, *, message: str | None = None) -> None:
        self.cause = cause
        super().__init__(message or f"Database error: {cause}")


class MigrationError(StorageError):
    """Raised when a schema migration step fails. Fatal at startup."""

    def __init__(self, version: int, cause: BaseException | str) -> None:
        self.version = version
        super().__init__(
            cause, message=f"Schema migration to version {version} failed: {cause}"
        )


class CheckoutFailedError(GgoError):
    """Raised when git refuses to check out a branch."""

    def __init__(self, branch_name: str, reason: str) -> None:
        self.branch_name = branch_name
        self.reason = reason
        super().__init__(f"Failed to checkout branch '{branch_name}': {reason}")


class NoPreviousBranchError(GgoError):
    """Raised when 'ggo -' is used before any switch was recorded."""

    def __init__(self) -> None:
        super().__init__(
            "No previous branch found\n\n"
            "You need to switch branches at least once before using 'ggo -'"
        )


class AliasNotFoundError(GgoError):
    """Raised when an alias lookup in the current repository fails."""

    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(
            f"Alias '{alias}' not found in this repository\n\n"
            f"Run 'ggo alias --list' to see all aliases."
        )


class ConfigError(GgoError):
    """Raised when the configuration file cannot be read or parsed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(
            f"Configuration error: {reason}\n\n"
            f"Check your config file at ~/.config/ggo/config.toml"
        )


class UserCancelledError(GgoError):
    """Raised when the user aborts the interactive picker."""

    def __init__(self) -> None:
        super().__init__("User cancelled operation")
