"""ggo: jump to git branches by pattern, ranked by frecency.

Branches you switch to often and recently float to the top; fuzzy
matching finds them from a few typed characters.
"""

from ggo._version import __version__

# Core entry points
from ggo.navigator import Navigator, StatsReport, SwitchResult
from ggo.store import UsageStore

# Value types
from ggo.models.records import AliasInfo, DatabaseStats, ScoredBranch, UsageRecord

# Configuration
from ggo.models.config import (
    BehaviorConfig,
    FrecencyConfig,
    GgoConfig,
    default_config_dir,
    default_db_path,
    load_config,
    save_config,
)

# Ranking
from ggo.frecency import format_relative_time, rank_branches, score, sort_by_frecency
from ggo.matcher import FuzzyMatcher, MatchResult, SubstringMatcher, fuzzy_score, get_matcher
from ggo.selection import NeedsInteractiveChoice, Resolved, combined_score, fuse_scores, select_branch
from ggo.aliases import AliasResolver

# Collaborators
from ggo.protocols import BranchPicker, GitBackend
from ggo.git import SubprocessGit

# Exceptions
from ggo.exceptions import (
    AliasNotFoundError,
    AliasStaleWarning,
    BranchNotFoundError,
    CheckoutFailedError,
    ConfigError,
    GgoError,
    InvalidNameError,
    MigrationError,
    NoMatchingBranchesError,
    NoPreviousBranchError,
    NotARepositoryError,
    StorageError,
    UserCancelledError,
)

__all__ = [
    "__version__",
    "Navigator",
    "StatsReport",
    "SwitchResult",
    "UsageStore",
    # Value types
    "AliasInfo",
    "DatabaseStats",
    "ScoredBranch",
    "UsageRecord",
    # Configuration
    "BehaviorConfig",
    "FrecencyConfig",
    "GgoConfig",
    "default_config_dir",
    "default_db_path",
    "load_config",
    "save_config",
    # Ranking
    "format_relative_time",
    "rank_branches",
    "score",
    "sort_by_frecency",
    "FuzzyMatcher",
    "MatchResult",
    "SubstringMatcher",
    "fuzzy_score",
    "get_matcher",
    "NeedsInteractiveChoice",
    "Resolved",
    "combined_score",
    "fuse_scores",
    "select_branch",
    "AliasResolver",
    # Collaborators
    "BranchPicker",
    "GitBackend",
    "SubprocessGit",
    # Exceptions
    "AliasNotFoundError",
    "AliasStaleWarning",
    "BranchNotFoundError",
    "CheckoutFailedError",
    "ConfigError",
    "GgoError",
    "InvalidNameError",
    "MigrationError",
    "NoMatchingBranchesError",
    "NoPreviousBranchError",
    "NotARepositoryError",
    "StorageError",
    "UserCancelledError",
]
