"""Shared constants for ggo.

Time windows are used by relative-time formatting; scoring and
validation limits are used by the ranking engine and validators.
"""

from __future__ import annotations

# Time windows (seconds)
HOUR_SECONDS = 3600
DAY_SECONDS = 86400
WEEK_SECONDS = 604800
MONTH_SECONDS = 2592000  # 30 days

# Scoring
DEFAULT_HALF_LIFE_SECONDS: float = float(WEEK_SECONDS)
FRECENCY_MULTIPLIER: float = 10.0
DEFAULT_AUTO_SELECT_THRESHOLD: float = 2.0

# Validation limits
MAX_BRANCH_NAME_LENGTH = 255
MAX_PATTERN_LENGTH = 255
MAX_ALIAS_LENGTH = 50
MAX_REPO_PATH_LENGTH = 4096

RESERVED_ALIAS_NAMES: frozenset[str] = frozenset({"stats", "alias", "list", "remove", "cleanup"})

# Maintenance
DEFAULT_CLEANUP_AGE_DAYS = 365
