#!/usr/bin/env python3
"""
Application Constants

Centralized constants for Discover queries, release conditions and rollup
intervals. Provides immutable configuration values used across the
orchestrator and the query builders.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ReleaseConditionConfig:
    """
    Release-dependent query constants.

    Attributes:
        MAX_RECENT_RELEASES: Releases kept in the derived release column (keeps charts readable)
        RECENT_RELEASES_CONSTRAINT: Descriptor constraint marking a query as release-dependent
        OTHER_RELEASE: Literal substituted for releases outside the recent set
        RELEASE_FIELD: Event column holding the release version

    Example:
        >>> release_config.MAX_RECENT_RELEASES
        20
    """

    MAX_RECENT_RELEASES: int = 20
    """Releases kept in the derived release column"""

    RECENT_RELEASES_CONSTRAINT: str = "recentReleases"
    """Descriptor constraint marking a query as release-dependent"""

    OTHER_RELEASE: str = "other"
    """Bucket for every release outside the recent set"""

    RELEASE_FIELD: str = "release"
    """Event column holding the release version"""


@dataclass(frozen=True)
class PeriodConfig:
    """
    Stats period and rollup interval constants.

    Attributes:
        DEFAULT_STATS_PERIOD: Relative period used when the selection has none
        ONE_HOUR_MINUTES: Below this range the finest interval is used
        TWENTY_FOUR_HOURS_MINUTES: Above this range the coarsest interval is used
        UTC_DATE_FORMAT: Wire format of absolute start/end bounds
    """

    DEFAULT_STATS_PERIOD: str = "14d"
    ONE_HOUR_MINUTES: int = 60
    TWENTY_FOUR_HOURS_MINUTES: int = 24 * 60
    UTC_DATE_FORMAT: str = "%Y-%m-%dT%H:%M:%S"


@dataclass(frozen=True)
class QueryDefaultsConfig:
    """
    Defaults applied by query builders to every Discover payload.

    Attributes:
        ORDERBY: Default sort (newest first)
        LIST_KEYS: Keys defaulting to an empty list
        QUERY_ENDPOINT: Discover query endpoint template
    """

    ORDERBY: str = "-timestamp"
    LIST_KEYS: tuple[str, ...] = ("fields", "conditions", "aggregations", "projects")
    QUERY_ENDPOINT: str = "/organizations/{slug}/discover/query/"
    USER_TEAMS_ENDPOINT: str = "/organizations/{slug}/user-teams/"


release_config = ReleaseConditionConfig()
period_config = PeriodConfig()
query_defaults = QueryDefaultsConfig()

MAX_RECENT_RELEASES = release_config.MAX_RECENT_RELEASES
DEFAULT_STATS_PERIOD = period_config.DEFAULT_STATS_PERIOD
RECENT_RELEASES = release_config.RECENT_RELEASES_CONSTRAINT
