"""
Release condition synthesis

Builds the derived "release" column used by release-dependent queries: the
event's release when it is among the most recent releases, "other" otherwise.
Limiting the set keeps release charts readable.
"""

from collections.abc import Sequence
from typing import Any

from dashquery.domain.constants import release_config


def _quote(value: str) -> str:
    return f"'{value}'"


def create_release_field_condition(
    versions: Sequence[str], limit: int = release_config.MAX_RECENT_RELEASES
) -> list[Any]:
    """
    Derived column expression bucketing releases outside the recent set.

    Args:
        versions: Release versions, most recent first
        limit: Number of releases kept

    Returns:
        ``conditionFields`` value for the Discover payload

    Example:
        >>> create_release_field_condition(["2.0", "1.9"])
        [['if', [['in', ['release', 'tuple', ["'2.0'", "'1.9'"]]], 'release', "'other'"], 'release']]
    """
    field = release_config.RELEASE_FIELD
    recent = [_quote(version) for version in list(versions)[:limit]]

    return [
        [
            "if",
            [
                ["in", [field, "tuple", recent]],
                field,
                _quote(release_config.OTHER_RELEASE),
            ],
            field,
        ]
    ]
