"""
Dependency gate

Decides whether queries wait for releases, whether an input change needs to be
looked at at all, and whether it needs builders rebuilt and refetched.
"""

from collections.abc import Iterable
from dataclasses import fields
from typing import Any

from dashquery.domain.query import QueryDescriptor, QueryProps

# Render-only inputs never trigger a refetch
ALWAYS_IGNORED_KEYS = ("display",)
RELEASE_KEYS = ("releases_loading", "releases")


def requires_releases(queries: Iterable[QueryDescriptor]) -> bool:
    """True if any query carries the recent releases constraint"""
    return any(query.requires_releases for query in queries)


def should_rederive(previous: QueryProps, current: QueryProps) -> bool:
    """
    Cheap pre-check run on every input change.

    Release-dependent queries react to a new releases list and to releases
    finishing loading. Otherwise only a new organization or selection object
    (identity, not equality) is considered a change.

    Orchestrator state changes never pass through here: DiscoverQuery notifies
    its listeners directly whenever its state changes.
    """
    if requires_releases(current.queries):
        if previous.releases != current.releases:
            return True
        if previous.releases_loading and not current.releases_loading:
            return True

    if previous.organization is current.organization and previous.selection is current.selection:
        return False

    return True


def comparison_key(props: QueryProps, include_releases: bool) -> dict[str, Any]:
    """Inputs that decide whether builders must be rebuilt"""
    ignored = set(ALWAYS_IGNORED_KEYS)
    if not include_releases:
        ignored.update(RELEASE_KEYS)
    return {field.name: getattr(props, field.name) for field in fields(props) if field.name not in ignored}


def should_rebuild(previous: QueryProps, current: QueryProps) -> bool:
    """
    Deep comparison of inputs, ignoring render-only data and, unless the
    current queries need them, the releases inputs.
    """
    include_releases = requires_releases(current.queries)
    return comparison_key(previous, include_releases) != comparison_key(current, include_releases)
