"""
Data Collectors - Fetch Discover data for dashboard widgets

This package contains:
    - DiscoverRESTClient: authenticated Discover API access with retries
    - QueryBuilder: one live, cancellable Discover query
    - load_teams_for_user: the user's teams with their projects
"""

__all__ = []
