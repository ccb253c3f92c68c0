"""
Discover Query Builder

A query builder holds one compiled Discover payload and runs it. Builders are
owned by the orchestrator: it creates one per widget query, re-arms them with
``reset()`` and cancels their in-flight requests on teardown.

Usage:
    builder = create_query_builder(payload, organization, client)
    result = await builder.fetch_without_limit()
    builder.cancel_requests()
"""

import asyncio
from typing import Any

import httpx

from dashquery.collectors.discover_rest_client import DiscoverRESTClient, get_discover_rest_client
from dashquery.core import get_logger
from dashquery.domain.constants import DEFAULT_STATS_PERIOD, query_defaults
from dashquery.domain.organization import Organization

logger = get_logger(__name__)


class QueryError(Exception):
    """Raised when a Discover query cannot be run or the server rejects it."""

    pass


def apply_defaults(query: dict[str, Any]) -> dict[str, Any]:
    """
    Fill in payload members the query left unset.

    Returns a new dict; the input is not modified.
    """
    query = dict(query)
    for key in query_defaults.LIST_KEYS:
        if query.get(key) is None:
            query[key] = []

    if query.get("orderby") is None:
        query["orderby"] = query_defaults.ORDERBY

    if not query.get("range") and not (query.get("start") and query.get("end")):
        query["range"] = DEFAULT_STATS_PERIOD

    return query


class QueryBuilder:
    """
    Live execution unit bound to one compiled payload.

    Attributes:
        organization: Organization the query runs against
        client: Network client used for requests
    """

    def __init__(self, initial: dict[str, Any], organization: Organization, client: DiscoverRESTClient):
        self.organization = organization
        self.client = client
        self._default_project_ids = organization.member_project_ids()
        self._pending: set[asyncio.Future] = set()
        self._query = apply_defaults(initial)

    @property
    def endpoint(self) -> str:
        return query_defaults.QUERY_ENDPOINT.format(slug=self.organization.slug)

    @property
    def has_pending_requests(self) -> bool:
        return bool(self._pending)

    def get_internal(self) -> dict[str, Any]:
        """Current payload as held by the builder"""
        return dict(self._query)

    def get_external(self) -> dict[str, Any]:
        """
        Payload as sent to the server.

        Falls back to the user's member projects when none are selected and to
        the default stats period when neither a range nor both bounds are set.
        Unset members are dropped.
        """
        query = self._query
        projects = query["projects"] or self._default_project_ids
        stats_range = query.get("range")
        if not stats_range and (not query.get("start") or not query.get("end")):
            stats_range = DEFAULT_STATS_PERIOD

        external = {**query, "projects": list(projects), "range": stats_range}
        return {key: value for key, value in external.items() if value is not None}

    def reset(self, query: dict[str, Any] | None = None) -> None:
        """
        Re-arm the builder with a new payload.

        Project ids the user is not a member of are dropped (only when the
        organization's projects are known).
        """
        query = dict(query or {})
        requested = list(query.get("projects") or [])

        if self.organization.projects is not None:
            valid = [project for project in requested if project in self._default_project_ids]
            invalid = [project for project in requested if project not in self._default_project_ids]
            if invalid:
                logger.warning(f"Dropping projects the user is not a member of: {invalid}")
            requested = valid

        query["projects"] = requested
        self._query = apply_defaults(query)

    async def fetch_without_limit(self, data: dict[str, Any] | None = None) -> Any:
        """
        Run the query without pagination.

        Args:
            data: Payload override (defaults to get_external())

        Returns:
            Parsed server response

        Raises:
            QueryError: If no projects are selected or the request fails
            asyncio.CancelledError: If cancel_requests() was called meanwhile
        """
        data = self.get_external() if data is None else data
        if not data.get("projects"):
            raise QueryError("No projects selected")

        task = asyncio.ensure_future(self.client.request(self.endpoint, data))
        self._pending.add(task)
        try:
            return await task
        except (httpx.HTTPError, ValueError) as e:
            raise QueryError("Error with query") from e
        finally:
            self._pending.discard(task)

    def cancel_requests(self) -> None:
        """Cancel every in-flight request of this builder"""
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()


def create_query_builder(
    query: dict[str, Any], organization: Organization, client: DiscoverRESTClient | None = None
) -> QueryBuilder:
    """
    Create a builder for a compiled payload.

    Args:
        query: Payload produced by the payload compiler
        organization: Organization the query runs against
        client: Network client (defaults to one built from configuration)
    """
    return QueryBuilder(query, organization, client or get_discover_rest_client())
