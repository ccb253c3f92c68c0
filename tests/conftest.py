"""
Pytest configuration and shared fixtures

Provides organizations, selections, releases and a controllable query builder
factory for orchestrator tests.
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Make the dashquery package importable without installation
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from dashquery.domain import (  # noqa: E402
    DateTimeSelection,
    Organization,
    Project,
    QueryDescriptor,
    QueryProps,
    Release,
    SelectionContext,
    Team,
)

# ===== Fake Query Builders =====


class FakeQueryBuilder:
    """
    Query builder double.

    Each builder owns one future; ``fetch_without_limit`` awaits it. Tests
    resolve or fail it to control completion order. ``cancel_requests`` only
    records the call, like a request whose cancellation arrives late.
    """

    def __init__(self, query, organization, client=None):
        self.query = dict(query)
        self.organization = organization
        self.client = client
        self.future = asyncio.get_running_loop().create_future()
        self.fetch_count = 0
        self.cancelled = False
        self.reset_calls = []

    def get_internal(self):
        return dict(self.query)

    def reset(self, query):
        self.reset_calls.append(query)
        self.query = dict(query)

    async def fetch_without_limit(self):
        self.fetch_count += 1
        return await self.future

    def cancel_requests(self):
        self.cancelled = True

    def resolve(self, data):
        self.future.set_result(data)

    def fail(self, error):
        self.future.set_exception(error)


class FakeBuilderFactory:
    """Records every builder; resolves fetches immediately when ``auto`` is set"""

    def __init__(self):
        self.created = []
        self.auto = True

    def __call__(self, query, organization, client=None):
        builder = FakeQueryBuilder(query, organization, client)
        if self.auto:
            builder.resolve({"data": [{"name": query.get("name")}]})
        self.created.append(builder)
        return builder


@pytest.fixture
def builder_factory():
    """Factory creating FakeQueryBuilder instances that resolve immediately"""
    return FakeBuilderFactory()


@pytest.fixture
def manual_builder_factory():
    """Factory creating FakeQueryBuilder instances resolved by the test"""
    factory = FakeBuilderFactory()
    factory.auto = False
    return factory


# ===== Domain Fixtures =====


@pytest.fixture
def sample_teams():
    """Teams of the sample organization (user is a member of "frontend")"""
    return [
        Team(id="10", slug="frontend", is_member=True),
        Team(id="11", slug="backend", is_member=False),
    ]


@pytest.fixture
def sample_organization(sample_teams):
    """Organization with two member projects and one non-member project"""
    frontend, backend = sample_teams
    return Organization(
        slug="acme",
        id="1",
        projects=[
            Project(id="1", slug="web", is_member=True, teams=[frontend]),
            Project(id="2", slug="mobile", is_member=True, teams=[frontend, backend]),
            Project(id="3", slug="billing", is_member=False, teams=[backend]),
        ],
        teams=sample_teams,
    )


@pytest.fixture
def selection_14d():
    """Selection over the last 14 days on project 1"""
    return SelectionContext(datetime=DateTimeSelection(period="14d"), projects=[1], environments=["prod"])


@pytest.fixture
def sample_releases():
    """Three releases, most recent first"""
    return (Release(version="3.0.0"), Release(version="2.1.0"), Release(version="2.0.0"))


@pytest.fixture
def count_query():
    """Plain query without release dependency"""
    return QueryDescriptor(name="events", fields=["count"])


@pytest.fixture
def release_query():
    """Release-dependent query"""
    return QueryDescriptor(
        name="releases",
        aggregations=[["count()", None, "count"]],
        groupby=["time", "release"],
        constraints=("recentReleases",),
        rollup=True,
    )


@pytest.fixture
def make_props(sample_organization, selection_14d):
    """Build QueryProps with the sample organization and selection by default"""

    def _make(**overrides):
        values = {"organization": sample_organization, "selection": selection_14d}
        values.update(overrides)
        if "queries" in values:
            values["queries"] = tuple(values["queries"])
        return QueryProps(**values)

    return _make
