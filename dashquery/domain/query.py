"""
Domain models for dashboard Discover queries

Provides the records that flow through the orchestrator:
    - QueryDescriptor: Declarative description of one widget query
    - DateTimeSelection / SelectionContext: Global selection (time range, filters)
    - Release / ComparisonPeriod: Auxiliary inputs
    - QueryProps: Everything the orchestrator is given for one render
    - QueryOutcome / OrchestratorState / QueryState: What it exposes back
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from dashquery.domain.constants import RECENT_RELEASES
from dashquery.domain.organization import Organization


@dataclass(frozen=True)
class QueryDescriptor:
    """
    Caller-supplied description of a single Discover query.

    Members left as None are omitted from the compiled payload so query builder
    defaults apply to them.

    Attributes:
        fields: Columns to select
        conditions: Filter conditions, e.g. [["environment", "=", "prod"]]
        aggregations: Aggregate expressions, e.g. [["count()", None, "count"]]
        groupby: Columns to group by
        orderby: Sort key
        name: Display name of the query
        constraints: Symbolic requirements such as "recentReleases"
        rollup: Request interval-bucketed results (value is recomputed at compile time)
        condition_fields: Derived columns (set by the orchestrator for release queries)
        extra: Any other payload keys, passed through unchanged
    """

    fields: list[str] | None = None
    conditions: list[Any] | None = None
    aggregations: list[Any] | None = None
    groupby: list[str] | None = None
    orderby: str | None = None
    name: str | None = None
    constraints: tuple[str, ...] = ()
    rollup: int | bool | None = None
    condition_fields: list[Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def requires_releases(self) -> bool:
        """True when this query must wait for the recent releases list"""
        return RECENT_RELEASES in (self.constraints or ())

    def to_query(self) -> dict[str, Any]:
        """Payload keys of this descriptor (constraints are never sent)"""
        query: dict[str, Any] = dict(self.extra)
        members = {
            "name": self.name,
            "fields": self.fields,
            "conditions": self.conditions,
            "aggregations": self.aggregations,
            "groupby": self.groupby,
            "orderby": self.orderby,
            "rollup": self.rollup,
            "conditionFields": self.condition_fields,
        }
        for key, value in members.items():
            if value is not None:
                query[key] = list(value) if isinstance(value, (list, tuple)) else value
        return query

    def with_release_condition(self, condition_fields: list[Any]) -> "QueryDescriptor":
        """Copy selecting no plain fields, only the derived release column"""
        return replace(self, fields=[], condition_fields=condition_fields)


@dataclass(frozen=True)
class DateTimeSelection:
    """
    Datetime part of the global selection.

    Either a relative ``period`` ("24h", "14d", ...) or an absolute
    ``start``/``end`` pair. A relative period takes precedence.
    """

    period: str | None = None
    start: datetime | str | None = None
    end: datetime | str | None = None
    utc: bool | None = None

    @property
    def is_empty(self) -> bool:
        return not self.period and not self.start and not self.end


@dataclass(frozen=True)
class SelectionContext:
    """
    Global selection supplied by the dashboard.

    Only ``datetime`` is interpreted; the remaining members are merged into
    every payload as filters.
    """

    datetime: DateTimeSelection = field(default_factory=DateTimeSelection)
    projects: list[int] = field(default_factory=list)
    environments: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def filters(self) -> dict[str, Any]:
        """Every selection member except ``datetime``"""
        return {
            **self.extra,
            "projects": list(self.projects),
            "environments": list(self.environments),
        }


@dataclass(frozen=True)
class Release:
    """A release of the organization's projects; ``version`` identifies it"""

    version: str
    date_created: str | None = None


@dataclass(frozen=True)
class ComparisonPeriod:
    """Explicit bounds replacing the period derived from the selection"""

    start: str
    end: str

    def as_dict(self) -> dict[str, str]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class QueryProps:
    """
    Complete set of orchestrator inputs.

    Replaced wholesale on every change. ``display`` is render-only data owned by
    the widget and never triggers a refetch.
    """

    organization: Organization
    selection: SelectionContext
    queries: tuple[QueryDescriptor, ...] = ()
    releases: tuple[Release, ...] | None = None
    releases_loading: bool = False
    include_previous_period: bool = False
    compare_to_period: ComparisonPeriod | None = None
    display: Any = None

    @property
    def release_versions(self) -> list[str]:
        return [release.version for release in self.releases or ()]


@dataclass(frozen=True)
class QueryOutcome:
    """
    Settled result of one query in a fetch cycle.

    Exactly one of ``data`` / ``error`` is meaningful; check ``ok``.
    """

    data: Any = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class OrchestratorState:
    """
    Internal state of the orchestrator.

    ``reloading`` is None before the first cycle; ``results`` is None until a
    cycle settles.
    """

    reloading: bool | None = None
    results: tuple[QueryOutcome, ...] | None = None


@dataclass(frozen=True)
class QueryState:
    """Snapshot handed to consumers: payloads, loading flag and results"""

    queries: tuple[dict[str, Any], ...]
    reloading: bool | None
    results: tuple[QueryOutcome, ...] | None
