"""
Domain Models - Query descriptors, selection and organization records

Exports:
    - QueryDescriptor, DateTimeSelection, SelectionContext
    - Release, ComparisonPeriod, QueryProps
    - QueryOutcome, OrchestratorState, QueryState
    - Organization, Project, Team
"""

from dashquery.domain.organization import Organization, Project, Team
from dashquery.domain.query import (
    ComparisonPeriod,
    DateTimeSelection,
    OrchestratorState,
    QueryDescriptor,
    QueryOutcome,
    QueryProps,
    QueryState,
    Release,
    SelectionContext,
)

__all__ = [
    "ComparisonPeriod",
    "DateTimeSelection",
    "OrchestratorState",
    "Organization",
    "Project",
    "QueryDescriptor",
    "QueryOutcome",
    "QueryProps",
    "QueryState",
    "Release",
    "SelectionContext",
    "Team",
]
