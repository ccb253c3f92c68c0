"""
Query Orchestration - Dependency gate, payload compiler, release conditions
and the execution registry (DiscoverQuery)
"""

from dashquery.orchestrator.dependency_gate import requires_releases, should_rebuild, should_rederive
from dashquery.orchestrator.discover_query import DiscoverQuery
from dashquery.orchestrator.payload import compile_payload, compute_rollup
from dashquery.orchestrator.release_conditions import create_release_field_condition

__all__ = [
    "DiscoverQuery",
    "compile_payload",
    "compute_rollup",
    "create_release_field_condition",
    "requires_releases",
    "should_rebuild",
    "should_rederive",
]
