"""
Dashboard Discover Queries - Orchestration Layer

This package compiles dashboard widget query descriptors into live Discover
queries, decides when they must be re-run, and aggregates their results.

Package Structure:
    - core: Infrastructure (config, logging)
    - domain: Domain models (descriptors, selection, releases, organizations)
    - collectors: Network access (REST client, query builders, team loading)
    - orchestrator: Dependency gate, payload compiler and execution registry
    - utils: Datetime periods, error handling, team/project joins
"""

__version__ = "1.0.0"
__author__ = "Dashboards Team"
