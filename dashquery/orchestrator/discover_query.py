#!/usr/bin/env python3
"""
Discover Query Orchestrator

Owns the query builders of one dashboard widget and keeps their results in
step with the widget's inputs:

- start(props): build one query builder per descriptor and fetch
- on_context_changed(props): rebuild and refetch only when relevant inputs changed
- teardown(): cancel in-flight requests; late results are ignored
- reset_queries(): re-arm the current builders in place

Release-dependent descriptors are deferred until the releases list is
non-empty, and no request is made while releases are still loading.

Fetches of one cycle run concurrently and are joined with per-query outcomes:
one failed query never hides the results of its siblings.

Usage:
    orchestrator = DiscoverQuery(client=get_discover_rest_client())
    orchestrator.subscribe(lambda state: render(state))
    await orchestrator.start(props)
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from dashquery.collectors.query_builder import QueryBuilder, create_query_builder
from dashquery.core import get_logger, log_with_context
from dashquery.domain.query import (
    ComparisonPeriod,
    OrchestratorState,
    QueryDescriptor,
    QueryOutcome,
    QueryProps,
    QueryState,
)
from dashquery.orchestrator.dependency_gate import requires_releases, should_rebuild, should_rederive
from dashquery.orchestrator.payload import compile_payload
from dashquery.orchestrator.release_conditions import create_release_field_condition
from dashquery.utils.error_handling import log_and_continue

logger = get_logger(__name__)

StateListener = Callable[[QueryState], None]


@dataclass(frozen=True)
class _BuilderSlot:
    """A live builder and the descriptor it was built from"""

    descriptor: QueryDescriptor
    builder: QueryBuilder


class DiscoverQuery:
    """
    Execution registry for a widget's Discover queries.

    All methods must be called from the event loop thread. ``start`` and
    ``on_context_changed`` need a running loop; the task they return completes
    when the fetch cycle settles.

    Args:
        builder_factory: Called as ``builder_factory(payload, organization, client)``
        client: Network client handed to the factory
    """

    def __init__(self, builder_factory: Callable[..., Any] = create_query_builder, client: Any = None):
        self._builder_factory = builder_factory
        self._client = client
        self._props: QueryProps | None = None
        self._slots: list[_BuilderSlot] = []
        self._state = OrchestratorState()
        self._listeners: list[StateListener] = []
        self._cycle = 0
        self._torn_down = False

    @property
    def props(self) -> QueryProps | None:
        return self._props

    @property
    def builders(self) -> list[QueryBuilder]:
        return [slot.builder for slot in self._slots]

    @property
    def state(self) -> OrchestratorState:
        return self._state

    def get_state(self) -> QueryState:
        """Current payloads, loading flag and results"""
        return QueryState(
            queries=tuple(slot.builder.get_internal() for slot in self._slots),
            reloading=self._state.reloading,
            results=self._state.results,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Call ``listener`` with the new QueryState after every state change.

        Returns:
            Function removing the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ==============================
    # Lifecycle
    # ==============================

    def start(self, props: QueryProps) -> asyncio.Task | None:
        """
        Build the query builders for ``props`` and run the first fetch cycle.

        Returns:
            The fetch cycle task, or None if the cycle is waiting for releases
        """
        self._ensure_active()
        if self._props is not None:
            raise RuntimeError("DiscoverQuery already started")

        self._props = props
        self._create_query_builders()
        return self._fetch_data()

    def on_context_changed(self, props: QueryProps) -> asyncio.Task | None:
        """
        Replace the inputs and refetch if the change is relevant.

        Returns:
            The new fetch cycle task, or None if nothing was refetched
        """
        self._ensure_active()
        if self._props is None:
            raise RuntimeError("DiscoverQuery not started")

        previous, self._props = self._props, props

        if not should_rederive(previous, props):
            return None

        if not should_rebuild(previous, props):
            logger.debug("Inputs changed without affecting queries, keeping builders")
            return None

        self._create_query_builders()
        return self._fetch_data()

    def teardown(self) -> None:
        """Cancel every in-flight request and drop the builders"""
        if self._torn_down:
            return

        self._torn_down = True
        self._cycle += 1
        for slot in self._slots:
            slot.builder.cancel_requests()
        self._slots = []
        self._listeners.clear()
        logger.info("Discover queries torn down")

    def reset_queries(self, compare_to_period: ComparisonPeriod | None = None) -> None:
        """
        Recompile each held builder's payload and re-arm it in place.

        Args:
            compare_to_period: Explicit bounds used instead of the selection's period
        """
        self._ensure_active()
        if self._props is None:
            return

        for slot in self._slots:
            descriptor = self._prepare_descriptor(slot.descriptor)
            slot.builder.reset(self._get_query(descriptor, compare_to_period))

        self._notify()

    # ==============================
    # Cycle handling
    # ==============================

    def _ensure_active(self) -> None:
        if self._torn_down:
            raise RuntimeError("DiscoverQuery has been torn down")

    def _prepare_descriptor(self, descriptor: QueryDescriptor) -> QueryDescriptor:
        if not descriptor.requires_releases:
            return descriptor
        return descriptor.with_release_condition(create_release_field_condition(self._props.release_versions))

    def _get_query(self, descriptor: QueryDescriptor, compare_to_period: ComparisonPeriod | None) -> dict[str, Any]:
        return compile_payload(
            descriptor,
            self._props.selection,
            compare_to_period,
            include_previous_period=self._props.include_previous_period,
        )

    def _create_query_builders(self) -> None:
        props = self._props

        # Compile everything first so a bad selection leaves the current builders alone
        payloads = []
        for descriptor in props.queries:
            # Can't create a release query until releases are known
            if descriptor.requires_releases and not props.releases:
                continue
            payload = self._get_query(self._prepare_descriptor(descriptor), props.compare_to_period)
            payloads.append((descriptor, payload))

        previous, self._slots = self._slots, []
        for slot in previous:
            slot.builder.cancel_requests()

        for descriptor, payload in payloads:
            builder = self._builder_factory(payload, props.organization, self._client)
            self._slots.append(_BuilderSlot(descriptor=descriptor, builder=builder))

        deferred = len(props.queries) - len(payloads)
        log_with_context(
            logger,
            "debug",
            "Created query builders",
            builders=len(self._slots),
            deferred=deferred,
        )

    def _fetch_data(self) -> asyncio.Task | None:
        self._cycle += 1
        cycle = self._cycle
        # Payloads changed even when reloading was already set
        self._state = replace(self._state, reloading=True)
        self._notify()

        # Wait for the releases before requesting anything that depends on them
        if requires_releases(self._props.queries) and self._props.releases_loading:
            logger.info(f"Fetch cycle {cycle} waiting for releases")
            return None

        builders = self.builders
        loop = asyncio.get_running_loop()
        return loop.create_task(self._run_cycle(cycle, builders))

    async def _run_cycle(self, cycle: int, builders: list[QueryBuilder]) -> None:
        outcomes = await asyncio.gather(
            *(builder.fetch_without_limit() for builder in builders),
            return_exceptions=True,
        )

        if self._torn_down or cycle != self._cycle:
            logger.debug(f"Discarding results of superseded fetch cycle {cycle}")
            return

        results = []
        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                log_and_continue(
                    logger, outcome, context={"query_index": index, "cycle": cycle}, error_type="Discover query"
                )
                results.append(QueryOutcome(error=outcome))
            else:
                results.append(QueryOutcome(data=outcome))

        self._set_state(reloading=False, results=tuple(results))
        log_with_context(
            logger,
            "info",
            "Fetch cycle settled",
            cycle=cycle,
            total=len(results),
            failed=sum(1 for result in results if not result.ok),
        )

    def _set_state(self, **changes: Any) -> None:
        state = replace(self._state, **changes)
        if state == self._state:
            return
        self._state = state
        self._notify()

    def _notify(self) -> None:
        snapshot = self.get_state()
        for listener in list(self._listeners):
            listener(snapshot)
