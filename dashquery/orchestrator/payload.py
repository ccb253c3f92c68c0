"""
Payload compilation

Turns a query descriptor plus the current selection into the payload a query
builder is created with. No request is made here.
"""

from dataclasses import replace
from typing import Any

from dashquery.domain.constants import DEFAULT_STATS_PERIOD
from dashquery.domain.query import ComparisonPeriod, DateTimeSelection, QueryDescriptor, SelectionContext
from dashquery.utils.datetime_utils import get_interval, get_period, parse_period_to_hours


def compute_rollup(selection: DateTimeSelection) -> int:
    """
    Rollup in seconds for the selected range.

    An empty selection uses the default stats period.

    Example:
        >>> compute_rollup(DateTimeSelection(period="12h"))
        900
    """
    if selection.is_empty:
        selection = replace(selection, period=DEFAULT_STATS_PERIOD)
    return int(parse_period_to_hours(get_interval(selection)) * 60 * 60)


def compile_payload(
    descriptor: QueryDescriptor,
    selection: SelectionContext,
    compare_to_period: ComparisonPeriod | None = None,
    include_previous_period: bool = False,
) -> dict[str, Any]:
    """
    Compile one descriptor against the current selection.

    Keys are merged in order, later ones winning: descriptor, selection
    filters, derived period (start/end/range), comparison period.

    Args:
        descriptor: Widget query
        selection: Global selection
        compare_to_period: Explicit bounds; when given no period is derived and
            the rollup is computed from these bounds
        include_previous_period: Double the derived look-back window

    Returns:
        Payload dict for create_query_builder()
    """
    query = descriptor.to_query()

    period: dict[str, Any] = {}
    rollup_range = selection.datetime
    if compare_to_period is None:
        derived = get_period(selection.datetime, should_double_period=include_previous_period)
        period = {"start": derived["start"], "end": derived["end"], "range": derived["stats_period"]}
    else:
        # Buckets follow the bounds that are actually sent
        rollup_range = DateTimeSelection(start=compare_to_period.start, end=compare_to_period.end)

    # Caller-supplied rollup values are replaced
    if descriptor.rollup:
        query["rollup"] = compute_rollup(rollup_range)

    return {
        **query,
        **selection.filters(),
        **period,
        **(compare_to_period.as_dict() if compare_to_period else {}),
    }
