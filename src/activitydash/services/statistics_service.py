"""
Statistics panel composition for the ActivityDash application.

Every activity page shows the same panel: a row of range buttons and a list
of labeled statistics computed over the logs inside the selected range.
This module provides the range selector state and the pipeline
range -> cutoff -> filter -> reduce that produces the panel contents.

Classes:
    RangeSelector: Currently selected range plus a change callback

Functions:
    aggregate_statistics: Run a reduction and wrap its output as StatItems
    build_statistics_section: Compose filter and reduction into a panel
"""

from typing import Any, Callable, List, Optional, Sequence, TypeVar

from ..models.stats import RangeOption, StatisticsPanel, StatItem
from ..models.time_range import TimeRange
from ..utils.time import Clock, system_clock
from .range_filter import filter_logs_by_range

T = TypeVar("T")

Reduction = Callable[[List[T]], Sequence[Any]]


class RangeSelector:
    """
    Range selector state.

    Holds the highlighted range and notifies ``on_change`` when the user
    picks a different one. The selector never filters or fetches data;
    callers recompute their panel from the new range.

    Example:
        >>> picked = []
        >>> selector = RangeSelector(TimeRange.MAX, picked.append)
        >>> selector.select(TimeRange.ONE_YEAR)
        >>> picked
        [<TimeRange.ONE_YEAR: '1y'>]
    """

    def __init__(
        self,
        selected: TimeRange = TimeRange.MAX,
        on_change: Optional[Callable[[TimeRange], None]] = None,
    ):
        if not isinstance(selected, TimeRange):
            raise ValueError(f"Unknown time range: {selected!r}")
        self.selected = selected
        self.on_change = on_change

    def select(self, time_range: TimeRange) -> None:
        """
        Select a range, notifying the callback if the selection changed.

        Raises:
            ValueError: If ``time_range`` is not a TimeRange member
        """
        if not isinstance(time_range, TimeRange):
            raise ValueError(f"Unknown time range: {time_range!r}")
        if time_range is self.selected:
            return
        self.selected = time_range
        if self.on_change is not None:
            self.on_change(time_range)

    def options(self) -> List[RangeOption]:
        """Selector buttons in display order, with the active one marked."""
        return range_options(self.selected)


def range_options(selected: TimeRange) -> List[RangeOption]:
    return [
        RangeOption(range=r, label=r.value, active=r is selected)
        for r in TimeRange.ordered()
    ]


def _to_stat_item(item: Any) -> StatItem:
    if isinstance(item, StatItem):
        return item
    if isinstance(item, dict):
        return StatItem(label=item["label"], value=item["value"])
    label, value = item
    return StatItem(label=label, value=value)


def aggregate_statistics(filtered: List[T], compute_stats: Reduction) -> List[StatItem]:
    """
    Reduce a filtered collection into labeled statistics.

    The reduction's output is returned in the order produced, without
    sorting, deduplication or relabeling. Items may be StatItems, dicts
    with ``label``/``value`` keys, or ``(label, value)`` pairs.

    Args:
        filtered: Records inside the selected range (possibly empty)
        compute_stats: Pure reduction from records to statistics

    Returns:
        List of StatItems
    """
    return [_to_stat_item(item) for item in compute_stats(filtered)]


def build_statistics_section(
    records: Sequence[T],
    get_timestamp: Callable[[T], Any],
    compute_stats: Reduction,
    time_range: TimeRange,
    clock: Clock = system_clock,
) -> Optional[StatisticsPanel]:
    """
    Compose range filtering and a reduction into a statistics panel.

    A user who has never logged the activity gets no panel at all: when
    ``records`` is empty the reduction is not called and None is returned.
    When records exist but none fall inside the range, the reduction still
    runs on the empty list and is expected to produce zero values.

    Args:
        records: Every record of the activity, unfiltered
        get_timestamp: Projection from a record to its ISO-8601 timestamp
        compute_stats: Pure reduction from records to statistics
        time_range: Selected range
        clock: Zero-argument callable returning the current time

    Returns:
        StatisticsPanel, or None when there are no records at all

    Example:
        >>> panel = build_statistics_section(
        ...     [], lambda r: r["t"], lambda f: [("Total", len(f))], TimeRange.MAX
        ... )
        >>> panel is None
        True
    """
    if len(records) == 0:
        return None

    filtered = filter_logs_by_range(records, time_range, get_timestamp, clock)
    items = aggregate_statistics(filtered, compute_stats)

    return StatisticsPanel(
        range=time_range,
        options=range_options(time_range),
        items=items,
        total_records=len(records),
        filtered_records=len(filtered),
    )
