"""
Time range model for the ActivityDash application.

This module defines the fixed set of lookback windows that every statistics
panel offers. The string value of each member is the label rendered on the
range selector button and accepted from API clients.

Classes:
    TimeRange: Enum of the selectable lookback windows
"""

from enum import Enum
from typing import List


class TimeRange(str, Enum):
    """
    Enumeration of selectable statistics windows.

    Members are declared in display order, from the tightest window to
    the loosest. The set is closed: adding a member requires updating the
    cutoff computation, which fails loudly for unknown values.

    Example:
        >>> TimeRange.from_label("YTD")
        <TimeRange.YEAR_TO_DATE: 'YTD'>
        >>> [r.value for r in TimeRange.ordered()][:3]
        ['1d', '5d', '1m']
    """

    ONE_DAY = "1d"
    FIVE_DAYS = "5d"
    ONE_MONTH = "1m"
    SIX_MONTHS = "6m"
    YEAR_TO_DATE = "YTD"
    ONE_YEAR = "1y"
    FIVE_YEARS = "5y"
    MAX = "Max"

    @classmethod
    def ordered(cls) -> List["TimeRange"]:
        """Return all ranges in selector display order."""
        return list(cls)

    @classmethod
    def from_label(cls, label: str) -> "TimeRange":
        """
        Parse a selector label into a TimeRange.

        Matching is exact first, then case-insensitive so that query strings
        like ``range=ytd`` or ``range=max`` are accepted.

        Args:
            label: Range label such as "1d", "YTD" or "Max"

        Returns:
            Matching TimeRange member

        Raises:
            ValueError: If the label does not name a known range
        """
        if isinstance(label, cls):
            return label

        for member in cls:
            if member.value == label:
                return member

        lowered = str(label).strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member

        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown time range '{label}'. Expected one of: {valid}")

    @property
    def is_bounded(self) -> bool:
        """True for every range that applies a cutoff."""
        return self is not TimeRange.MAX
