"""
Statistics models for the ActivityDash application.

Classes:
    StatItem: One labeled statistic shown in a statistics panel
    RangeOption: One entry of the range selector
    StatisticsPanel: Everything a statistics panel needs to render
"""

from typing import List, Union

from pydantic import BaseModel, Field

from .time_range import TimeRange


class StatItem(BaseModel):
    """
    A single ``(label, value)`` statistic.

    Values are kept exactly as the reduction produced them: numbers stay
    numbers and preformatted strings such as ``"12.40 mi"`` stay strings.
    """

    label: str = Field(..., description="Display label")
    value: Union[int, float, str] = Field(..., description="Display value")


class RangeOption(BaseModel):
    """Selector button state."""

    range: TimeRange
    label: str
    active: bool = False


class StatisticsPanel(BaseModel):
    """
    Output contract to the rendering layer.

    Attributes:
        range: The currently selected time range
        options: Selector buttons in display order, with the active one marked
        items: Statistics in the order the reduction produced them
        total_records: Size of the unfiltered collection
        filtered_records: Size of the collection inside the range
    """

    range: TimeRange
    options: List[RangeOption] = Field(default_factory=list)
    items: List[StatItem] = Field(default_factory=list)
    total_records: int = 0
    filtered_records: int = 0

    def as_pairs(self) -> List[tuple]:
        """Return the statistics as plain ``(label, value)`` tuples."""
        return [(item.label, item.value) for item in self.items]
