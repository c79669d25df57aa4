"""Display row model handed to the rendering layer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DisplayRow:
    """One departure board row, ready for display."""

    label: str
    primary_time: str
    secondary_time: str | None  # Estimated departure, only set when delayed
    destination: str
    highlighted: bool  # Entry carries remarks
    delayed: bool = False
