"""Simulation clock / calendar utilities.

Global convention (used everywhere in this project):

- 1 simulation step == 1 month
- months are 0-based internally and reported 1-based

Month-bound events (the payout month, the final snapshot) must be triggered
from the month index via this module.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SimulationClock:
    """A small deterministic calendar.

    The clock is stateless aside from `month_index`. Use `set_month()` inside
    the simulation loop to bind it to the current step.
    """

    max_months: int
    payout_month: int
    month_index: int = 0

    def set_month(self, month_index: int) -> None:
        if month_index < 0:
            raise ValueError("month_index must be >= 0")
        self.month_index = int(month_index)

    def advance(self) -> None:
        self.month_index += 1

    @property
    def report_month(self) -> int:
        """1-based month number used in reports."""
        return self.month_index + 1

    def is_payout_month(self, month_index: int | None = None) -> bool:
        m = self.month_index if month_index is None else int(month_index)
        return m == self.payout_month

    def is_final_month(self, month_index: int | None = None) -> bool:
        m = self.month_index if month_index is None else int(month_index)
        return m == self.max_months - 1

    def is_finished(self) -> bool:
        return self.month_index >= self.max_months
