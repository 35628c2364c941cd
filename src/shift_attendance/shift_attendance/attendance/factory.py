from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_AUTO_CHECKOUT_FIXED_HOURS
from ..core.enums import DeadlinePolicy, PunchWindowPolicy
from .strategies.base import DeadlineStrategy, PunchWindowStrategy
from .strategies.deadline import FixedHoursDeadlineStrategy, GraceAfterDeadlineStrategy
from .strategies.punch_window import GracePunchStrategy, WindowedPunchStrategy


@dataclass(frozen=True)
class AttendanceStrategyFactory:
    """Factory Pattern: pick the deployment's punch-window and deadline rules."""

    punch_window_policy: PunchWindowPolicy = PunchWindowPolicy.GRACE
    deadline_policy: DeadlinePolicy = DeadlinePolicy.GRACE_AFTER
    fixed_hours: int = DEFAULT_AUTO_CHECKOUT_FIXED_HOURS

    @classmethod
    def from_settings(cls, *, punch_window_policy: str, deadline_policy: str, fixed_hours: int) -> "AttendanceStrategyFactory":
        return cls(
            punch_window_policy=PunchWindowPolicy(str(punch_window_policy).lower()),
            deadline_policy=DeadlinePolicy(str(deadline_policy).lower()),
            fixed_hours=int(fixed_hours),
        )

    def for_punch_window(self) -> PunchWindowStrategy:
        if self.punch_window_policy == PunchWindowPolicy.WINDOWS:
            return WindowedPunchStrategy()
        return GracePunchStrategy()

    def for_deadline(self) -> DeadlineStrategy:
        if self.deadline_policy == DeadlinePolicy.FIXED_HOURS:
            return FixedHoursDeadlineStrategy(self.fixed_hours)
        return GraceAfterDeadlineStrategy()
