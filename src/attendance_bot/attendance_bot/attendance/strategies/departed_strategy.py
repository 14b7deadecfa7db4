from __future__ import annotations

from .base import LateUpdateStrategy, PresenceDecision


class DepartedStrategy(LateUpdateStrategy):
    """Early departure: remove if listed, count floors at zero."""

    def apply(self, *, present_names: tuple[str, ...], present_count: int, student_name: str) -> PresenceDecision:
        if student_name not in present_names:
            return PresenceDecision(present_names=present_names, present_count=present_count, changed=False)
        remaining = list(present_names)
        remaining.remove(student_name)
        return PresenceDecision(
            present_names=tuple(remaining),
            present_count=max(0, present_count - 1),
            changed=True,
        )
