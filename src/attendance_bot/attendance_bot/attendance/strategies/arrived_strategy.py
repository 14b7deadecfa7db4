from __future__ import annotations

from .base import LateUpdateStrategy, PresenceDecision


class ArrivedStrategy(LateUpdateStrategy):
    """Late arrival: append once, never double count."""

    def apply(self, *, present_names: tuple[str, ...], present_count: int, student_name: str) -> PresenceDecision:
        if student_name in present_names:
            return PresenceDecision(present_names=present_names, present_count=present_count, changed=False)
        return PresenceDecision(
            present_names=(*present_names, student_name),
            present_count=present_count + 1,
            changed=True,
        )
