from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PresenceDecision:
    present_names: tuple[str, ...]
    present_count: int
    changed: bool


class LateUpdateStrategy(ABC):
    """Strategy Pattern: encapsulate how one late update moves a student."""

    @abstractmethod
    def apply(self, *, present_names: tuple[str, ...], present_count: int, student_name: str) -> PresenceDecision:
        raise NotImplementedError
