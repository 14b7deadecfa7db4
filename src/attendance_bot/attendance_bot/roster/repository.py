from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import ClassRoster


class RosterRepository(Protocol):
    def get_roster_total(self, class_name: str) -> Optional[int]:
        raise NotImplementedError

    def set_roster_total(self, class_name: str, total_students: int) -> None:
        raise NotImplementedError

    def get_roster(self, class_name: str) -> ClassRoster:
        raise NotImplementedError

    # Longitudinal student store
    def add_students(self, class_name: str, student_names: Sequence[str], *, source: str) -> int:
        """Insert names that are not stored yet. Returns number of new names."""

        raise NotImplementedError

    def list_known_students(self) -> Mapping[str, Sequence[str]]:
        """class_name -> known student names, sorted."""

        raise NotImplementedError
