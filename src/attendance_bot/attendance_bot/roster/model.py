from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ClassRoster:
    """Authoritative size and known names of a class, sourced out-of-band."""

    class_name: str
    total_students: Optional[int]
    student_names: tuple[str, ...] = ()
