from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from ..core.constants import DEFAULT_CLASSES


@dataclass(frozen=True)
class ClassCatalog:
    """Fixed, ordered enumeration of known classes.

    Ordering is by position in `names`; classes outside the list sort after
    all known ones, alphabetically.
    """

    names: tuple[str, ...] = DEFAULT_CLASSES

    @classmethod
    def of(cls, names: Iterable[str]) -> "ClassCatalog":
        return cls(names=tuple(str(n).strip().upper() for n in names if str(n).strip()))

    def __contains__(self, class_name: object) -> bool:
        return isinstance(class_name, str) and class_name.upper() in self._index

    @property
    def _index(self) -> dict[str, int]:
        return {name: i for i, name in enumerate(self.names)}

    def sort_key(self, class_name: str) -> tuple[int, int, str]:
        idx = self._index.get(class_name.upper())
        if idx is None:
            return (1, 0, class_name.upper())
        return (0, idx, "")

    def ordered(self, class_names: Iterable[str]) -> list[str]:
        return sorted(class_names, key=self.sort_key)

    def missing(self, submitted: Sequence[str]) -> list[str]:
        seen = {c.upper() for c in submitted}
        return [name for name in self.names if name not in seen]
