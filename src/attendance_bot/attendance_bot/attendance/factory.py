from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import LateAction
from .strategies.arrived_strategy import ArrivedStrategy
from .strategies.base import LateUpdateStrategy
from .strategies.departed_strategy import DepartedStrategy


@dataclass
class LateUpdateStrategyFactory:
    """Factory Pattern: choose the strategy for a late update action."""

    def for_action(self, action: LateAction) -> LateUpdateStrategy:
        if action == LateAction.ARRIVED:
            return ArrivedStrategy()
        if action == LateAction.DEPARTED:
            return DepartedStrategy()
        raise ValueError(f"Unsupported late update action: {action!r}")
