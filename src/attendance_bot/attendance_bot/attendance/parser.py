"""Free-text grammars for attendance messages.

Submission::

    9A 30/27 Ali Olimov Bobur          (single line, one name per token)
    6A 21/18                           (multi line, one name per line)
    Abubakr Valijanov
    Alisher Oripov

The two integers are always `<total>/<present>`.

Late update::

    9A Bilolxon Oripov keldi           (arrived)
    9A Jobirxon ketdi                  (departed)
"""
from __future__ import annotations

import logging
import re
from typing import Optional, Sequence, Union

from ..core.constants import ARRIVED_KEYWORDS, DEPARTED_KEYWORDS
from ..core.enums import LateAction
from .classes import ClassCatalog
from .model import LateUpdateEvent, Submission

logger = logging.getLogger(__name__)

ParsedMessage = Union[Submission, LateUpdateEvent]

_SUBMISSION_HEAD = re.compile(r"^([A-Z0-9]+)\s+(\d+)/(\d+)(?:\s+(.+))?$", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def _late_update_pattern(arrived: Sequence[str], departed: Sequence[str]) -> re.Pattern:
    keywords = "|".join(re.escape(k) for k in (*arrived, *departed))
    return re.compile(rf"^([A-Z0-9]+)\s+(.+)\s+({keywords})$", re.IGNORECASE)


_LATE_UPDATE = _late_update_pattern(ARRIVED_KEYWORDS, DEPARTED_KEYWORDS)


def parse_submission(text: str) -> Optional[Submission]:
    lines = [line.strip() for line in (text or "").strip().splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return None

    match = _SUBMISSION_HEAD.match(lines[0])
    if not match:
        return None

    names: list[str] = []
    if match.group(4):
        names.extend(token for token in match.group(4).split() if token)
    names.extend(lines[1:])

    return Submission(
        class_name=match.group(1).upper(),
        total_count=int(match.group(2)),
        present_count=int(match.group(3)),
        student_names=tuple(names),
    )


def parse_late_update(text: str) -> Optional[LateUpdateEvent]:
    normalized = _WHITESPACE.sub(" ", (text or "").strip())
    match = _LATE_UPDATE.match(normalized)
    if not match:
        return None

    keyword = match.group(3).lower()
    action = LateAction.ARRIVED if keyword in ARRIVED_KEYWORDS else LateAction.DEPARTED
    return LateUpdateEvent(
        class_name=match.group(1).upper(),
        student_name=match.group(2).strip(),
        action=action,
    )


def parse_message(text: str, *, catalog: Optional[ClassCatalog] = None) -> Optional[ParsedMessage]:
    """Submission grammar first, then late update; None when nothing matches.

    With a catalog, a class outside it is rejected like any other non-match.
    """

    parsed: Optional[ParsedMessage] = parse_submission(text)
    if parsed is None:
        parsed = parse_late_update(text)
    if parsed is None:
        return None

    if catalog is not None and parsed.class_name not in catalog:
        logger.debug("Ignoring message for unknown class %s", parsed.class_name)
        return None
    return parsed
