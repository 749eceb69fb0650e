"""Domain helpers for the rescue report status progression."""
from __future__ import annotations

from typing import Mapping

from animalsos.domain.entities import ReportStatus

REPORT_TRANSITIONS: Mapping[str, frozenset[str]] = {
    ReportStatus.PENDING.value: frozenset({ReportStatus.ASSIGNED.value, ReportStatus.CLOSED.value}),
    ReportStatus.ASSIGNED.value: frozenset({ReportStatus.IN_PROGRESS.value, ReportStatus.CLOSED.value}),
    ReportStatus.IN_PROGRESS.value: frozenset({ReportStatus.RESCUED.value, ReportStatus.CLOSED.value}),
    ReportStatus.RESCUED.value: frozenset(),
    ReportStatus.CLOSED.value: frozenset(),
}


def can_transition(current: str | None, target: str | None) -> bool:
    """Return True when a report may move from ``current`` to ``target``.

    Re-applying the current status is always allowed. Unknown statuses (which
    the storage layer tolerates) can only move to a known status.
    """
    if not target or target not in REPORT_TRANSITIONS:
        return False
    if current == target:
        return True
    allowed = REPORT_TRANSITIONS.get(current or "")
    if allowed is None:
        return True
    return target in allowed
