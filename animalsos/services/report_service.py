"""Report workflow use cases (status progression)."""

from __future__ import annotations

import logging

from animalsos.domain.entities import Report, ReportPatch, ReportStatus
from animalsos.domain.reports import can_transition
from animalsos.repositories.base import Storage

logger = logging.getLogger(__name__)


class ReportError(Exception):
    """Base exception for report workflow."""


class ReportNotFoundError(ReportError):
    """Raised when the report id does not exist."""


class InvalidTransitionError(ReportError):
    """Raised when a status change skips or reverses the rescue progression."""


class ReportService:
    """Moves reports through pending -> assigned -> in_progress -> rescued/closed."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def change_status(self, report_id: int, status: ReportStatus | str) -> Report:
        target = ReportStatus(status).value
        report = self.storage.get_report(report_id)
        if report is None:
            raise ReportNotFoundError(f"Report {report_id} not found")
        if not can_transition(report.status, target):
            logger.info("Rejected report %s transition %s -> %s", report_id, report.status, target)
            raise InvalidTransitionError(f"Cannot move report from {report.status} to {target}")
        updated = self.storage.update_report(report_id, ReportPatch(status=target))
        if updated is None:
            raise ReportNotFoundError(f"Report {report_id} not found")
        return updated
