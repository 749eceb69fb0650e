from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from animalsos.domain.entities import (
    Report,
    ReportCreate,
    ReportStatus,
    ReportUrgency,
    Schema,
    User,
    UserRole,
)
from animalsos.repositories.base import Storage
from animalsos.routers.deps import get_storage, not_found, require_role, require_user
from animalsos.services.report_service import (
    InvalidTransitionError,
    ReportNotFoundError,
    ReportService,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])


class ReportSubmission(Schema):
    animal_type: str
    description: str
    location: str
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    urgency: ReportUrgency = ReportUrgency.NORMAL
    image_url: Optional[str] = None


class StatusChange(Schema):
    status: ReportStatus


@router.get("", response_model=list[Report])
def list_reports(
    limit: Optional[int] = Query(default=None, ge=1),
    status: Optional[ReportStatus] = None,
    storage: Storage = Depends(get_storage),
):
    if status is not None:
        reports = storage.get_reports_by_status(ReportStatus(status).value)
        return reports[:limit] if limit else reports
    return storage.get_reports(limit)


@router.get("/mine", response_model=list[Report])
def my_reports(user: User = Depends(require_user), storage: Storage = Depends(get_storage)):
    return storage.get_reports_by_user(user.id)


@router.get("/{report_id}", response_model=Report)
def get_report(report_id: int, storage: Storage = Depends(get_storage)):
    report = storage.get_report(report_id)
    if report is None:
        raise not_found("Report")
    return report


@router.post("", status_code=201, response_model=Report)
def create_report(
    payload: ReportSubmission,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    return storage.create_report(
        ReportCreate(**payload.model_dump(), user_id=user.id, status=ReportStatus.PENDING)
    )


@router.patch("/{report_id}/status", response_model=Report)
def change_status(
    report_id: int,
    payload: StatusChange,
    storage: Storage = Depends(get_storage),
    _staff: User = Depends(require_role(UserRole.NGO, UserRole.ADMIN)),
):
    try:
        return ReportService(storage).change_status(report_id, payload.status)
    except ReportNotFoundError:
        raise not_found("Report")
    except InvalidTransitionError as exc:
        raise HTTPException(409, str(exc))
