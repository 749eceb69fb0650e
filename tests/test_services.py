from __future__ import annotations

import pytest

from animalsos.domain.entities import DonationCreate, ReportCreate
from animalsos.domain.reports import can_transition
from animalsos.services.donation_service import (
    CampaignNotFoundError,
    DonationService,
    InvalidContributionError,
)
from animalsos.services.report_service import (
    InvalidTransitionError,
    ReportNotFoundError,
    ReportService,
)


def test_transition_table():
    assert can_transition("pending", "assigned")
    assert can_transition("assigned", "in_progress")
    assert can_transition("in_progress", "rescued")
    assert can_transition("in_progress", "closed")
    assert can_transition("pending", "pending")
    assert not can_transition("pending", "rescued")
    assert not can_transition("rescued", "pending")
    assert not can_transition("closed", "assigned")
    assert not can_transition("pending", "bogus")


def test_report_service_walks_the_progression(memory_storage):
    report = memory_storage.create_report(
        ReportCreate(user_id=1, animal_type="dog", description="limping", location="Main St")
    )
    svc = ReportService(memory_storage)

    for status in ("assigned", "in_progress", "rescued"):
        report = svc.change_status(report.id, status)
    assert report.status == "rescued"

    with pytest.raises(InvalidTransitionError):
        svc.change_status(report.id, "pending")
    assert memory_storage.get_report(report.id).status == "rescued"


def test_report_service_unknown_report(memory_storage):
    with pytest.raises(ReportNotFoundError):
        ReportService(memory_storage).change_status(42, "assigned")


def test_contribution_must_be_positive(memory_storage):
    campaign = memory_storage.create_donation(DonationCreate(title="t", description="d", goal_amount=10))
    svc = DonationService(memory_storage)

    for amount in (0, -5, True):
        with pytest.raises(InvalidContributionError):
            svc.contribute(campaign.id, amount)
    assert memory_storage.get_donation(campaign.id).raised_amount == 0

    assert svc.contribute(campaign.id, 7).raised_amount == 7


def test_contribution_to_missing_campaign(memory_storage):
    with pytest.raises(CampaignNotFoundError):
        DonationService(memory_storage).contribute(123, 5)
