from __future__ import annotations

from animalsos.core.security import verify_password
from animalsos.domain.entities import ReportCreate
from animalsos.repositories.memory_storage import MemoryStorage


def test_seed_populates_sample_records():
    storage = MemoryStorage(admin_password="s3cret!")

    assert [v.name for v in storage.get_all_vets()] == ["Animal Care Clinic", "Emergency Pet Hospital"]
    admin = storage.get_user_by_username("admin")
    assert admin is not None
    assert admin.id == 1
    assert admin.role == "admin"
    assert verify_password("s3cret!", admin.password)
    assert {a.name for a in storage.get_all_adoptions()} == {"Max", "Whiskers"}
    assert [(d.goal_amount, d.raised_amount) for d in storage.get_all_donations()] == [(5000, 2500), (10000, 7500)]
    reports = storage.get_reports_by_user(1)
    assert len(reports) == 2
    assert all(r.status == "pending" for r in reports)


def test_seed_runs_once():
    storage = MemoryStorage()
    storage.seed_sample_data("another")

    assert len(storage.get_all_users()) == 1
    assert len(storage.get_all_vets()) == 2


def test_donation_contribution_on_seeded_campaign():
    storage = MemoryStorage()
    campaign = storage.get_all_donations()[0]
    assert (campaign.goal_amount, campaign.raised_amount) == (5000, 2500)

    storage.contribute_to_donation(campaign.id, 100)

    assert storage.get_donation(campaign.id).raised_amount == 2600


def test_ids_continue_after_seed():
    storage = MemoryStorage()
    report = storage.create_report(
        ReportCreate(user_id=1, animal_type="bird", description="broken wing", location="Elm Park")
    )

    assert report.id == 3
    assert report.status == "pending"
    assert report.urgency == "normal"


def test_seed_vets_noop_when_seeded():
    storage = MemoryStorage()
    assert storage.seed_vets() == 0
    assert len(storage.get_all_vets()) == 2
