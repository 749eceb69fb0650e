"""Sample records used to make a fresh installation usable."""
from __future__ import annotations

from animalsos.domain.entities import (
    AdoptionCreate,
    DonationCreate,
    ReportCreate,
    UserCreate,
    UserRole,
    VetCreate,
)

ADMIN_USERNAME = "admin"
ADMIN_EMAIL = "admin@example.com"

# Vets inserted by the memory backend at construction.
SAMPLE_VETS = (
    VetCreate(
        name="Animal Care Clinic",
        address="123 Main St",
        phone="555-1234",
        email="clinic@example.com",
        latitude="40.7128",
        longitude="-74.0060",
        rating=4,
        is_open=True,
    ),
    VetCreate(
        name="Emergency Pet Hospital",
        address="456 Oak Ave",
        phone="555-5678",
        email="emergency@example.com",
        latitude="40.7148",
        longitude="-74.0068",
        rating=5,
        is_open=True,
    ),
)

# Vets inserted by ``seed_vets()`` into an empty vet collection.
DIRECTORY_VETS = (
    VetCreate(
        name="Animal Care Clinic",
        address="123 Main St, City Center",
        phone="555-123-4567",
        email="info@animalcareclinic.com",
        latitude="40.7128",
        longitude="-74.0060",
        rating=4,
        is_open=True,
    ),
    VetCreate(
        name="Pet Wellness Center",
        address="456 Oak Ave, Westside",
        phone="555-987-6543",
        email="care@petwellness.com",
        latitude="40.7282",
        longitude="-73.9942",
        rating=5,
        is_open=True,
    ),
    VetCreate(
        name="Emergency Animal Hospital",
        address="789 Pine Rd, Northside",
        phone="555-456-7890",
        email="help@emergencyvet.com",
        latitude="40.7369",
        longitude="-74.0102",
        rating=4,
        is_open=True,
    ),
)

SAMPLE_ADOPTIONS = (
    AdoptionCreate(
        name="Max",
        type="dog",
        breed="Golden Retriever",
        age="3 years",
        gender="male",
        description="Friendly and playful golden retriever looking for a forever home.",
        image_url="https://images.unsplash.com/photo-1552053831-71594a27632d?auto=format&fit=crop&w=662&q=80",
    ),
    AdoptionCreate(
        name="Whiskers",
        type="cat",
        breed="Siamese",
        age="2 years",
        gender="female",
        description="Beautiful Siamese cat that loves to cuddle.",
        image_url="https://images.unsplash.com/photo-1533738363-b7f9aef128ce?auto=format&fit=crop&w=735&q=80",
    ),
)

# (campaign, amount already raised)
SAMPLE_DONATIONS = (
    (
        DonationCreate(
            title="Help Injured Wildlife",
            description="Support our efforts to rescue and rehabilitate injured wildlife affected by recent wildfires.",
            goal_amount=5000,
            image_url="https://images.unsplash.com/photo-1584118624012-df056829fbd0?auto=format&fit=crop&w=1032&q=80",
        ),
        2500,
    ),
    (
        DonationCreate(
            title="Shelter Expansion Project",
            description="Help us expand our animal shelter to accommodate more rescues.",
            goal_amount=10000,
            image_url="https://images.unsplash.com/photo-1604848698030-c434ba08ece1?auto=format&fit=crop&w=687&q=80",
        ),
        7500,
    ),
)

SAMPLE_REPORTS = (
    ReportCreate(
        user_id=1,
        animal_type="dog",
        description="Found a dog with an injured paw near Main Street Park.",
        location="Main Street Park",
        latitude="40.7128",
        longitude="-74.0060",
        urgency="urgent",
        image_url="https://images.unsplash.com/photo-1634913940926-05e7c8cf8816?auto=format&fit=crop&w=880&q=80",
    ),
    ReportCreate(
        user_id=1,
        animal_type="cat",
        description="Group of stray cats needing food and shelter behind Oak Street apartments.",
        location="Oak Street Apartments",
        latitude="40.7148",
        longitude="-74.0068",
        urgency="normal",
        image_url="https://images.unsplash.com/photo-1626602411112-23ea4a827627?auto=format&fit=crop&w=1287&q=80",
    ),
)


def admin_user(password_hash: str) -> UserCreate:
    return UserCreate(
        username=ADMIN_USERNAME,
        password=password_hash,
        email=ADMIN_EMAIL,
        name="Admin",
        role=UserRole.ADMIN,
    )
