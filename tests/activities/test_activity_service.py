from __future__ import annotations

import base64
from datetime import date, datetime, timedelta

import pytest

from src.scholar_portal.scholar_portal.activities.model import ImageUpload
from src.scholar_portal.scholar_portal.activities.service import ActivityService
from src.scholar_portal.scholar_portal.core.constants import MAX_IMAGE_BYTES
from src.scholar_portal.scholar_portal.core.exceptions import ValidationError
from tests.fakes import InMemoryActivities

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_submit_trims_and_stores(fixed_now):
    repo = InMemoryActivities()
    svc = ActivityService(repo)

    program_id = svc.submit(1, "  Tree Planting  ", "  Barangay clean-up  ", date(2025, 9, 1), date(2025, 9, 2), now=fixed_now)

    [stored] = repo.list_for_scholar(1)
    assert stored.program_id == program_id
    assert stored.title == "Tree Planting"
    assert stored.description == "Barangay clean-up"
    assert stored.image_data is None and stored.image_media_type is None
    assert stored.created_at == fixed_now


def test_same_start_and_end_date_is_accepted(fixed_now):
    svc = ActivityService(InMemoryActivities())

    assert svc.submit(1, "One-day seminar", None, date(2025, 9, 1), date(2025, 9, 1), now=fixed_now) == 1


@pytest.mark.parametrize("days_before", [1, 2, 30, 365])
@pytest.mark.parametrize("with_image", [True, False])
def test_end_before_start_is_rejected(fixed_now, days_before, with_image):
    repo = InMemoryActivities()
    start = date(2025, 9, 10)
    image = ImageUpload(PNG_BYTES, "image/png") if with_image else None

    with pytest.raises(ValidationError):
        ActivityService(repo).submit(1, "Outreach", "desc", start, start - timedelta(days=days_before), image, now=fixed_now)
    assert repo.list_for_scholar(1) == []


@pytest.mark.parametrize(
    "title,start,end",
    [
        ("", date(2025, 9, 1), date(2025, 9, 2)),
        ("   ", date(2025, 9, 1), date(2025, 9, 2)),
        ("Outreach", None, date(2025, 9, 2)),
        ("Outreach", date(2025, 9, 1), None),
    ],
)
def test_missing_required_fields(fixed_now, title, start, end):
    with pytest.raises(ValidationError):
        ActivityService(InMemoryActivities()).submit(1, title, None, start, end, now=fixed_now)


def test_image_is_stored_base64_with_media_type(fixed_now):
    repo = InMemoryActivities()
    svc = ActivityService(repo)

    svc.submit(1, "Outreach", None, date(2025, 9, 1), date(2025, 9, 1), ImageUpload(PNG_BYTES, "image/png"), now=fixed_now)

    [stored] = repo.list_for_scholar(1)
    assert stored.image_media_type == "image/png"
    assert base64.b64decode(stored.image_data) == PNG_BYTES


def test_non_image_attachment_rejected(fixed_now):
    with pytest.raises(ValidationError):
        ActivityService(InMemoryActivities()).submit(
            1, "Outreach", None, date(2025, 9, 1), date(2025, 9, 1), ImageUpload(b"%PDF-1.7", "application/pdf"), now=fixed_now
        )


def test_image_size_ceiling(fixed_now):
    svc = ActivityService(InMemoryActivities())
    at_limit = ImageUpload(b"\x00" * MAX_IMAGE_BYTES, "image/jpeg")
    over_limit = ImageUpload(b"\x00" * (MAX_IMAGE_BYTES + 1), "image/jpeg")

    svc.submit(1, "Outreach", None, date(2025, 9, 1), date(2025, 9, 1), at_limit, now=fixed_now)
    with pytest.raises(ValidationError):
        svc.submit(1, "Outreach", None, date(2025, 9, 1), date(2025, 9, 1), over_limit, now=fixed_now)


def test_list_is_newest_first_and_scoped_to_scholar(fixed_now):
    svc = ActivityService(InMemoryActivities())
    svc.submit(1, "First", None, date(2025, 9, 1), date(2025, 9, 1), now=fixed_now)
    svc.submit(2, "Someone else", None, date(2025, 9, 1), date(2025, 9, 1), now=fixed_now)
    svc.submit(1, "Second", None, date(2025, 9, 1), date(2025, 9, 1), now=fixed_now + timedelta(hours=1))

    assert [p["title"] for p in svc.list_ui(1)] == ["Second", "First"]
