from __future__ import annotations

import base64
import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.constants import MAX_IMAGE_BYTES
from ..core.exceptions import ValidationError
from .model import ActivityProgram, ImageUpload
from .repository import ActivityRepository

logger = logging.getLogger(__name__)


class ActivityService:
    """Use case: record activity programs a scholar took part in."""

    def __init__(self, activities: ActivityRepository, *, max_image_bytes: int = MAX_IMAGE_BYTES):
        self._activities = activities
        self._max_image_bytes = int(max_image_bytes)

    def _encode_image(self, image: Optional[ImageUpload]) -> tuple[Optional[str], Optional[str]]:
        if image is None or not image.data:
            return None, None

        media_type = (image.media_type or "").strip().lower()
        if not media_type.startswith("image/"):
            raise ValidationError("Only image files are allowed!")
        if len(image.data) > self._max_image_bytes:
            raise ValidationError(f"Image must be at most {self._max_image_bytes // (1024 * 1024)} MB")

        return base64.b64encode(image.data).decode("ascii"), media_type

    def submit(
        self,
        scholar_id: int,
        title: str,
        description: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        image: Optional[ImageUpload] = None,
        *,
        now: Optional[datetime] = None,
    ) -> int:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Program Title cannot be empty.")
        if start_date is None:
            raise ValidationError("Start Date is required.")
        if end_date is None:
            raise ValidationError("End Date is required.")
        if end_date < start_date:
            raise ValidationError("End Date cannot be before Start Date.")

        image_data, image_media_type = self._encode_image(image)

        program_id = self._activities.create(
            scholar_id=int(scholar_id),
            title=title,
            description=(description or "").strip(),
            start_date=start_date,
            end_date=end_date,
            image_data=image_data,
            image_media_type=image_media_type,
            created_at=now or now_local(),
        )
        logger.info("Activity program %s recorded for scholar_id=%s", program_id, scholar_id)
        return program_id

    def list_for_scholar(self, scholar_id: int) -> list[ActivityProgram]:
        return list(self._activities.list_for_scholar(int(scholar_id)))

    def list_ui(self, scholar_id: int) -> list[dict]:
        return [self._to_ui(p) for p in self.list_for_scholar(scholar_id)]

    @staticmethod
    def _to_ui(p: ActivityProgram) -> dict:
        return {
            "program_id": p.program_id,
            "title": p.title,
            "description": p.description or "",
            "start_date": p.start_date.strftime("%Y-%m-%d"),
            "end_date": p.end_date.strftime("%Y-%m-%d"),
            "created_at": p.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            "image": f"data:{p.image_media_type};base64,{p.image_data}" if p.has_image else None,
        }
