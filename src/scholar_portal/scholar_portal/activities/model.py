from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class ImageUpload:
    """Raw image attachment as received from the form."""

    data: bytes
    media_type: str


@dataclass(frozen=True)
class ActivityProgram:
    """An activity-program submission. Immutable once stored."""

    program_id: int
    scholar_id: int
    title: str
    description: Optional[str]
    start_date: date
    end_date: date
    created_at: datetime
    image_data: Optional[str] = None
    image_media_type: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return self.image_data is not None and self.image_media_type is not None
