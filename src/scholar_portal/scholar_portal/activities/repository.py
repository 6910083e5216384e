from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import ActivityProgram


class ActivityRepository(Protocol):
    def create(
        self,
        *,
        scholar_id: int,
        title: str,
        description: Optional[str],
        start_date: date,
        end_date: date,
        image_data: Optional[str],
        image_media_type: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def list_for_scholar(self, scholar_id: int) -> Sequence[ActivityProgram]:
        """Newest first."""

        raise NotImplementedError
