"""Photo Job Repository Interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from src.domain.photo_job import PhotoJob


@dataclass
class JobStats:
    total_jobs: int
    total_photos: int
    total_spent: Decimal
    this_month: Decimal


class PhotoJobRepository(ABC):

    @abstractmethod
    async def list_recent_by_user(self, user_id: str, limit: int = 50) -> List[PhotoJob]:
        """Return the user's jobs, newest first"""
        pass

    @abstractmethod
    async def get_stats_by_user(self, user_id: str, month_start: datetime) -> JobStats:
        """Aggregate job counts and spend; this_month covers jobs created at or after month_start"""
        pass

    @abstractmethod
    async def get_by_id(self, job_id: int) -> Optional[PhotoJob]:
        pass

    @abstractmethod
    async def update_group_name(self, job: PhotoJob, group_name: Optional[str]) -> PhotoJob:
        pass

    @abstractmethod
    async def delete(self, job: PhotoJob) -> None:
        pass
