"""GetDashboard Use Case

Recent photo jobs and spend statistics for the signed-in user.
"""

from datetime import datetime, timezone
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.photo_job_repository import PhotoJobRepository
from .dtos import DashboardResponseDTO, JobDTO, JobStatsDTO

RECENT_JOBS_LIMIT = 50


class GetDashboard:
    """
    Use Case: Build the user's dashboard

    Returns the 50 most recent jobs plus totals. thisMonth sums the cost
    of jobs created since the first day of the current UTC month.
    """

    def __init__(self, job_repo: PhotoJobRepository):
        self.job_repo = job_repo

    async def execute(self, user_id: str, now: Optional[datetime] = None) -> Result[DashboardResponseDTO]:
        now = now or datetime.now(timezone.utc)
        month_start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)

        jobs = await self.job_repo.list_recent_by_user(user_id, limit=RECENT_JOBS_LIMIT)
        stats = await self.job_repo.get_stats_by_user(user_id, month_start)

        return Return.ok(
            DashboardResponseDTO(
                jobs=[JobDTO.from_entity(job) for job in jobs],
                stats=JobStatsDTO(
                    total_jobs=stats.total_jobs,
                    total_photos=stats.total_photos,
                    total_spent=float(stats.total_spent),
                    this_month=float(stats.this_month),
                ),
            )
        )
