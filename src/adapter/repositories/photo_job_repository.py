"""SQLAlchemy implementation of PhotoJobRepository"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import case, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.photo_job_repository import PhotoJobRepository, JobStats
from src.domain.base import utc_now
from src.domain.photo_job import PhotoJob


class SqlAlchemyPhotoJobRepository(PhotoJobRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_recent_by_user(self, user_id: str, limit: int = 50) -> List[PhotoJob]:
        stmt = (
            select(PhotoJob)
            .where(PhotoJob.user_id == user_id)
            .order_by(PhotoJob.created_at.desc(), PhotoJob.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_stats_by_user(self, user_id: str, month_start: datetime) -> JobStats:
        stmt = select(
            func.count(PhotoJob.id),
            func.coalesce(func.sum(PhotoJob.photo_count), 0),
            func.coalesce(func.sum(PhotoJob.cost), 0),
            func.coalesce(
                func.sum(case((PhotoJob.created_at >= month_start, PhotoJob.cost), else_=0)),
                0,
            ),
        ).where(PhotoJob.user_id == user_id)
        result = await self.session.execute(stmt)
        total_jobs, total_photos, total_spent, this_month = result.one()
        return JobStats(
            total_jobs=int(total_jobs or 0),
            total_photos=int(total_photos or 0),
            total_spent=Decimal(str(total_spent or 0)),
            this_month=Decimal(str(this_month or 0)),
        )

    async def get_by_id(self, job_id: int) -> Optional[PhotoJob]:
        stmt = select(PhotoJob).where(PhotoJob.id == job_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_group_name(self, job: PhotoJob, group_name: Optional[str]) -> PhotoJob:
        job.group_name = group_name
        job.updated_at = utc_now()
        self.session.add(job)
        await self.session.flush()
        await self.session.refresh(job)
        return job

    async def delete(self, job: PhotoJob) -> None:
        await self.session.delete(job)
        await self.session.flush()
