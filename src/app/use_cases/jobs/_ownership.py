"""Shared lookup for use cases acting on a single job"""

from typing import Optional, Tuple
from libs.result import Error
from src.app.repositories.photo_job_repository import PhotoJobRepository
from src.domain.photo_job import PhotoJob


async def load_owned_job(
    job_repo: PhotoJobRepository, job_id: int, user_id: str
) -> Tuple[Optional[PhotoJob], Optional[Error]]:
    """Return the job if it exists and belongs to user_id, else the error to report"""
    job = await job_repo.get_by_id(job_id)
    if not job:
        return None, Error(code="JOB_NOT_FOUND", message="Job not found")
    if str(job.user_id) != str(user_id):
        return None, Error(code="FORBIDDEN", message="Forbidden")
    return job, None
