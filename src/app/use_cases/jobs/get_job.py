"""GetJob Use Case"""

from libs.result import Result, Return
from src.app.repositories.photo_job_repository import PhotoJobRepository
from ._ownership import load_owned_job
from .dtos import JobDTO, JobResponseDTO


class GetJob:
    def __init__(self, job_repo: PhotoJobRepository):
        self.job_repo = job_repo

    async def execute(self, job_id: int, user_id: str) -> Result[JobResponseDTO]:
        job, error = await load_owned_job(self.job_repo, job_id, user_id)
        if error:
            return Return.err(error)
        return Return.ok(JobResponseDTO(job=JobDTO.from_entity(job)))
