"""DeleteJob Use Case"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.photo_job_repository import PhotoJobRepository
from ._ownership import load_owned_job
from .dtos import DeleteJobResponseDTO


class DeleteJob:
    """Use Case: Delete a job owned by the caller"""

    def __init__(self, uow: UnitOfWork, job_repo: PhotoJobRepository):
        self.uow = uow
        self.job_repo = job_repo

    async def execute(self, job_id: int, user_id: str) -> Result[DeleteJobResponseDTO]:
        job, error = await load_owned_job(self.job_repo, job_id, user_id)
        if error:
            return Return.err(error)

        try:
            await self.job_repo.delete(job)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(code="INTERNAL_ERROR", message="Failed to delete job", reason=str(e))
            )

        return Return.ok(DeleteJobResponseDTO())
