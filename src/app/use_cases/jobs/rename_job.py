"""RenameJob Use Case

Sets or clears the user-defined group label of a job.
"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.photo_job_repository import PhotoJobRepository
from src.domain.photo_job import GROUP_NAME_MAX_LENGTH
from ._ownership import load_owned_job
from .dtos import JobDTO, JobResponseDTO, RenameJobCommandDTO


class RenameJob:
    """
    Use Case: Rename a job's group

    Business Rules:
    1. group_name is required; an empty (or blank) value clears it
    2. At most 140 characters
    3. Only the job owner may rename it
    """

    def __init__(self, uow: UnitOfWork, job_repo: PhotoJobRepository):
        self.uow = uow
        self.job_repo = job_repo

    async def execute(self, command: RenameJobCommandDTO) -> Result[JobResponseDTO]:
        if command.group_name is None:
            return Return.err(Error(code="VALIDATION_ERROR", message="groupName is required"))

        if len(command.group_name) > GROUP_NAME_MAX_LENGTH:
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message=f"Group name must be {GROUP_NAME_MAX_LENGTH} characters or less",
                )
            )

        group_name = command.group_name.strip() or None

        job, error = await load_owned_job(self.job_repo, command.job_id, command.user_id)
        if error:
            return Return.err(error)

        try:
            job = await self.job_repo.update_group_name(job, group_name)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(code="INTERNAL_ERROR", message="Failed to rename job", reason=str(e))
            )

        return Return.ok(JobResponseDTO(job=JobDTO.from_entity(job)))
