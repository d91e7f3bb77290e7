"""Photo Job API Routes

Dashboard listing and per-job read, rename and delete for the signed-in
user.
"""

from fastapi import APIRouter, Depends, Path, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.rate_limit import rate_limit
from src.api.schemas.billing_request import RenameJobRequestSchema
from src.app.services.identity_provider import Principal
from src.app.use_cases.jobs import (
    DashboardResponseDTO,
    DeleteJob,
    DeleteJobResponseDTO,
    GetDashboard,
    GetJob,
    JobResponseDTO,
    RenameJob,
    RenameJobCommandDTO,
)
from src.adapter.repositories.photo_job_repository import SqlAlchemyPhotoJobRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, require_principal

router = APIRouter(
    tags=["Jobs"],
    dependencies=[Depends(rate_limit("general", "RATE_LIMIT_GENERAL_MAX"))],
)


@router.get("/dashboard", response_model=DashboardResponseDTO, status_code=status.HTTP_200_OK)
async def get_dashboard(
    principal: Principal = Depends(require_principal),
    session: AsyncSession = Depends(get_session),
):
    """
    Recent jobs (last 50, newest first) and spend statistics.

    **Returns:**
    - 200: `{success, jobs, stats: {totalJobs, totalPhotos, totalSpent, thisMonth}}`
    - 401: Not signed in
    """
    use_case = GetDashboard(SqlAlchemyPhotoJobRepository(session))
    result = await use_case.execute(principal.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/jobs/{job_id}", response_model=JobResponseDTO, status_code=status.HTTP_200_OK)
async def get_job(
    job_id: int = Path(..., gt=0, description="Photo job ID"),
    principal: Principal = Depends(require_principal),
    session: AsyncSession = Depends(get_session),
):
    use_case = GetJob(SqlAlchemyPhotoJobRepository(session))
    result = await use_case.execute(job_id, principal.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch("/jobs/{job_id}", response_model=JobResponseDTO, status_code=status.HTTP_200_OK)
async def rename_job(
    body: RenameJobRequestSchema,
    job_id: int = Path(..., gt=0, description="Photo job ID"),
    principal: Principal = Depends(require_principal),
    session: AsyncSession = Depends(get_session),
):
    """
    Set or clear the job's group name.

    **Request body:**
    - `groupName` (required): New label, max 140 characters; "" clears it

    **Returns:**
    - 200: `{success, job}`
    - 400: Missing or too long groupName
    - 403: Job belongs to another user
    - 404: Job not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = RenameJob(uow, SqlAlchemyPhotoJobRepository(session))
    result = await use_case.execute(
        RenameJobCommandDTO(job_id=job_id, user_id=principal.user_id, group_name=body.group_name)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("/jobs/{job_id}", response_model=DeleteJobResponseDTO, status_code=status.HTTP_200_OK)
async def delete_job(
    job_id: int = Path(..., gt=0, description="Photo job ID"),
    principal: Principal = Depends(require_principal),
    session: AsyncSession = Depends(get_session),
):
    uow = SqlAlchemyUnitOfWork(session)
    use_case = DeleteJob(uow, SqlAlchemyPhotoJobRepository(session))
    result = await use_case.execute(job_id, principal.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
