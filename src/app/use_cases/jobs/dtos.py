"""Data Transfer Objects for Photo Job Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.photo_job import PhotoJob


class JobDTO(BaseModel):
    id: int
    prompt: str
    photo_count: int = Field(alias="photoCount")
    cost: float
    status: str
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    group_name: Optional[str] = Field(default=None, alias="groupName")

    class Config:
        populate_by_name = True

    @classmethod
    def from_entity(cls, job: PhotoJob) -> "JobDTO":
        status = job.status.value if hasattr(job.status, "value") else str(job.status)
        return cls(
            id=job.id,
            prompt=job.prompt,
            photo_count=job.photo_count,
            cost=float(job.cost),
            status=status,
            download_url=job.download_url,
            created_at=job.created_at,
            updated_at=job.updated_at,
            group_name=job.group_name or None,
        )


class JobStatsDTO(BaseModel):
    total_jobs: int = Field(alias="totalJobs")
    total_photos: int = Field(alias="totalPhotos")
    total_spent: float = Field(alias="totalSpent")
    this_month: float = Field(alias="thisMonth")

    class Config:
        populate_by_name = True


class DashboardResponseDTO(BaseModel):
    success: bool = True
    jobs: List[JobDTO]
    stats: JobStatsDTO


class JobResponseDTO(BaseModel):
    success: bool = True
    job: JobDTO


class DeleteJobResponseDTO(BaseModel):
    success: bool = True
    message: str = "Job deleted successfully"


class RenameJobCommandDTO(BaseModel):
    """
    Command DTO for renaming a job's group

    group_name None means the field was missing from the request;
    an empty string clears the current name.
    """

    job_id: int
    user_id: str
    group_name: Optional[str] = None
