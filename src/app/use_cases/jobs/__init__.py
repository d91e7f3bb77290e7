"""Photo job use cases"""
from .get_dashboard import GetDashboard
from .get_job import GetJob
from .rename_job import RenameJob
from .delete_job import DeleteJob
from .dtos import (
    JobDTO,
    JobStatsDTO,
    DashboardResponseDTO,
    JobResponseDTO,
    DeleteJobResponseDTO,
    RenameJobCommandDTO,
)

__all__ = [
    "GetDashboard",
    "GetJob",
    "RenameJob",
    "DeleteJob",
    "JobDTO",
    "JobStatsDTO",
    "DashboardResponseDTO",
    "JobResponseDTO",
    "DeleteJobResponseDTO",
    "RenameJobCommandDTO",
]
