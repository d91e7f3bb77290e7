"""Integration tests for dashboard and photo job endpoints"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from httpx import AsyncClient
from sqlmodel import select

from src.domain.photo_job import JobStatus, PhotoJob


async def add_job(db_session, user_id="user_1", photo_count=4, created_at=None, **fields) -> PhotoJob:
    created_at = created_at or datetime.now(timezone.utc)
    job = PhotoJob(
        user_id=user_id,
        prompt=fields.pop("prompt", "Virtual staging, modern living room"),
        photo_count=photo_count,
        cost=Decimal(photo_count),
        status=fields.pop("status", JobStatus.COMPLETED),
        created_at=created_at,
        updated_at=created_at,
        **fields,
    )
    db_session.add(job)
    await db_session.commit()
    await db_session.refresh(job)
    return job


class TestDashboardEndpoint:
    """GET /api/dashboard"""

    @pytest.mark.asyncio
    async def test_dashboard_lists_own_jobs_with_stats(self, client: AsyncClient, db_session):
        # Arrange
        old = await add_job(db_session, photo_count=2, created_at=datetime.now(timezone.utc) - timedelta(days=70))
        recent = await add_job(db_session, photo_count=5, group_name="Kitchen")
        await add_job(db_session, user_id="user_2", photo_count=9)

        # Act
        response = await client.get("/api/dashboard")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [job["id"] for job in data["jobs"]] == [recent.id, old.id]
        assert data["jobs"][0]["groupName"] == "Kitchen"
        assert data["jobs"][0]["photoCount"] == 5
        assert data["stats"] == {
            "totalJobs": 2,
            "totalPhotos": 7,
            "totalSpent": 7.0,
            "thisMonth": 5.0,
        }

    @pytest.mark.asyncio
    async def test_dashboard_without_jobs(self, client: AsyncClient):
        # Act
        response = await client.get("/api/dashboard")

        # Assert
        assert response.status_code == 200
        assert response.json()["jobs"] == []
        assert response.json()["stats"]["totalJobs"] == 0

    @pytest.mark.asyncio
    async def test_dashboard_requires_sign_in(self, client: AsyncClient, auth):
        # Arrange
        auth.sign_out()

        # Act
        response = await client.get("/api/dashboard")

        # Assert
        assert response.status_code == 401


class TestJobEndpoints:
    """GET/PATCH/DELETE /api/jobs/{id}"""

    @pytest.mark.asyncio
    async def test_get_job(self, client: AsyncClient, db_session):
        # Arrange
        job = await add_job(db_session, download_url="https://cdn.example.com/jobs/1.zip")

        # Act
        response = await client.get(f"/api/jobs/{job.id}")

        # Assert
        assert response.status_code == 200
        body = response.json()["job"]
        assert body["id"] == job.id
        assert body["downloadUrl"] == "https://cdn.example.com/jobs/1.zip"
        assert body["status"] == "completed"

    @pytest.mark.asyncio
    async def test_get_missing_job(self, client: AsyncClient):
        # Act
        response = await client.get("/api/jobs/424242")

        # Assert
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "JOB_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_invalid_job_id(self, client: AsyncClient):
        # Act
        response = await client.get("/api/jobs/0")

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_rename_job(self, client: AsyncClient, db_session, session_factory):
        # Arrange
        job = await add_job(db_session)

        # Act
        response = await client.patch(f"/api/jobs/{job.id}", json={"groupName": "  Bedroom set  "})

        # Assert
        assert response.status_code == 200
        assert response.json()["job"]["groupName"] == "Bedroom set"
        async with session_factory() as session:
            stored = (await session.execute(select(PhotoJob).where(PhotoJob.id == job.id))).scalar_one()
        assert stored.group_name == "Bedroom set"

    @pytest.mark.asyncio
    async def test_rename_with_empty_string_clears_name(self, client: AsyncClient, db_session):
        # Arrange
        job = await add_job(db_session, group_name="Old")

        # Act
        response = await client.patch(f"/api/jobs/{job.id}", json={"groupName": ""})

        # Assert
        assert response.status_code == 200
        assert response.json()["job"]["groupName"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"groupName": "x" * 141}])
    async def test_rename_validation(self, client: AsyncClient, db_session, payload):
        # Arrange
        job = await add_job(db_session)

        # Act
        response = await client.patch(f"/api/jobs/{job.id}", json=payload)

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_rename_job_of_another_user_is_forbidden(self, client: AsyncClient, db_session, session_factory):
        # Arrange
        job = await add_job(db_session, user_id="user_2", group_name="Theirs")

        # Act
        response = await client.patch(f"/api/jobs/{job.id}", json={"groupName": "Mine"})

        # Assert
        assert response.status_code == 403
        async with session_factory() as session:
            stored = (await session.execute(select(PhotoJob).where(PhotoJob.id == job.id))).scalar_one()
        assert stored.group_name == "Theirs"

    @pytest.mark.asyncio
    async def test_delete_job(self, client: AsyncClient, db_session, session_factory):
        # Arrange
        job = await add_job(db_session)

        # Act
        response = await client.delete(f"/api/jobs/{job.id}")

        # Assert
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Job deleted successfully"}
        async with session_factory() as session:
            stored = (await session.execute(select(PhotoJob).where(PhotoJob.id == job.id))).scalar_one_or_none()
        assert stored is None

    @pytest.mark.asyncio
    async def test_delete_job_of_another_user_is_forbidden(self, client: AsyncClient, db_session):
        # Arrange
        job = await add_job(db_session, user_id="user_2")

        # Act
        response = await client.delete(f"/api/jobs/{job.id}")

        # Assert
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"
