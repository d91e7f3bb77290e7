import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Unit of work whose commit/rollback can be asserted"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_ledger_repo():
    """Mock credit ledger repository"""
    repo = MagicMock()
    repo.get_by_user_id = AsyncMock(return_value=None)
    repo.add_credits = AsyncMock()
    return repo


@pytest.fixture
def mock_purchase_repo():
    """Mock purchase repository"""
    repo = MagicMock()
    repo.get_by_session_id = AsyncMock(return_value=None)
    repo.create = AsyncMock(side_effect=lambda purchase: purchase)
    return repo


@pytest.fixture
def mock_job_repo():
    """Mock photo job repository"""
    return MagicMock()
