"""
Test configuration and fixtures for the Electricity Price API tests.
Contains shared fixtures and test utilities.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from electricity_api.config import Settings
from electricity_api.main import create_app
from electricity_api.services.auth_service import AuthService
from electricity_api.services.data_service import PriceDataService

TEST_SECRET = "test-signing-secret"
TEST_USERS = "admin:secret,analyst:s3cr3t:with:colons"

SAMPLE_CSV = """state,price,timestamp
Vic,81.52,2025-06-24 00:00:00
Vic,76.32,2025-06-24 00:30:00
NSW,90.15,2025-06-24 00:00:00
NSW,85.20,2025-06-24 00:30:00
QLD,70.10,2025-06-24 00:00:00
QLD,75.50,2025-06-24 00:30:00
"""


def write_csv(directory: Path, content: str, name: str = "prices.csv") -> Path:
    """Write CSV content to a file and return its path."""
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def csv_path(tmp_path) -> Path:
    """
    Path to a well-formed dataset with Vic, NSW and QLD records.
    """
    return write_csv(tmp_path, SAMPLE_CSV)


@pytest.fixture
def test_settings(csv_path) -> Settings:
    """
    Settings pointing at the sample dataset, isolated from any .env file.
    """
    return Settings(
        _env_file=None,
        jwt_secret=TEST_SECRET,
        api_users=TEST_USERS,
        api_username=None,
        api_password=None,
        csv_data_path=str(csv_path),
        data_reload_interval_seconds=0,
    )


@pytest.fixture
def auth_service() -> AuthService:
    """
    Create an AuthService with two users.
    """
    return AuthService(jwt_secret=TEST_SECRET, api_users=TEST_USERS)


@pytest.fixture
def data_service(csv_path) -> PriceDataService:
    """
    Create an unloaded PriceDataService over the sample dataset.
    """
    return PriceDataService(csv_path)


@pytest.fixture
def test_app(test_settings):
    """
    Create a test instance of the FastAPI application.
    """
    return create_app(test_settings)


@pytest.fixture
def test_client(test_app):
    """
    Create a test client for the FastAPI application.
    """
    return TestClient(test_app)


@pytest.fixture
def auth_headers(test_app):
    """
    Authorization header carrying a valid token for 'admin'.
    """
    token = test_app.state.auth_service.issue_token("admin").token
    return {"Authorization": f"Bearer {token}"}
