from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dc_registry.config.app_config import AppConfig, AuthConfig
from dc_registry.main import create_app
from dc_registry.services.data_center_service import DataCenterService
from dc_registry.services.health_service import HealthState

pytest_plugins = [
    "tests.fixtures.auth",
    "tests.fixtures.data_centers",
]


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(enabled=False)


@pytest.fixture
def app_config(auth_config) -> AppConfig:
    return AppConfig(auth=auth_config, version='9.9.9', commit_id='abc123')


@pytest.fixture
def health_state() -> HealthState:
    return HealthState()


@pytest.fixture
def data_center_service_mock() -> AsyncMock:
    """
    Stands in for the MongoDB backed service, each operation an AsyncMock to set up per test.
    """
    return AsyncMock(spec=DataCenterService)


@pytest.fixture
def app(app_config, health_state, data_center_service_mock) -> FastAPI:
    return create_app(app_config, health_state, data_center_service_mock)


@pytest.fixture
def test_client(app) -> TestClient:
    return TestClient(app)
