from fastapi.requests import Request

from dc_registry.config.app_config import AppConfig
from dc_registry.services.data_center_service import DataCenterService
from dc_registry.services.health_service import HealthState


async def data_center_service_dependency(request: Request) -> DataCenterService:
    """
    The DataCenterService created for this application at startup.
    """
    return request.app.state.data_center_service


async def health_state_dependency(request: Request) -> HealthState:
    return request.app.state.health


async def app_config_dependency(request: Request) -> AppConfig:
    return request.app.state.config
