import structlog
from fastapi import APIRouter, Depends, Request
from starlette.responses import JSONResponse

from dc_registry.config.app_config import AppConfig
from dc_registry.dependencies import app_config_dependency, health_state_dependency
from dc_registry.models.health_status import HealthReport, Status
from dc_registry.services.health_service import HealthState

router = APIRouter()
logger = structlog.get_logger()


def version_string(config: AppConfig, default_version: str) -> str:
    return f"{config.version or default_version} - {config.commit_id}"


@router.get("/health", response_model=HealthReport)
async def health(
            request: Request,
            health_state: HealthState = Depends(health_state_dependency),
            config: AppConfig = Depends(app_config_dependency),
        ):
    """
    * 200 OK if the database is reachable
    * 500 INTERNAL SERVER ERROR if the database state is unknown or in error

    Either way the body reports the database status and the service version.
    """
    db_health = health_state.snapshot()
    report = HealthReport(db=db_health, version=version_string(config, request.app.version))
    status_code = 200 if db_health.status == Status.OK else 500
    return JSONResponse(report.model_dump(mode='json'), status_code=status_code)
