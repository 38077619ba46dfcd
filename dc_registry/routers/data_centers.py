from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, Query, Response

from dc_registry.config.app_config import AuthConfig
from dc_registry.dependencies import data_center_service_dependency
from dc_registry.middleware.auth import auth_filter
from dc_registry.models.data_center import DataCenter
from dc_registry.models.query_filters import QueryFilters
from dc_registry.services.data_center_service import DataCenterService

logger = structlog.get_logger()


def create_router(auth_config: AuthConfig) -> APIRouter:
    """
    Routes for reading and maintaining data center records. Reads are open, writes require the write scope.
    """
    router = APIRouter(prefix='/data-centers', tags=['data-centers'])
    write_auth = auth_filter(auth_config, [auth_config.write_scope])

    @router.get('/{centerId}', response_model=DataCenter)
    async def get_data_center(
                centerId: str,
                service: DataCenterService = Depends(data_center_service_dependency),
            ):
        return await service.by_id(centerId)

    @router.post('/search', response_model=list[DataCenter])
    async def search_data_centers(
                query: dict[str, Any] = Body(...),
                service: DataCenterService = Depends(data_center_service_dependency),
            ):
        """
        Advanced search: the body is passed to the database as a query document.
        """
        return await service.adv_search_by_query(query)

    @router.get('', response_model=list[DataCenter])
    async def list_data_centers(
                country: str | None = Query(None, description='Comma separated list of countries'),
                name: str | None = Query(None, description='Comma separated list of names'),
                centerId: str | None = Query(None, description='Comma separated list of center ids'),
                type_: str | None = Query(None, alias='type', description='Comma separated list of types'),
                service: DataCenterService = Depends(data_center_service_dependency),
            ):
        filters = QueryFilters.from_query_params(country, name, centerId, type_)
        return await service.get_many(filters)

    @router.post('', response_model=DataCenter, status_code=201, dependencies=[Depends(write_auth)])
    async def create_data_center(
                record: dict[str, Any] = Body(...),
                service: DataCenterService = Depends(data_center_service_dependency),
            ):
        return await service.create(record)

    @router.put('', response_model=DataCenter, dependencies=[Depends(write_auth)])
    async def update_data_center(
                record: dict[str, Any] = Body(...),
                service: DataCenterService = Depends(data_center_service_dependency),
            ):
        return await service.update(record)

    @router.delete('/{centerId}', status_code=204, dependencies=[Depends(write_auth)])
    async def delete_data_center(
                centerId: str,
                service: DataCenterService = Depends(data_center_service_dependency),
            ):
        await service.delete_dc(centerId)
        return Response(status_code=204)

    return router
