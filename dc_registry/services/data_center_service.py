from typing import Any

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, OperationFailure

from dc_registry.config.app_config import MongoConfig
from dc_registry.models.data_center import DataCenter
from dc_registry.models.exceptions.registry_errors import CastError, InvalidArgument, NotFound, StateConflict
from dc_registry.models.query_filters import QueryFilters

logger = structlog.get_logger()


def create_client(mongo_config: MongoConfig) -> AsyncIOMotorClient:
    kwargs = {'serverSelectionTimeoutMS': mongo_config.server_selection_timeout_ms}
    if mongo_config.user:
        kwargs['username'] = mongo_config.user
        kwargs['password'] = mongo_config.password
    logger.info(f"Creating MongoDB client for database {mongo_config.database}")
    return AsyncIOMotorClient(mongo_config.url, **kwargs)


def to_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as error:
        raise CastError(f"Cast to ObjectId failed for value {value!r}", value) from error


def validate_record(record: Any) -> DataCenter:
    try:
        return DataCenter.model_validate(record)
    except ValidationError as error:
        problems = '; '.join(
            f"{'.'.join(str(loc) for loc in e['loc']) or 'body'}: {e['msg']}" for e in error.errors()
        )
        raise InvalidArgument(f"Invalid data center: {problems}") from error


def filters_to_query(filters: QueryFilters) -> dict[str, Any]:
    """
    Converts listing filters to a MongoDB query. Fields with no values place no constraint on the result.
    """
    query = {}
    for field, values in filters.model_dump().items():
        if values:
            query[field] = {'$in': values}
    return query


class DataCenterService:
    """
    Data access for data center records, raising RegistryErrors for every failure the caller should report
    with a specific status.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def ensure_indexes(self) -> None:
        await self.collection.create_index('centerId', unique=True)

    async def by_id(self, id: str) -> DataCenter:
        document = await self.collection.find_one({'_id': to_object_id(id)})
        if document is None:
            raise NotFound(f"Data center with id {id} not found")
        return DataCenter.from_document(document)

    async def adv_search_by_query(self, query: Any) -> list[DataCenter]:
        if not isinstance(query, dict):
            raise InvalidArgument("Search query must be a JSON object")
        try:
            documents = await self.collection.find(query).to_list(length=None)
        except OperationFailure as error:
            logger.warning(f"Search query rejected by the database: {error}")
            raise InvalidArgument(f"Invalid search query: {error}") from error
        return [DataCenter.from_document(d) for d in documents]

    async def get_many(self, filters: QueryFilters) -> list[DataCenter]:
        query = filters_to_query(filters)
        if filters.is_empty():
            logger.info("Listing all data centers")
        documents = await self.collection.find(query).to_list(length=None)
        return [DataCenter.from_document(d) for d in documents]

    async def create(self, record: Any) -> DataCenter:
        dc = validate_record(record)
        if dc.id is not None:
            raise InvalidArgument("id must not be provided when creating a data center")
        if await self.collection.find_one({'centerId': dc.centerId}) is not None:
            raise StateConflict(f"A data center with centerId {dc.centerId} already exists")
        try:
            result = await self.collection.insert_one(dc.to_document())
        except DuplicateKeyError as error:
            raise StateConflict(f"A data center with centerId {dc.centerId} already exists") from error
        logger.info(f"Created data center {dc.centerId} with id {result.inserted_id}")
        return dc.model_copy(update={'id': str(result.inserted_id)})

    async def update(self, record: Any) -> DataCenter:
        dc = validate_record(record)
        if dc.id is None:
            raise InvalidArgument("id is required to update a data center")
        object_id = to_object_id(dc.id)
        clash = await self.collection.find_one({'centerId': dc.centerId, '_id': {'$ne': object_id}})
        if clash is not None:
            raise StateConflict(f"centerId {dc.centerId} is already used by data center {clash['_id']}")
        try:
            result = await self.collection.replace_one({'_id': object_id}, dc.to_document())
        except DuplicateKeyError as error:
            raise StateConflict(f"centerId {dc.centerId} is already in use") from error
        if result.matched_count == 0:
            raise NotFound(f"Data center with id {dc.id} not found")
        logger.info(f"Updated data center {dc.centerId} with id {dc.id}")
        return dc

    async def delete_dc(self, id: str) -> None:
        result = await self.collection.delete_one({'_id': to_object_id(id)})
        if result.deleted_count == 0:
            raise NotFound(f"Data center with id {id} not found")
        logger.info(f"Deleted data center with id {id}")
