from enum import Enum

from pydantic import BaseModel, Field


class Status(str, Enum):
    OK = '😇'
    UNKNOWN = '🤔'
    ERROR = '😱'


class DbHealth(BaseModel):
    status: Status = Status.UNKNOWN
    statusText: str = 'N/A'


class HealthReport(BaseModel):
    """
    Body of the /health endpoint.
    """
    db: DbHealth = Field(default_factory=DbHealth)
    version: str
