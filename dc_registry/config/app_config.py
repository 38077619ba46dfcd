import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class AuthConfig(BaseModel):
    """
    Bearer token settings for the protected (write) endpoints.

    When `enabled` is False every protected endpoint is open; this is only intended for local development.
    """
    enabled: bool = True
    jwt_key: str = ''
    jwt_key_url: str = ''
    write_scope: str = 'DATA-CENTER-REGISTRY.WRITE'


class MongoConfig(BaseModel):
    url: str = 'mongodb://localhost:27017'
    database: str = 'dc-registry'
    collection: str = 'dataCenters'
    user: str | None = None
    password: str | None = None
    server_selection_timeout_ms: int = 5000


class AppConfig(BaseModel):
    server_port: int = 8080
    openapi_path: str = '/api-docs'
    auth: AuthConfig = Field(default_factory=AuthConfig)
    mongo: MongoConfig = Field(default_factory=MongoConfig)
    db_health_interval: float = 30.0
    version: str | None = None
    commit_id: str | None = None
    sanitize_server_errors: bool = False


def load_config() -> AppConfig:
    """
    Builds an AppConfig from the environment, any unset variable keeping the model default.
    """
    return AppConfig(
        server_port=int(os.getenv('PORT', '8080')),
        openapi_path=os.getenv('OPENAPI_PATH', '/api-docs'),
        auth=AuthConfig(
            enabled=_env_flag('AUTH_ENABLED', 'true'),
            jwt_key=os.getenv('JWT_KEY', ''),
            jwt_key_url=os.getenv('JWT_KEY_URL', ''),
            write_scope=os.getenv('WRITE_SCOPE', 'DATA-CENTER-REGISTRY.WRITE'),
        ),
        mongo=MongoConfig(
            url=os.getenv('MONGO_URL', 'mongodb://localhost:27017'),
            database=os.getenv('MONGO_DB', 'dc-registry'),
            collection=os.getenv('MONGO_COLLECTION', 'dataCenters'),
            user=os.getenv('MONGO_USER') or None,
            password=os.getenv('MONGO_PASS') or None,
            server_selection_timeout_ms=int(os.getenv('MONGO_SERVER_SELECTION_TIMEOUT_MS', '5000')),
        ),
        db_health_interval=float(os.getenv('DB_HEALTH_INTERVAL', '30')),
        version=os.getenv('SVC_VERSION') or None,
        commit_id=os.getenv('SVC_COMMIT_ID') or None,
        sanitize_server_errors=_env_flag('SANITIZE_SERVER_ERRORS', 'false'),
    )


@lru_cache
def get_config() -> AppConfig:
    return load_config()
