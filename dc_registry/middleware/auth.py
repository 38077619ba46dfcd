from typing import Callable, Iterable

import requests
import structlog
from cachetools import cached, TTLCache
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

from dc_registry.config.app_config import AuthConfig
from dc_registry.models.exceptions.registry_errors import Forbidden, Unauthorized

security = HTTPBearer(auto_error=False)
logger = structlog.get_logger()


@cached(TTLCache(maxsize=10, ttl=3600))
def fetch_public_key(key_url: str) -> str:
    response = requests.get(key_url, timeout=10)
    response.raise_for_status()
    return response.text


def get_verification_key(auth_config: AuthConfig) -> str:
    """
    The configured PEM public key, or if none is configured the key served at the configured key URL.
    """
    if auth_config.jwt_key:
        return auth_config.jwt_key
    if not auth_config.jwt_key_url:
        logger.error("Auth is enabled but neither JWT_KEY nor JWT_KEY_URL is set")
        raise Unauthorized("Invalid or expired token")
    try:
        return fetch_public_key(auth_config.jwt_key_url)
    except Exception as error:
        logger.error(f"Error fetching public key: {error.__class__.__name__} {error}")
        # Reported as 401 to avoid leaking details of the key service to the client
        raise Unauthorized("Invalid or expired token")


def validate_token(token: str, key: str) -> dict:
    try:
        return jwt.decode(token, key, algorithms=['RS256'], options={'verify_aud': False})
    except ExpiredSignatureError as signature_error:
        logger.error(f"Error processing token: Signature expired {signature_error}")
        raise Unauthorized("Invalid or expired token")
    except JWTClaimsError as claims_error:
        logger.error(f"Error processing token: Claims error {claims_error}")
        raise Forbidden("Forbidden")
    except JWTError as error:
        logger.error(f"Error processing token: {error.__class__.__name__} {error}")
        raise Unauthorized("Invalid or expired token")


def get_scopes(payload: dict) -> set[str]:
    """
    Scopes granted by a token, from the `context.scope` list and/or an OAuth style space separated `scope` claim.
    """
    scopes = set()
    context = payload.get('context') or {}
    for claim in (context.get('scope'), payload.get('scope')):
        if isinstance(claim, str):
            scopes.update(claim.split())
        elif isinstance(claim, list):
            scopes.update(str(s) for s in claim)
    return scopes


def check_scopes(payload: dict, required_scopes: Iterable[str]) -> None:
    missing = set(required_scopes) - get_scopes(payload)
    if missing:
        logger.error(f"Token validates, but is missing required scopes {sorted(missing)}")
        raise Forbidden("Forbidden")


def auth_filter(auth_config: AuthConfig, scopes: list[str]) -> Callable:
    """
    Builds a route dependency which lets a request through only with a valid bearer token granting all `scopes`.

    With auth disabled the dependency lets every request through after logging a warning.

    :param auth_config:
    :param scopes: scopes the token must grant
    :return: dependency for `Depends` / `dependencies=[...]`
    """
    if not auth_config.enabled:
        async def no_auth() -> None:
            logger.warning('calling protected endpoint without auth enabled')
            return None

        return no_auth

    async def bearer_auth(credentials: HTTPAuthorizationCredentials | None = Depends(security)) -> dict:
        if credentials is None:
            logger.info('No bearer token provided')
            raise Unauthorized("Missing or invalid Authorization header")
        payload = validate_token(credentials.credentials, get_verification_key(auth_config))
        check_scopes(payload, scopes)
        return payload

    return bearer_auth
