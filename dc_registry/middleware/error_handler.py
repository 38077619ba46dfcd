from http import HTTPStatus

import structlog
from bson.errors import InvalidId
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from dc_registry.models.exceptions.registry_errors import CastError, ErrorKind, RegistryError

logger = structlog.get_logger()

GENERIC_SERVER_ERROR = 'An unexpected error occurred'

# (status, name override, message override), in order of precedence
ERROR_RESPONSES = {
    ErrorKind.UNAUTHORIZED: (401, None, None),
    ErrorKind.FORBIDDEN: (403, None, None),
    ErrorKind.INVALID_ARGUMENT: (400, None, None),
    ErrorKind.NOT_FOUND: (404, 'Not found', None),
    ErrorKind.STATE_CONFLICT: (409, None, None),
    ErrorKind.CAST_ERROR: (404, 'Not found', 'Id not found'),
}


def map_error(exc: Exception, sanitize_server_errors: bool = False) -> tuple[int, str, str]:
    """
    Maps an exception to the status code, error name and message reported to the client.

    RegistryErrors map by kind. An id the database driver could not parse is treated as a CastError. Anything
    else is a 500 with the exception class name and text, the text replaced by a generic message if
    `sanitize_server_errors` is set.

    :param exc: the exception raised while handling a request
    :param sanitize_server_errors: hide the message of unclassified errors
    :return: (status_code, name, message)
    """
    if isinstance(exc, InvalidId):
        exc = CastError(str(exc))

    if isinstance(exc, RegistryError):
        status_code, name, message = ERROR_RESPONSES[exc.kind]
        return status_code, name or exc.name, message or exc.message

    message = GENERIC_SERVER_ERROR if sanitize_server_errors else str(exc)
    return 500, exc.__class__.__name__, message


def status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return str(status_code)


def error_response(exc: Exception, sanitize_server_errors: bool = False) -> JSONResponse:
    status_code, name, message = map_error(exc, sanitize_server_errors)
    return JSONResponse({'error': name, 'message': message}, status_code=status_code)


class ErrorHandlerMiddleware:
    """
    Catch-all for exceptions escaping the routes, their dependencies and the services they await.

    Handlers do not catch their own errors; this is the one place status codes for failures are decided. If the
    response has already started nothing more can be sent, so the exception is re-raised for the server to deal
    with instead.
    """

    def __init__(self, app: ASGIApp, sanitize_server_errors: bool = False) -> None:
        self.app = app
        self.sanitize_server_errors = sanitize_server_errors

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope['type'] != 'http':
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message['type'] == 'http.response.start':
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            logger.error(
                f"error handler received error: {exc.__class__.__name__} {exc}",
                exc_info=not isinstance(exc, (RegistryError, InvalidId)),
            )
            if response_started:
                logger.debug("error handler skipped, response already started")
                raise
            response = error_response(exc, self.sanitize_server_errors)
            await response(scope, receive, send)


def register_error_handlers(app: FastAPI) -> None:
    """
    Gives framework raised errors (bad request bodies, unknown routes) the same {error, message} body as
    everything else.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = '; '.join(
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        logger.warning(f"Validation error on {request.url.path}: {problems}")
        return JSONResponse(
            {'error': ErrorKind.INVALID_ARGUMENT.value, 'message': problems},
            status_code=400,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.info(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
        return JSONResponse(
            {'error': status_phrase(exc.status_code), 'message': str(exc.detail)},
            status_code=exc.status_code,
            headers=getattr(exc, 'headers', None),
        )
