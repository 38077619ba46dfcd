from enum import Enum


class ErrorKind(str, Enum):
    """
    The closed set of failures the API reports with a specific status code.
    Anything raised that is not a RegistryError is treated as unclassified.
    """
    UNAUTHORIZED = 'Unauthorized'
    FORBIDDEN = 'Forbidden'
    INVALID_ARGUMENT = 'InvalidArgument'
    NOT_FOUND = 'NotFound'
    STATE_CONFLICT = 'StateConflict'
    CAST_ERROR = 'CastError'


class RegistryError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def name(self) -> str:
        return self.kind.value


class Unauthorized(RegistryError):
    kind = ErrorKind.UNAUTHORIZED


class Forbidden(RegistryError):
    kind = ErrorKind.FORBIDDEN


class InvalidArgument(RegistryError):
    kind = ErrorKind.INVALID_ARGUMENT


class NotFound(RegistryError):
    kind = ErrorKind.NOT_FOUND


class StateConflict(RegistryError):
    kind = ErrorKind.STATE_CONFLICT


class CastError(RegistryError):
    """
    An identifier could not be converted to the store's id type, e.g. a path id that is not a valid ObjectId.
    """
    kind = ErrorKind.CAST_ERROR

    def __init__(self, message: str, value: str | None = None):
        self.value = value
        super().__init__(message)
