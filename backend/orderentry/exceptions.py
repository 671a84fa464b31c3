"""
Unified exception hierarchy.

Every lifecycle error subclasses BaseAppException and carries:
- type:        error category (invalid_state / invalid_argument / ...)
- code:        business error code (ORDER_ALREADY_SIGNED / VOID_REASON_REQUIRED / ...)
- message:     human readable description
- detail:      optional extra payload (dict / list / None)
- http_status: status code used when the error reaches the HTTP layer

Services only raise; exception_handler formats the response.
"""


class BaseAppException(Exception):
    """Base class for all order entry errors."""

    type = 'error'
    code = 'UNKNOWN_ERROR'
    http_status = 500

    def __init__(self, message, code=None, detail=None, http_status=None):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.detail = detail
        super().__init__(message)


class InvalidStateError(BaseAppException):
    """Transition not permitted given the current flags of the order or group."""

    type = 'invalid_state'
    code = 'INVALID_STATE'
    http_status = 409


class InvalidArgumentError(BaseAppException):
    """Required actor/reason/date missing, or a logically impossible value."""

    type = 'invalid_argument'
    code = 'INVALID_ARGUMENT'
    http_status = 400


class UnimplementedError(BaseAppException):
    """
    Deliberate, permanent restriction.

    Cascade purge and undiscontinue raise this. They are not bugs waiting for a fix.
    """

    type = 'unimplemented'
    code = 'UNIMPLEMENTED'
    http_status = 501


class StorageError(BaseAppException):
    """Opaque persistence failure, propagated without interpretation."""

    type = 'storage_error'
    code = 'STORAGE_ERROR'
    http_status = 503


class ValidationError(BaseAppException):
    """Entity failed field-level validation before save."""

    type = 'validation_error'
    code = 'VALIDATION_ERROR'
    http_status = 400
