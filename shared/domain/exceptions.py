"""
Domain Errors

Structured failures raised by command handlers. The HTTP layer maps
each kind to a status code; tasks log them.
"""


class DomainError(Exception):
    """Base class for failures the core reports to its callers"""

    code = 'error'
    status_code = 400

    def __init__(self, message: str = '', **details):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.details = details


class NotFound(DomainError):
    """Referenced booking, leave request, transaction, user or property is absent"""

    code = 'not_found'
    status_code = 404


class Forbidden(DomainError):
    """Caller lacks the required role or ownership"""

    code = 'forbidden'
    status_code = 403


class InvalidState(DomainError):
    """Operation is not valid from the record's current status"""

    code = 'invalid_state'


class InvalidInput(DomainError):
    """Malformed input that has no safe default"""

    code = 'invalid_input'


class ConflictExists(DomainError):
    """A conflicting record already exists (e.g. a pending leave request)"""

    code = 'conflict'
    status_code = 409


class StorageError(DomainError):
    """The record store failed; the operation was rolled back"""

    code = 'storage_error'
    status_code = 500
