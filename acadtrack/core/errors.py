"""Error taxonomy for the grading workflow.

Domain components raise these; the grading workflow is the only place that
turns storage failures into them, and the app's exception handler is the only
place that maps an ``ErrorKind`` onto an HTTP status.
"""
import enum


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    PRECONDITION = "precondition"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    CONFLICT = "conflict"


class GradingError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(GradingError):
    kind = ErrorKind.NOT_FOUND


class PreconditionError(GradingError):
    kind = ErrorKind.PRECONDITION


class AuthorizationError(GradingError):
    kind = ErrorKind.AUTHORIZATION


class ValidationError(GradingError):
    kind = ErrorKind.VALIDATION


class ConflictError(GradingError):
    kind = ErrorKind.CONFLICT
