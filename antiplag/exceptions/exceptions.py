class PlagiarismServiceError(Exception):
    """Base error. Subclasses name the failure kind the HTTP layer maps to a status."""

    status_code = 500
    code = "INTERNAL"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code.lower().replace("_", " "))


class NotFoundError(PlagiarismServiceError):
    status_code = 404
    code = "NOT_FOUND"


class InvalidArgumentError(PlagiarismServiceError):
    status_code = 400
    code = "INVALID_ARGUMENT"


class AlreadyExistsError(PlagiarismServiceError):
    status_code = 409
    code = "ALREADY_EXISTS"


class UnavailableError(PlagiarismServiceError):
    status_code = 503
    code = "UNAVAILABLE"


class InternalError(PlagiarismServiceError):
    status_code = 500
    code = "INTERNAL"


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (NotFoundError, InvalidArgumentError, AlreadyExistsError, UnavailableError, InternalError)
}

ERRORS_BY_STATUS = {
    cls.status_code: cls
    for cls in (NotFoundError, InvalidArgumentError, AlreadyExistsError, UnavailableError, InternalError)
}
