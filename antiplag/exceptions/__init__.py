from antiplag.exceptions.exceptions import (
    AlreadyExistsError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PlagiarismServiceError,
    UnavailableError,
)

__all__ = [
    "AlreadyExistsError",
    "InternalError",
    "InvalidArgumentError",
    "NotFoundError",
    "PlagiarismServiceError",
    "UnavailableError",
]
