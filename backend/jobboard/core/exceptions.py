"""Domain exceptions raised by repos/services and translated to HTTP errors in main."""


class JobBoardError(Exception):
    """Base application exception."""


class ValidationError(JobBoardError):
    """Raised when a write references data that does not exist (e.g. an unknown category)."""


class DuplicateNameError(JobBoardError):
    """Raised when a category name collides with another category."""


class NotFoundError(JobBoardError):
    """Raised when a requested resource does not exist."""


class CategoryInUseError(JobBoardError):
    """Raised when deleting a category that still has jobs."""


class SlugGenerationError(JobBoardError):
    """Raised when no free slug could be found or written within the configured limits."""


__all__ = [
    "CategoryInUseError",
    "DuplicateNameError",
    "JobBoardError",
    "NotFoundError",
    "SlugGenerationError",
    "ValidationError",
]
