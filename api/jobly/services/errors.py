class RepositoryError(Exception):
    """Base repository error."""


class RepositoryUnavailableError(RepositoryError):
    """Raised when the database is unavailable or not configured."""


class NotFoundError(RepositoryError):
    """Raised when an id-targeted operation matches no row."""


class InvalidUpdateError(RepositoryError):
    """Raised when a partial update carries no usable fields."""
