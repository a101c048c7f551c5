class PoolExhaustedError(Exception):
    """No database connection became available within the pool timeout."""


class StoreError(Exception):
    """A query failed to execute (including constraint violations)."""


class NotFoundError(Exception):
    pass


class ListingNotFoundError(NotFoundError):
    pass


class AgentNotFoundError(NotFoundError):
    pass


class ForbiddenError(Exception):
    """The caller's role or ownership does not allow the operation."""


class UnauthorizedError(Exception):
    """The identity header is missing or malformed."""
