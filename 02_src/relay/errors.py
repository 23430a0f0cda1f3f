"""Error hierarchy for the conversation relay.

Stores and service clients wrap backend-specific errors in one of these
so the orchestrator can handle them uniformly.
"""


class RelayError(Exception):
    """Base exception for all relay errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ServiceError(RelayError):
    """Raised when a remote service (dialog service, venue lookup) fails.

    Examples:
        - Network errors and timeouts
        - Non-2xx responses
        - Response bodies that cannot be parsed
    """

    pass


class StoreError(RelayError):
    """Raised when a store operation fails."""

    pass


class ConflictError(StoreError):
    """Raised when a write is made against a stale revision."""

    pass


class LookupConflict(ConflictError):
    """Raised when two callers race to create the same user record.

    UserStore.get_or_create resolves this to the existing record; it is
    never surfaced to callers.
    """

    pass
