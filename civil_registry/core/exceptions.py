"""Domain errors raised by the record store and the statistics aggregator.

Routes translate these into HTTP responses through the exception handlers
registered in ``civil_registry.main``.
"""


class RegistryError(Exception):
    """Base class for civil registry errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(RegistryError):
    """The caller lacks the role required for the operation."""

    status_code = 403


class InvalidStatusTransition(RegistryError):
    """A status change that is not pending -> approved/rejected."""

    status_code = 409


class MissingRejectionReason(RegistryError):
    status_code = 400


class StoreQueryError(RegistryError):
    """An underlying database query or write failed."""

    status_code = 500


class StatsUnavailableError(StoreQueryError):
    """The statistics aggregation was aborted; no partial results exist."""

    def __init__(self, message: str = "Failed to fetch statistics"):
        super().__init__(message)
