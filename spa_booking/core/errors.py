class ServiceError(Exception):
    """
    Base class for errors the service reports to callers.
    `status_code` is the HTTP status the API layer answers with.
    """
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or malformed input. Never retried."""
    status_code = 400


class ConflictError(ServiceError):
    """Requested time window overlaps an existing booking."""
    status_code = 409


class NotFoundError(ServiceError):
    status_code = 404


class PersistenceError(ServiceError):
    """Snapshot write failed; the in-memory mutation has been reverted."""
    status_code = 500


class NotificationError(ServiceError):
    """Outbound alert delivery failed. Logged by the notifier, never surfaced."""
    status_code = 502
