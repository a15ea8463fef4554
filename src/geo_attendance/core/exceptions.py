class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidGeofence(ValidationError):
    """Raised when a geofence definition is malformed or structurally invalid."""


class AttendanceError(DomainError):
    """Base for rejected check-in/check-out transitions."""

    message = "Attendance action rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class EventNotFound(AttendanceError):
    message = "Event not found"


class EventNotStarted(AttendanceError):
    message = "Event has not started yet"


class EventEnded(AttendanceError):
    message = "Event has already ended"


class OutsideGeofence(AttendanceError):
    message = "You must be at the event location to check in"


class NoActiveSession(AttendanceError):
    message = "No active check-in found for this event"


class AlreadyCheckedIn(AttendanceError):
    message = "You are already checked in to this event"


class PersistenceError(DomainError):
    """Storage failure, wrapped with the name of the operation that hit it."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause
