"""Exceptions raised by the mission control services."""


class MissionControlError(Exception):
    """Base exception for mission control errors."""

    status_code = 500
    retryable = False


class NotFound(MissionControlError):
    """A referenced task, agent or notification id does not exist."""

    status_code = 404


class InvalidState(MissionControlError):
    """An argument is outside its declared set, or the state machine forbids the call."""

    status_code = 400


class StorageUnavailable(MissionControlError):
    """Transient storage failure. Nothing from the failed call was committed."""

    status_code = 503
    retryable = True


class ConcurrentModification(StorageUnavailable):
    """Another writer committed the same task first; the call was rolled back."""

    status_code = 409
