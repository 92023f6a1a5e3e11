"""Exceptions related to hub-reconcile."""

__all__ = [
    "ReconcileException",
    "InputException",
    "MalformedKeyError",
    "DecodeError",
    "RemoteException",
    "ObjectNotFoundError",
    "ObjectConflictError",
    "RemoteTransportError",
    "WaitTimeoutError",
]


class ReconcileException(Exception):
    """Generic base exception used for this library."""


class InputException(ReconcileException):
    """Raised when the input values are not formatted as expected."""


class MalformedKeyError(InputException):
    """Raised when a queue key is not in the format namespace/name."""

    def __init__(self, key: str, message: str | None = None) -> None:
        super().__init__(
            f"Invalid resource key '{key}': {message or 'expected namespace/name'}"
        )
        self.key = key


class DecodeError(ReconcileException):
    """Raised when an object payload does not match the expected shape."""


class RemoteException(ReconcileException):
    """Raised when a call to the remote object store fails."""


class ObjectNotFoundError(RemoteException):
    """Raised when an object does not exist in the remote object store."""


class ObjectConflictError(RemoteException):
    """Raised when a write is rejected because the object changed remotely."""


class RemoteTransportError(RemoteException):
    """Raised for any other failure talking to the remote object store."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class WaitTimeoutError(ReconcileException):
    """Raised when a resource does not become ready within the allowed time."""
