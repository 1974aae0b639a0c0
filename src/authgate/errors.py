"""AuthGate errors."""


class AuthGateError(Exception):
    """Base error for AuthGate operations."""

    def __init__(self, message: str, code: str = "AUTHGATE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFound(AuthGateError):
    """Key does not exist in the state store."""

    def __init__(self, key: str):
        super().__init__(f"Key not found: {key}", "NOT_FOUND")
        self.key = key


class AlreadyExists(AuthGateError):
    """Key is already occupied."""

    def __init__(self, key: str):
        super().__init__(f"Key exists already: {key}", "ALREADY_EXISTS")
        self.key = key


class IllegalOperation(AuthGateError):
    """Mutation attempted on an immutable built-in identity."""

    def __init__(self, message: str = "Illegal operation"):
        super().__init__(message, "ILLEGAL_OPERATION")


class InvalidArgument(AuthGateError):
    """Unrecognized role or missing required field."""

    def __init__(self, message: str):
        super().__init__(message, "INVALID_ARGUMENT")


class BadToken(AuthGateError):
    """Token is missing, malformed, expired, or no longer honored."""

    def __init__(self, message: str = "Bad token"):
        super().__init__(message, "BAD_TOKEN")


class AuthenticationFailed(AuthGateError):
    """Credentials did not match an enabled identity."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, "AUTHENTICATION_FAILED")


class InternalError(AuthGateError):
    """
    Unexpected store, serialization, or hashing failure.

    The message is safe to show a caller; the underlying cause is chained
    and logged server side.
    """

    def __init__(self, message: str = "Internal error"):
        super().__init__(message, "INTERNAL_ERROR")


class StateDriverError(AuthGateError):
    """A state driver failed to talk to its backing store."""

    def __init__(self, operation: str, key: str, detail: str = ""):
        message = f"State driver {operation} failed for {key}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, "STATE_DRIVER_ERROR")
        self.operation = operation
        self.key = key
