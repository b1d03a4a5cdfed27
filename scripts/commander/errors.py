"""
Linode Commander exceptions
"""


class CommanderError(Exception):
    """Base exception for all Linode Commander errors"""

    pass


class ConfigError(CommanderError):
    """Raised when required configuration is missing or invalid"""

    pass


class InitializationError(CommanderError):
    """Raised when a view cannot be activated"""

    pass


class TransportError(CommanderError):
    """Raised when a provider call fails"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(TransportError):
    """Raised when a resource is not found (404)"""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class AuthenticationError(TransportError):
    """Raised when the token is rejected (401)"""

    def __init__(self, message: str):
        super().__init__(message, status_code=401)


class TerminalSignal(CommanderError):
    """Raised by a view's event handler to end the application.

    Not a failure: the runner turns it into a normal shutdown.
    """

    pass
