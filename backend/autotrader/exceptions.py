"""
Domain exceptions for the application.

Services and the trading engine raise these instead of
fastapi.HTTPException to avoid coupling them to the web framework.
A global exception handler in main.py translates them into HTTP responses.
"""


class AppError(Exception):
    """Base application error with an HTTP-equivalent status code."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(AppError):
    """Input validation failure (400)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, status_code=404)


class ConflictError(AppError):
    """Request conflicts with current state, e.g. bot already running (409)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=409)


class ConfigurationError(AppError):
    """Bot settings missing or invalid. Fatal to bot start."""

    def __init__(self, message: str = "Bot settings not found"):
        super().__init__(message, status_code=400)


class ConnectivityError(AppError):
    """Execution gateway unreachable, disconnected, or timed out (503)."""

    def __init__(self, message: str = "Execution gateway unavailable"):
        super().__init__(message, status_code=503)


class ExecutionError(AppError):
    """Order rejected or position close failed. Never retried by the engine."""

    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class DataError(AppError):
    """Malformed data from a collaborator (e.g. non-positive bid)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=502)
