"""
Error taxonomy for the platform.
Every error carries the HTTP status the API adapter answers with.
"""


class CoinCrafterError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code = 500

    def __init__(self, message: str = None):
        self.message = message or self.__class__.__doc__.strip()
        super().__init__(self.message)


class ValidationError(CoinCrafterError):
    """Invalid request"""
    status_code = 400


class NotFound(CoinCrafterError):
    """Not found"""
    status_code = 404


class UserNotFound(NotFound):
    """User not found"""

    def __init__(self, email: str = None):
        self.email = email
        super().__init__(f'User {email} not found' if email else None)


class Forbidden(CoinCrafterError):
    """Forbidden"""
    status_code = 403


class InvalidTransition(CoinCrafterError):
    """Invalid state transition"""
    status_code = 400


class InsufficientBalance(CoinCrafterError):
    """Insufficient balance"""
    status_code = 400

    def __init__(self, email: str = None, balance: int = None, required: int = None):
        self.email = email
        self.balance = balance
        self.required = required
        message = None
        if balance is not None and required is not None:
            message = f'Insufficient balance: {required} coins required, {balance} available'
        super().__init__(message)


class Conflict(CoinCrafterError):
    """Conflict"""
    status_code = 409


class Unauthorized(CoinCrafterError):
    """Unauthorized"""
    status_code = 401


class Internal(CoinCrafterError):
    """Internal Server Error"""
    status_code = 500


class AlreadyExists(Conflict):
    """Already exists"""

    def __init__(self, message: str = None, key=None):
        self.key = key
        super().__init__(message)


class Unavailable(CoinCrafterError):
    """Service temporarily unavailable, retry the request"""
    status_code = 503
