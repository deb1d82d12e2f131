"""Typed failures raised by services and rendered at the HTTP boundary."""


class FoodDiaryError(Exception):
    """Base class for expected application failures."""

    code = "Error"
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FoodDiaryError):
    """Missing or ill-typed required fields."""

    code = "ValidationError"
    status_code = 400
    default_message = "Missing required fields"


class DuplicateEmailError(FoodDiaryError):
    code = "DuplicateEmail"
    status_code = 400
    default_message = "Email already registered"


class InvalidCredentialsError(FoodDiaryError):
    """Unknown email or wrong password; never says which."""

    code = "InvalidCredentials"
    status_code = 401
    default_message = "Invalid email or password"


class NotVerifiedError(FoodDiaryError):
    code = "NotVerified"
    status_code = 403
    default_message = "Please verify your email before logging in"


class InvalidOrExpiredTokenError(FoodDiaryError):
    """Bad signature, malformed, expired, or already consumed token."""

    code = "InvalidOrExpiredToken"
    status_code = 400
    default_message = "Invalid or expired token"


class UpstreamUnavailableError(FoodDiaryError):
    """The external nutrition API timed out or failed."""

    code = "UpstreamUnavailable"
    status_code = 502
    default_message = "Food database is unavailable, please try again later"


class StorageError(FoodDiaryError):
    code = "StorageError"
    status_code = 500
    default_message = "Storage failure"
