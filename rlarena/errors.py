"""Exceptions raised by the arena services."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for all service errors."""

    default_message = "service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class InvalidInputError(ServiceError):
    default_message = "invalid input"


class UnauthorizedError(ServiceError):
    default_message = "unauthorized"


class NotFoundError(ServiceError):
    default_message = "resource not found"


class UserNotFoundError(NotFoundError):
    default_message = "user not found"


class InvalidCredentialsError(ServiceError):
    default_message = "invalid credentials"


class UserAlreadyExistsError(ServiceError):
    default_message = "user already exists"


class AgentNotFoundError(NotFoundError):
    default_message = "agent not found"


class InvalidEnvironmentError(ServiceError):
    default_message = "invalid environment"


class MatchNotFoundError(NotFoundError):
    default_message = "match not found"


class SubmissionNotFoundError(NotFoundError):
    default_message = "submission not found"


class InvalidFileError(ServiceError):
    default_message = "invalid file"


class DailyQuotaExceededError(ServiceError):
    default_message = "daily submission quota exceeded"