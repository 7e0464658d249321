import pytest

from rlarena.errors import (
    AgentNotFoundError,
    DailyQuotaExceededError,
    InvalidCredentialsError,
    InvalidEnvironmentError,
    InvalidFileError,
    InvalidInputError,
    MatchNotFoundError,
    NotFoundError,
    ServiceError,
    SubmissionNotFoundError,
    UnauthorizedError,
    UserAlreadyExistsError,
    UserNotFoundError,
)


@pytest.mark.parametrize(
    "cls, message",
    [
        (InvalidInputError, "invalid input"),
        (UnauthorizedError, "unauthorized"),
        (NotFoundError, "resource not found"),
        (UserNotFoundError, "user not found"),
        (InvalidCredentialsError, "invalid credentials"),
        (UserAlreadyExistsError, "user already exists"),
        (AgentNotFoundError, "agent not found"),
        (InvalidEnvironmentError, "invalid environment"),
        (MatchNotFoundError, "match not found"),
        (SubmissionNotFoundError, "submission not found"),
        (InvalidFileError, "invalid file"),
        (DailyQuotaExceededError, "daily submission quota exceeded"),
    ],
)
def test_default_messages(cls, message):
    assert str(cls()) == message


@pytest.mark.parametrize(
    "cls",
    [UserNotFoundError, AgentNotFoundError, MatchNotFoundError, SubmissionNotFoundError],
)
def test_specific_not_found_errors_are_not_found(cls):
    err = cls()
    assert isinstance(err, NotFoundError)
    assert str(err).endswith("not found")
    assert str(err) != str(NotFoundError())


def test_all_errors_share_base():
    err = DailyQuotaExceededError()
    assert isinstance(err, ServiceError)
    assert str(err) == "daily submission quota exceeded"


def test_custom_message_overrides_default():
    err = UnauthorizedError("owner mismatch")
    assert str(err) == "owner mismatch"


def test_unauthorized_is_not_not_found():
    err = UnauthorizedError()
    assert not isinstance(err, NotFoundError)
    assert isinstance(err, ServiceError)
    assert str(err) == "unauthorized"