"""
Domain errors for the polling lifecycle.

They subclass DRF's `APIException` so a service can raise them from any
depth and the API layer renders them with the right status code and a
descriptive `detail` without per-view translation.
"""
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound


class SessionNotFound(NotFound):
    default_detail = "Session not found."
    default_code = "session_not_found"


class QuestionNotFound(NotFound):
    default_detail = "Question not found."
    default_code = "question_not_found"


class ParticipantNotFound(NotFound):
    default_detail = "Participant not found."
    default_code = "participant_not_found"


class InvalidState(APIException):
    """A mutation was attempted while the session status forbids it."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation not allowed in the current session state."
    default_code = "invalid_state"


class CodeSpaceExhausted(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Could not allocate a unique join code; try again."
    default_code = "code_space_exhausted"
