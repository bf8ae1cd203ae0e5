"""
Domain errors raised by the service layer.

Every failure a service can report has exactly one ErrorKind, so callers
branch on ``exc.kind`` rather than on message text. The exception classes
group kinds into families (not found, conflict, invariant violation, state).
"""

import enum


class ErrorKind(str, enum.Enum):
    """Closed set of service failure kinds."""

    USER_NOT_FOUND = "user_not_found"
    COURSE_NOT_FOUND = "course_not_found"
    CONVERSATION_NOT_FOUND = "conversation_not_found"
    DUPLICATE_EMAIL = "duplicate_email"
    DUPLICATE_USERNAME = "duplicate_username"
    DUPLICATE_COURSE = "duplicate_course"
    DUPLICATE_FAVORITE = "duplicate_favorite"
    DUPLICATE_TIME_PREFERENCE = "duplicate_time_preference"
    DUPLICATE_MATCH = "duplicate_match"
    SELF_MATCH = "self_match"
    SELF_CONVERSATION = "self_conversation"
    NOT_PARTICIPANT = "not_participant"
    MATCH_NOT_FOUND_OR_NOT_PENDING = "match_not_found_or_not_pending"


class GolfBuddyError(ValueError):
    """Base class for domain errors."""

    kind: ErrorKind
    default_message = "Request could not be completed"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


# Families


class NotFoundError(GolfBuddyError):
    """A referenced user, course, conversation or match does not exist."""


class ConflictError(GolfBuddyError):
    """A uniqueness rule would be broken."""


class InvariantViolationError(GolfBuddyError):
    """The request contradicts a structural rule (self-pairing, non-participant)."""


class StateError(GolfBuddyError):
    """The target is not in a state that allows the operation."""


# Not found


class UserNotFoundError(NotFoundError):
    kind = ErrorKind.USER_NOT_FOUND
    default_message = "User not found"


class CourseNotFoundError(NotFoundError):
    kind = ErrorKind.COURSE_NOT_FOUND
    default_message = "Course not found"


class ConversationNotFoundError(NotFoundError):
    kind = ErrorKind.CONVERSATION_NOT_FOUND
    default_message = "Conversation not found"


# Conflicts


class DuplicateEmailError(ConflictError):
    kind = ErrorKind.DUPLICATE_EMAIL
    default_message = "Email is already registered"


class DuplicateUsernameError(ConflictError):
    kind = ErrorKind.DUPLICATE_USERNAME
    default_message = "Username is already taken"


class DuplicateCourseError(ConflictError):
    kind = ErrorKind.DUPLICATE_COURSE
    default_message = "A course with this name already exists at this location"


class DuplicateFavoriteError(ConflictError):
    kind = ErrorKind.DUPLICATE_FAVORITE
    default_message = "Course is already in user's favorites"


class DuplicateTimePreferenceError(ConflictError):
    kind = ErrorKind.DUPLICATE_TIME_PREFERENCE
    default_message = "Time preference already added for this user"


class DuplicateMatchError(ConflictError):
    kind = ErrorKind.DUPLICATE_MATCH
    default_message = "A buddy match already exists between these users"


# Invariant violations


class SelfMatchError(InvariantViolationError):
    kind = ErrorKind.SELF_MATCH
    default_message = "Cannot create a buddy match with yourself"


class SelfConversationError(InvariantViolationError):
    kind = ErrorKind.SELF_CONVERSATION
    default_message = "Cannot create a conversation with yourself"


class NotParticipantError(InvariantViolationError):
    kind = ErrorKind.NOT_PARTICIPANT
    default_message = "Conversation not found or sender is not a participant"


# State


class MatchNotFoundOrNotPendingError(StateError):
    kind = ErrorKind.MATCH_NOT_FOUND_OR_NOT_PENDING
    default_message = "Buddy match not found or not in pending status"
