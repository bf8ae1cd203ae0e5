"""
Pydantic models for API request/response validation.
"""

from typing import Optional, Literal
from pydantic import BaseModel, EmailStr, Field, model_validator
from golfbuddy.database.models import SkillLevel, TimePreference


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str


# User schemas
class UserCreate(BaseModel):
    """Request to register a golfer profile."""

    email: EmailStr
    username: str = Field(min_length=3)
    full_name: str = Field(min_length=1)
    skill_level: SkillLevel
    handicap: Optional[int] = None  # None for beginners without a handicap
    location: str = Field(min_length=1)
    bio: Optional[str] = None
    home_course: Optional[str] = None


class UserUpdate(BaseModel):
    """
    Partial profile update.

    Only fields present in the request body are changed. handicap, bio and
    home_course may be sent as null to clear them; the other fields may be
    omitted but not nulled.
    """

    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, min_length=3)
    full_name: Optional[str] = Field(default=None, min_length=1)
    skill_level: Optional[SkillLevel] = None
    handicap: Optional[int] = None
    location: Optional[str] = Field(default=None, min_length=1)
    bio: Optional[str] = None
    home_course: Optional[str] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        """Required profile columns cannot be cleared."""
        for field in ("email", "username", "full_name", "skill_level", "location"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict:
        """Supplied fields only, as a change-set for user_service.update_user."""
        return self.model_dump(exclude_unset=True, mode="json")


class UserResponse(BaseModel):
    """Golfer profile."""

    id: int
    email: str
    username: str
    full_name: str
    skill_level: SkillLevel
    handicap: Optional[int] = None
    location: str
    bio: Optional[str] = None
    home_course: Optional[str] = None
    created_at: str
    updated_at: str


# Course schemas
class CourseCreate(BaseModel):
    """Request to create a golf course."""

    name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    description: Optional[str] = None
    par: int = Field(gt=0)


class CourseResponse(BaseModel):
    """Golf course."""

    id: int
    name: str
    location: str
    description: Optional[str] = None
    par: int
    created_at: str


# Preference schemas
class FavoriteCourseCreate(BaseModel):
    """Request to favorite a course."""

    course_id: int


class UserFavoriteCourseResponse(BaseModel):
    id: int
    user_id: int
    course_id: int
    created_at: str


class TimePreferenceCreate(BaseModel):
    """Request to add a preferred playing time."""

    time_preference: TimePreference


class UserTimePreferenceResponse(BaseModel):
    id: int
    user_id: int
    time_preference: TimePreference
    created_at: str


# Buddy match schemas
class BuddyMatchCreate(BaseModel):
    """Request to send a buddy request."""

    requester_id: int
    recipient_id: int


class BuddyMatchStatusUpdate(BaseModel):
    """Response to a pending buddy request."""

    status: Literal["accepted", "declined"]


class BuddyMatchResponse(BaseModel):
    """Buddy match."""

    id: int
    requester_id: int
    recipient_id: int
    status: str  # pending, accepted, or declined
    created_at: str
    updated_at: str


# Conversation schemas
class ConversationCreate(BaseModel):
    """Request to open a conversation between two users (either order)."""

    user1_id: int
    user2_id: int


class ConversationResponse(BaseModel):
    """Conversation; user1_id is always the smaller id."""

    id: int
    user1_id: int
    user2_id: int
    created_at: str
    updated_at: str


class MessageCreate(BaseModel):
    """Request to send a message."""

    sender_id: int
    content: str = Field(min_length=1)


class MessageResponse(BaseModel):
    """Chat message."""

    id: int
    conversation_id: int
    sender_id: int
    content: str
    status: str  # sent, delivered, or read
    created_at: str
