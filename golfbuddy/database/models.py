"""
SQLAlchemy ORM models for the golf buddy matching system.
"""

import enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from golfbuddy.database.db import Base
from golfbuddy.utils.datetime_utils import utcnow


class SkillLevel(str, enum.Enum):
    """Golfer skill level enum."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    PRO = "pro"


class TimePreference(str, enum.Enum):
    """Preferred time to play."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    WEEKEND = "weekend"


class MessageStatus(str, enum.Enum):
    """Message delivery status enum."""

    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"


class BuddyMatchStatus(str, enum.Enum):
    """Buddy match request status enum."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class User(Base):
    """Golfer profile."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, nullable=False, unique=True)
    username = Column(String, nullable=False, unique=True)
    full_name = Column(String, nullable=False)
    skill_level = Column(String(20), nullable=False)  # SkillLevel value
    handicap = Column(Integer, nullable=True)  # Null for beginners without a handicap
    location = Column(String, nullable=False)  # City/area where they usually play
    bio = Column(Text, nullable=True)
    home_course = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    # Relationships
    favorite_courses = relationship("UserFavoriteCourse", back_populates="user")
    time_preferences = relationship("UserTimePreference", back_populates="user")

    __table_args__ = (
        Index("idx_users_location", "location"),
        Index("idx_users_skill_level", "skill_level"),
    )


class Course(Base):
    """Golf course."""

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    par = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    # Relationships
    favorited_by = relationship("UserFavoriteCourse", back_populates="course")

    __table_args__ = (
        UniqueConstraint("name", "location", name="uq_courses_name_location"),
        CheckConstraint("par > 0", name="ck_courses_par_positive"),
    )


class UserFavoriteCourse(Base):
    """Join table (User ↔ Course)."""

    __tablename__ = "user_favorite_courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="favorite_courses")
    course = relationship("Course", back_populates="favorited_by")

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_user_favorite_course"),
        Index("idx_user_favorite_courses_course", "course_id"),
    )


class UserTimePreference(Base):
    """A user's preferred time to play (0-4 per user)."""

    __tablename__ = "user_time_preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    time_preference = Column(String(20), nullable=False)  # TimePreference value
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="time_preferences")

    __table_args__ = (
        UniqueConstraint("user_id", "time_preference", name="uq_user_time_preference"),
        Index("idx_user_time_preferences_value", "time_preference"),
    )


class Conversation(Base):
    """Chat between an unordered pair of users, stored with user1_id < user2_id."""

    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user1_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user2_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )  # Bumped on every new message

    # Relationships
    messages = relationship("Message", back_populates="conversation")

    __table_args__ = (
        UniqueConstraint("user1_id", "user2_id", name="uq_conversations_pair"),
        CheckConstraint("user1_id < user2_id", name="ck_conversations_pair_order"),
        Index("idx_conversations_user2", "user2_id"),
    )


class Message(Base):
    """Message within a conversation."""

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    conversation_id = Column(Integer, ForeignKey("conversations.id"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    status = Column(String(20), default=MessageStatus.SENT.value, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    # Relationships
    conversation = relationship("Conversation", back_populates="messages")

    __table_args__ = (
        Index("idx_messages_conversation_created", "conversation_id", "created_at"),
    )


class BuddyMatch(Base):
    """Buddy request from requester to recipient.

    user_low_id/user_high_id hold the normalized pair so the database can
    enforce one match per pair regardless of direction.
    """

    __tablename__ = "buddy_matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    recipient_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user_low_id = Column(Integer, nullable=False)
    user_high_id = Column(Integer, nullable=False)
    status = Column(String(20), default=BuddyMatchStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    # Relationships
    requester = relationship("User", foreign_keys=[requester_id], backref="sent_buddy_matches")
    recipient = relationship("User", foreign_keys=[recipient_id], backref="received_buddy_matches")

    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_buddy_matches_pair"),
        CheckConstraint("requester_id <> recipient_id", name="ck_buddy_matches_not_self"),
        CheckConstraint("user_low_id < user_high_id", name="ck_buddy_matches_pair_order"),
        Index("idx_buddy_matches_requester", "requester_id"),
        Index("idx_buddy_matches_recipient", "recipient_id"),
        Index("idx_buddy_matches_status", "status"),
    )
