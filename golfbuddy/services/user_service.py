"""
User service layer for golfer profile database operations.
"""

from typing import Optional, Dict, Iterable, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, func
from golfbuddy.database.models import User, SkillLevel
from golfbuddy.utils.datetime_utils import utcnow, isoformat_or_none
from golfbuddy.utils.errors import (
    UserNotFoundError,
    DuplicateEmailError,
    DuplicateUsernameError,
)
import logging

logger = logging.getLogger(__name__)

# Fields a profile update may touch
UPDATABLE_FIELDS = (
    "email",
    "username",
    "full_name",
    "skill_level",
    "handicap",
    "location",
    "bio",
    "home_course",
)


def user_to_dict(user: User) -> Dict:
    """
    Convert a User ORM instance to a dictionary.

    Args:
        user: User ORM instance

    Returns:
        User dictionary
    """
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "full_name": user.full_name,
        "skill_level": user.skill_level,
        "handicap": user.handicap,
        "location": user.location,
        "bio": user.bio,
        "home_course": user.home_course,
        "created_at": isoformat_or_none(user.created_at),
        "updated_at": isoformat_or_none(user.updated_at),
    }


async def _check_unique_fields(
    session: AsyncSession,
    email: Optional[str] = None,
    username: Optional[str] = None,
    exclude_user_id: Optional[int] = None,
) -> None:
    """
    Raise if the email or username is already used by another user.

    Raises:
        DuplicateEmailError: Email belongs to another user
        DuplicateUsernameError: Username belongs to another user
    """
    if email is not None:
        query = select(User.id).where(User.email == email)
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        result = await session.execute(query)
        if result.first() is not None:
            raise DuplicateEmailError()

    if username is not None:
        query = select(User.id).where(User.username == username)
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        result = await session.execute(query)
        if result.first() is not None:
            raise DuplicateUsernameError()


async def create_user(
    session: AsyncSession,
    email: str,
    username: str,
    full_name: str,
    skill_level: str,
    location: str,
    handicap: Optional[int] = None,
    bio: Optional[str] = None,
    home_course: Optional[str] = None,
) -> Dict:
    """
    Create a new golfer profile.

    Args:
        session: Database session
        email: Unique email address
        username: Unique username
        full_name: Display name
        skill_level: One of SkillLevel values
        location: City/area where the user plays
        handicap: Optional handicap (None for beginners)
        bio: Optional bio
        home_course: Optional home course name

    Returns:
        Dict with user data

    Raises:
        DuplicateEmailError: If email is already registered
        DuplicateUsernameError: If username is already taken
    """
    await _check_unique_fields(session, email=email, username=username)

    user = User(
        email=email,
        username=username,
        full_name=full_name,
        skill_level=SkillLevel(skill_level).value,
        handicap=handicap,
        location=location,
        bio=bio,
        home_course=home_course,
    )
    try:
        async with session.begin_nested():
            session.add(user)
    except IntegrityError:
        # Lost a race with a concurrent registration; report which field collided
        await _check_unique_fields(session, email=email, username=username)
        raise

    logger.info(f"Created user {user.id} ({username})")
    return user_to_dict(user)


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[Dict]:
    """
    Get user by ID.

    Args:
        session: Database session
        user_id: User ID

    Returns:
        User dictionary or None if not found
    """
    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    return user_to_dict(user) if user else None


async def update_user(session: AsyncSession, user_id: int, changes: Dict[str, Any]) -> Dict:
    """
    Apply a partial profile update.

    ``changes`` holds only the fields the caller supplied. A key present with
    value None clears that column; an absent key leaves it untouched.
    updated_at is always refreshed.

    Args:
        session: Database session
        user_id: User ID
        changes: Field change-set (subset of UPDATABLE_FIELDS)

    Returns:
        Dict with updated user data

    Raises:
        UserNotFoundError: If the user does not exist
        DuplicateEmailError / DuplicateUsernameError: If the new value is taken
    """
    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise UserNotFoundError()

    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    await _check_unique_fields(
        session,
        email=changes.get("email"),
        username=changes.get("username"),
        exclude_user_id=user_id,
    )

    try:
        async with session.begin_nested():
            for field, value in changes.items():
                if field == "skill_level" and value is not None:
                    value = SkillLevel(value).value
                setattr(user, field, value)
            user.updated_at = utcnow()
    except IntegrityError:
        await _check_unique_fields(
            session,
            email=changes.get("email"),
            username=changes.get("username"),
            exclude_user_id=user_id,
        )
        raise

    return user_to_dict(user)


async def ensure_users_exist(session: AsyncSession, user_ids: Iterable[int]) -> None:
    """
    Verify every given user ID resolves to a user, with a single query.

    Raises:
        UserNotFoundError: If fewer distinct users are found than requested
    """
    wanted = set(user_ids)
    result = await session.execute(
        select(func.count(User.id)).where(User.id.in_(list(wanted)))
    )
    if (result.scalar_one() or 0) != len(wanted):
        raise UserNotFoundError()
