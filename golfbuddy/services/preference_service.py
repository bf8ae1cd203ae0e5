"""
Preference service for a user's favorite courses and preferred playing times.
"""

from typing import List, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from golfbuddy.database.db import add_with_savepoint
from golfbuddy.database.models import Course, UserFavoriteCourse, UserTimePreference, TimePreference
from golfbuddy.services import user_service
from golfbuddy.services.course_service import course_to_dict, course_exists
from golfbuddy.utils.datetime_utils import isoformat_or_none
from golfbuddy.utils.errors import (
    CourseNotFoundError,
    DuplicateFavoriteError,
    DuplicateTimePreferenceError,
)
import logging

logger = logging.getLogger(__name__)


def _favorite_to_dict(favorite: UserFavoriteCourse) -> Dict:
    return {
        "id": favorite.id,
        "user_id": favorite.user_id,
        "course_id": favorite.course_id,
        "created_at": isoformat_or_none(favorite.created_at),
    }


def _time_preference_to_dict(preference: UserTimePreference) -> Dict:
    return {
        "id": preference.id,
        "user_id": preference.user_id,
        "time_preference": preference.time_preference,
        "created_at": isoformat_or_none(preference.created_at),
    }


async def add_favorite_course(session: AsyncSession, user_id: int, course_id: int) -> Dict:
    """
    Add a course to a user's favorites.

    Args:
        session: Database session
        user_id: User ID
        course_id: Course ID

    Returns:
        Dict with the favorite row

    Raises:
        UserNotFoundError: If the user does not exist
        CourseNotFoundError: If the course does not exist
        DuplicateFavoriteError: If the user already favorited the course
    """
    await user_service.ensure_users_exist(session, [user_id])
    if not await course_exists(session, course_id):
        raise CourseNotFoundError()

    result = await session.execute(
        select(UserFavoriteCourse.id).where(
            and_(
                UserFavoriteCourse.user_id == user_id,
                UserFavoriteCourse.course_id == course_id,
            )
        )
    )
    if result.first() is not None:
        raise DuplicateFavoriteError()

    favorite = UserFavoriteCourse(user_id=user_id, course_id=course_id)
    await add_with_savepoint(session, favorite, lambda e: DuplicateFavoriteError())
    return _favorite_to_dict(favorite)


async def get_user_favorites(session: AsyncSession, user_id: int) -> List[Dict]:
    """Get the courses a user has favorited."""
    result = await session.execute(
        select(Course)
        .join(UserFavoriteCourse, UserFavoriteCourse.course_id == Course.id)
        .where(UserFavoriteCourse.user_id == user_id)
        .order_by(UserFavoriteCourse.id)
    )
    return [course_to_dict(c) for c in result.scalars().all()]


async def add_time_preference(session: AsyncSession, user_id: int, time_preference: str) -> Dict:
    """
    Register a preferred playing time for a user.

    Args:
        session: Database session
        user_id: User ID
        time_preference: One of TimePreference values

    Returns:
        Dict with the time preference row

    Raises:
        UserNotFoundError: If the user does not exist
        DuplicateTimePreferenceError: If the user already has this preference
    """
    value = TimePreference(time_preference).value
    await user_service.ensure_users_exist(session, [user_id])

    result = await session.execute(
        select(UserTimePreference.id).where(
            and_(
                UserTimePreference.user_id == user_id,
                UserTimePreference.time_preference == value,
            )
        )
    )
    if result.first() is not None:
        raise DuplicateTimePreferenceError()

    preference = UserTimePreference(user_id=user_id, time_preference=value)
    await add_with_savepoint(session, preference, lambda e: DuplicateTimePreferenceError())
    return _time_preference_to_dict(preference)


async def get_user_time_preferences(session: AsyncSession, user_id: int) -> List[Dict]:
    """Get a user's time preferences."""
    result = await session.execute(
        select(UserTimePreference)
        .where(UserTimePreference.user_id == user_id)
        .order_by(UserTimePreference.id)
    )
    return [_time_preference_to_dict(p) for p in result.scalars().all()]
