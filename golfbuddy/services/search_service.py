"""
Buddy search: compound filtering over golfer profiles.

There is no scoring. A user is returned if and only if every supplied
criterion matches; omitted criteria do not restrict the result.
"""

from typing import List, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, func
from golfbuddy.database.models import (
    User,
    UserFavoriteCourse,
    UserTimePreference,
    SkillLevel,
    TimePreference,
)
from golfbuddy.services.user_service import user_to_dict
import logging

logger = logging.getLogger(__name__)


async def search_buddies(
    session: AsyncSession,
    location: Optional[str] = None,
    skill_level: Optional[str] = None,
    max_handicap_diff: Optional[int] = None,
    course_id: Optional[int] = None,
    time_preference: Optional[str] = None,
) -> List[Dict]:
    """
    Find users matching all supplied criteria.

    max_handicap_diff is compared against the absolute handicap value, not
    against another user's handicap. Users without a handicap always pass.

    Args:
        session: Database session
        location: Exact location match
        skill_level: Exact skill level match
        max_handicap_diff: Upper bound on abs(handicap)
        course_id: Only users who favorited this course
        time_preference: Only users with this time preference

    Returns:
        List of user dicts (empty if nothing matches, including unknown course_id)
    """
    query = select(User)

    if location is not None:
        query = query.where(User.location == location)
    if skill_level is not None:
        query = query.where(User.skill_level == SkillLevel(skill_level).value)

    if max_handicap_diff is not None:
        query = query.where(
            or_(User.handicap.is_(None), func.abs(User.handicap) <= max_handicap_diff)
        )

    if course_id is not None:
        query = query.where(
            User.id.in_(
                select(UserFavoriteCourse.user_id).where(UserFavoriteCourse.course_id == course_id)
            )
        )

    if time_preference is not None:
        query = query.where(
            User.id.in_(
                select(UserTimePreference.user_id).where(
                    UserTimePreference.time_preference == TimePreference(time_preference).value
                )
            )
        )

    result = await session.execute(query.order_by(User.id))
    users = result.scalars().all()
    logger.debug(f"Buddy search matched {len(users)} users")
    return [user_to_dict(u) for u in users]
