"""
Course service for creating and listing golf courses.
"""

from typing import List, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from golfbuddy.database.db import add_with_savepoint
from golfbuddy.database.models import Course
from golfbuddy.utils.datetime_utils import isoformat_or_none
from golfbuddy.utils.errors import DuplicateCourseError
import logging

logger = logging.getLogger(__name__)


def course_to_dict(course: Course) -> Dict:
    return {
        "id": course.id,
        "name": course.name,
        "location": course.location,
        "description": course.description,
        "par": course.par,
        "created_at": isoformat_or_none(course.created_at),
    }


async def create_course(
    session: AsyncSession,
    name: str,
    location: str,
    par: int,
    description: Optional[str] = None,
) -> Dict:
    """
    Create a golf course.

    The same name may exist at different locations, but (name, location)
    must be unique.

    Args:
        session: Database session
        name: Course name
        location: Course location
        par: Course par (positive)
        description: Optional description

    Returns:
        Dict with course data

    Raises:
        DuplicateCourseError: If a course with this name exists at this location
    """
    result = await session.execute(
        select(Course.id).where(and_(Course.name == name, Course.location == location))
    )
    if result.first() is not None:
        raise DuplicateCourseError()

    course = Course(name=name, location=location, description=description, par=par)
    await add_with_savepoint(session, course, lambda e: DuplicateCourseError())

    logger.info(f"Created course {course.id} ({name}, {location})")
    return course_to_dict(course)


async def get_courses(session: AsyncSession) -> List[Dict]:
    """Get all courses."""
    result = await session.execute(select(Course).order_by(Course.id))
    return [course_to_dict(c) for c in result.scalars().all()]


async def course_exists(session: AsyncSession, course_id: int) -> bool:
    result = await session.execute(select(Course.id).where(Course.id == course_id))
    return result.scalar_one_or_none() is not None
