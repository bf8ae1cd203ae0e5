"""Golf course route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from golfbuddy.api.routes import http_error
from golfbuddy.database.db import get_db_session
from golfbuddy.services import course_service
from golfbuddy.utils.errors import GolfBuddyError
from golfbuddy.models.schemas import CourseCreate, CourseResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/courses", response_model=CourseResponse, status_code=201)
async def create_course(payload: CourseCreate, session: AsyncSession = Depends(get_db_session)):
    """Create a golf course. (name, location) must be unique."""
    try:
        return await course_service.create_course(
            session,
            name=payload.name,
            location=payload.location,
            par=payload.par,
            description=payload.description,
        )
    except GolfBuddyError as e:
        logger.warning(f"Course creation rejected: {e}")
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error creating course: {e}")
        raise HTTPException(status_code=500, detail="Error creating course")


@router.get("/api/courses", response_model=List[CourseResponse])
async def get_courses(session: AsyncSession = Depends(get_db_session)):
    """List all golf courses."""
    try:
        return await course_service.get_courses(session)
    except Exception as e:
        logger.error(f"Error fetching courses: {e}")
        raise HTTPException(status_code=500, detail="Error fetching courses")
