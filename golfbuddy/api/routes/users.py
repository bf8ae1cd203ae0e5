"""Golfer profile and preference route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from golfbuddy.api.routes import http_error
from golfbuddy.database.db import get_db_session
from golfbuddy.services import user_service, preference_service
from golfbuddy.utils.errors import GolfBuddyError
from golfbuddy.models.schemas import (
    UserCreate,
    UserUpdate,
    UserResponse,
    CourseResponse,
    FavoriteCourseCreate,
    UserFavoriteCourseResponse,
    TimePreferenceCreate,
    UserTimePreferenceResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/users", response_model=UserResponse, status_code=201)
async def create_user(payload: UserCreate, session: AsyncSession = Depends(get_db_session)):
    """Register a new golfer profile."""
    try:
        return await user_service.create_user(
            session,
            email=payload.email,
            username=payload.username,
            full_name=payload.full_name,
            skill_level=payload.skill_level.value,
            location=payload.location,
            handicap=payload.handicap,
            bio=payload.bio,
            home_course=payload.home_course,
        )
    except GolfBuddyError as e:
        logger.warning(f"User registration rejected: {e}")
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error creating user: {e}")
        raise HTTPException(status_code=500, detail="Error creating user")


@router.get("/api/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, session: AsyncSession = Depends(get_db_session)):
    """Get a golfer profile."""
    try:
        user = await user_service.get_user_by_id(session, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Error fetching user")


@router.patch("/api/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int, payload: UserUpdate, session: AsyncSession = Depends(get_db_session)
):
    """
    Update a golfer profile.
    Only fields included in the body are changed; updated_at is always refreshed.
    """
    try:
        return await user_service.update_user(session, user_id, payload.changes())
    except GolfBuddyError as e:
        logger.warning(f"Profile update for user {user_id} rejected: {e}")
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error updating user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Error updating user")


@router.post(
    "/api/users/{user_id}/favorites", response_model=UserFavoriteCourseResponse, status_code=201
)
async def add_favorite_course(
    user_id: int, payload: FavoriteCourseCreate, session: AsyncSession = Depends(get_db_session)
):
    """Add a course to a user's favorites."""
    try:
        return await preference_service.add_favorite_course(session, user_id, payload.course_id)
    except GolfBuddyError as e:
        logger.warning(f"Favorite course for user {user_id} rejected: {e}")
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error adding favorite course: {e}")
        raise HTTPException(status_code=500, detail="Error adding favorite course")


@router.get("/api/users/{user_id}/favorites", response_model=List[CourseResponse])
async def get_user_favorites(user_id: int, session: AsyncSession = Depends(get_db_session)):
    """Get a user's favorite courses."""
    try:
        return await preference_service.get_user_favorites(session, user_id)
    except Exception as e:
        logger.error(f"Error fetching favorites for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Error fetching favorite courses")


@router.post(
    "/api/users/{user_id}/time-preferences",
    response_model=UserTimePreferenceResponse,
    status_code=201,
)
async def add_time_preference(
    user_id: int, payload: TimePreferenceCreate, session: AsyncSession = Depends(get_db_session)
):
    """Add a preferred playing time for a user."""
    try:
        return await preference_service.add_time_preference(
            session, user_id, payload.time_preference.value
        )
    except GolfBuddyError as e:
        logger.warning(f"Time preference for user {user_id} rejected: {e}")
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error adding time preference: {e}")
        raise HTTPException(status_code=500, detail="Error adding time preference")


@router.get(
    "/api/users/{user_id}/time-preferences", response_model=List[UserTimePreferenceResponse]
)
async def get_user_time_preferences(user_id: int, session: AsyncSession = Depends(get_db_session)):
    """Get a user's preferred playing times."""
    try:
        return await preference_service.get_user_time_preferences(session, user_id)
    except Exception as e:
        logger.error(f"Error fetching time preferences for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Error fetching time preferences")
