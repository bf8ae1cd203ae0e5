"""Buddy search and buddy match route handlers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from golfbuddy.api.routes import http_error
from golfbuddy.database.db import get_db_session
from golfbuddy.database.models import SkillLevel, TimePreference
from golfbuddy.services import search_service, match_service
from golfbuddy.utils.errors import GolfBuddyError
from golfbuddy.models.schemas import (
    UserResponse,
    BuddyMatchCreate,
    BuddyMatchStatusUpdate,
    BuddyMatchResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/buddies/search", response_model=List[UserResponse])
async def search_buddies(
    location: Optional[str] = None,
    skill_level: Optional[SkillLevel] = None,
    max_handicap_diff: Optional[int] = None,
    course_id: Optional[int] = None,
    time_preference: Optional[TimePreference] = None,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Search for golf buddies.
    Every supplied filter must match; with no filters all users are returned.
    """
    try:
        return await search_service.search_buddies(
            session,
            location=location,
            skill_level=skill_level.value if skill_level else None,
            max_handicap_diff=max_handicap_diff,
            course_id=course_id,
            time_preference=time_preference.value if time_preference else None,
        )
    except Exception as e:
        logger.error(f"Error searching buddies: {e}")
        raise HTTPException(status_code=500, detail="Error searching buddies")


@router.post("/api/buddy-matches", response_model=BuddyMatchResponse, status_code=201)
async def create_buddy_match(
    payload: BuddyMatchCreate, session: AsyncSession = Depends(get_db_session)
):
    """Send a buddy request."""
    try:
        return await match_service.create_buddy_match(
            session, payload.requester_id, payload.recipient_id
        )
    except GolfBuddyError as e:
        logger.warning(
            f"Buddy request {payload.requester_id} -> {payload.recipient_id} rejected: {e}"
        )
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error creating buddy match: {e}")
        raise HTTPException(status_code=500, detail="Error creating buddy match")


@router.patch("/api/buddy-matches/{match_id}", response_model=BuddyMatchResponse)
async def update_buddy_match_status(
    match_id: int,
    payload: BuddyMatchStatusUpdate,
    session: AsyncSession = Depends(get_db_session),
):
    """Accept or decline a pending buddy request. Accepting opens a conversation."""
    try:
        return await match_service.update_buddy_match_status(session, match_id, payload.status)
    except GolfBuddyError as e:
        logger.warning(f"Buddy match {match_id} status change rejected: {e}")
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error updating buddy match {match_id}: {e}")
        raise HTTPException(status_code=500, detail="Error updating buddy match")


@router.get("/api/users/{user_id}/buddy-matches", response_model=List[BuddyMatchResponse])
async def get_buddy_matches(user_id: int, session: AsyncSession = Depends(get_db_session)):
    """Get all buddy matches a user sent or received."""
    try:
        return await match_service.get_buddy_matches(session, user_id)
    except Exception as e:
        logger.error(f"Error fetching buddy matches for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Error fetching buddy matches")
