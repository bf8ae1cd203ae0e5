"""Conversation and messaging route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from golfbuddy.api.routes import http_error
from golfbuddy.database.db import get_db_session
from golfbuddy.services import conversation_service, message_service
from golfbuddy.services.message_service import DEFAULT_MESSAGE_LIMIT
from golfbuddy.utils.errors import GolfBuddyError
from golfbuddy.models.schemas import (
    ConversationCreate,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/conversations", response_model=ConversationResponse)
async def create_conversation(
    payload: ConversationCreate, session: AsyncSession = Depends(get_db_session)
):
    """Open a conversation between two users, or return the existing one."""
    try:
        return await conversation_service.get_or_create_conversation(
            session, payload.user1_id, payload.user2_id
        )
    except GolfBuddyError as e:
        logger.warning(f"Conversation {payload.user1_id}/{payload.user2_id} rejected: {e}")
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error creating conversation: {e}")
        raise HTTPException(status_code=500, detail="Error creating conversation")


@router.get("/api/users/{user_id}/conversations", response_model=List[ConversationResponse])
async def get_conversations(user_id: int, session: AsyncSession = Depends(get_db_session)):
    """Get a user's conversations, most recently active first."""
    try:
        return await conversation_service.get_conversations(session, user_id)
    except Exception as e:
        logger.error(f"Error fetching conversations for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Error fetching conversations")


@router.post(
    "/api/conversations/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=201,
)
async def send_message(
    conversation_id: int, payload: MessageCreate, session: AsyncSession = Depends(get_db_session)
):
    """Send a message. The sender must be a participant of the conversation."""
    try:
        return await message_service.send_message(
            session, conversation_id, payload.sender_id, payload.content
        )
    except GolfBuddyError as e:
        logger.warning(
            f"Message from user {payload.sender_id} to conversation {conversation_id} rejected: {e}"
        )
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error sending message: {e}")
        raise HTTPException(status_code=500, detail="Error sending message")


@router.get("/api/conversations/{conversation_id}/messages", response_model=List[MessageResponse])
async def get_messages(
    conversation_id: int,
    limit: int = Query(DEFAULT_MESSAGE_LIMIT, ge=1),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db_session),
):
    """Get messages in a conversation, oldest first."""
    try:
        return await message_service.get_messages(
            session, conversation_id, limit=limit, offset=offset
        )
    except GolfBuddyError as e:
        logger.warning(f"Message listing for conversation {conversation_id} rejected: {e}")
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error fetching messages: {e}")
        raise HTTPException(status_code=500, detail="Error fetching messages")
