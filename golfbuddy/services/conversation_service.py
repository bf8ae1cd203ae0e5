"""
Conversation service.

A conversation row represents an unordered pair of users. The pair is
always stored smaller id first (see normalize_pair), which the database
backs with a CHECK and a UNIQUE constraint, so there is at most one row per
pair. get_or_create_conversation is the only code path that inserts
conversations.
"""

from typing import List, Dict, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, and_, or_
from golfbuddy.database.models import Conversation
from golfbuddy.services import user_service
from golfbuddy.utils.datetime_utils import isoformat_or_none
from golfbuddy.utils.errors import SelfConversationError
import logging

logger = logging.getLogger(__name__)


def normalize_pair(user_a: int, user_b: int) -> Tuple[int, int]:
    """Return the pair as (smaller id, larger id)."""
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)


def conversation_to_dict(conversation: Conversation) -> Dict:
    return {
        "id": conversation.id,
        "user1_id": conversation.user1_id,
        "user2_id": conversation.user2_id,
        "created_at": isoformat_or_none(conversation.created_at),
        "updated_at": isoformat_or_none(conversation.updated_at),
    }


async def _find_conversation(session: AsyncSession, user1_id: int, user2_id: int) -> Optional[Conversation]:
    result = await session.execute(
        select(Conversation).where(
            and_(Conversation.user1_id == user1_id, Conversation.user2_id == user2_id)
        )
    )
    return result.scalar_one_or_none()


async def get_or_create_conversation(session: AsyncSession, user_a: int, user_b: int) -> Dict:
    """
    Get the conversation between two users, creating it if needed.

    Argument order does not matter. An existing conversation is returned
    unchanged (its timestamps are not touched).

    Args:
        session: Database session
        user_a: One participant
        user_b: The other participant

    Returns:
        Dict with conversation data

    Raises:
        SelfConversationError: If both ids are the same user
        UserNotFoundError: If either user does not exist
    """
    if user_a == user_b:
        raise SelfConversationError()

    await user_service.ensure_users_exist(session, [user_a, user_b])

    user1_id, user2_id = normalize_pair(user_a, user_b)
    existing = await _find_conversation(session, user1_id, user2_id)
    if existing:
        return conversation_to_dict(existing)

    conversation = Conversation(user1_id=user1_id, user2_id=user2_id)
    try:
        async with session.begin_nested():
            session.add(conversation)
    except IntegrityError:
        # A concurrent request created the pair first; return that row
        existing = await _find_conversation(session, user1_id, user2_id)
        if existing is None:
            raise
        return conversation_to_dict(existing)

    logger.info(f"Created conversation {conversation.id} between users {user1_id} and {user2_id}")
    return conversation_to_dict(conversation)


async def get_conversations(session: AsyncSession, user_id: int) -> List[Dict]:
    """
    Get all conversations a user participates in, most recently active first.

    Args:
        session: Database session
        user_id: User ID

    Returns:
        List of conversation dicts ordered by updated_at descending
    """
    result = await session.execute(
        select(Conversation)
        .where(or_(Conversation.user1_id == user_id, Conversation.user2_id == user_id))
        .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
    )
    return [conversation_to_dict(c) for c in result.scalars().all()]


async def get_conversation_for_participant(
    session: AsyncSession, conversation_id: int, user_id: int
) -> Optional[Conversation]:
    """Get a conversation only if the user is one of its two participants."""
    result = await session.execute(
        select(Conversation).where(
            and_(
                Conversation.id == conversation_id,
                or_(Conversation.user1_id == user_id, Conversation.user2_id == user_id),
            )
        )
    )
    return result.scalar_one_or_none()


async def conversation_exists(session: AsyncSession, conversation_id: int) -> bool:
    result = await session.execute(select(Conversation.id).where(Conversation.id == conversation_id))
    return result.scalar_one_or_none() is not None
