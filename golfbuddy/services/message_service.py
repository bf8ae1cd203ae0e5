"""
Message service for sending and paging through conversation messages.
"""

from typing import List, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from golfbuddy.database.models import Message, MessageStatus
from golfbuddy.services import conversation_service
from golfbuddy.utils.datetime_utils import utcnow, isoformat_or_none
from golfbuddy.utils.errors import NotParticipantError, ConversationNotFoundError
import logging

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_LIMIT = 100


def _message_to_dict(message: Message) -> Dict:
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "content": message.content,
        "status": message.status,
        "created_at": isoformat_or_none(message.created_at),
    }


async def send_message(session: AsyncSession, conversation_id: int, sender_id: int, content: str) -> Dict:
    """
    Append a message to a conversation and mark the conversation as active.

    Args:
        session: Database session
        conversation_id: Conversation ID
        sender_id: Sending user, must be a participant
        content: Message text

    Returns:
        Dict with the created message

    Raises:
        NotParticipantError: If the conversation does not exist or the
            sender is not one of its participants
    """
    conversation = await conversation_service.get_conversation_for_participant(
        session, conversation_id, sender_id
    )
    if not conversation:
        raise NotParticipantError()

    now = utcnow()
    message = Message(
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=content,
        status=MessageStatus.SENT.value,
        created_at=now,
    )
    session.add(message)
    await session.flush()

    conversation.updated_at = now
    await session.flush()

    return _message_to_dict(message)


async def get_messages(
    session: AsyncSession,
    conversation_id: int,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Dict]:
    """
    Get a window of messages, oldest first.

    Args:
        session: Database session
        conversation_id: Conversation ID
        limit: Max messages (default 100)
        offset: Messages to skip (default 0)

    Returns:
        List of message dicts ordered by created_at ascending

    Raises:
        ConversationNotFoundError: If the conversation does not exist
    """
    if not await conversation_service.conversation_exists(session, conversation_id):
        raise ConversationNotFoundError()

    result = await session.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .limit(DEFAULT_MESSAGE_LIMIT if limit is None else limit)
        .offset(offset or 0)
    )
    return [_message_to_dict(m) for m in result.scalars().all()]
