"""
Buddy match service.

Handles creating buddy requests and moving them out of pending. A match is
created pending and changes status exactly once, to accepted or declined.
Accepting a match opens (or reuses) the conversation between the two users.
Only one match may ever exist between two users, whichever direction it was
sent in and whatever its status.
"""

from typing import List, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_, or_
from golfbuddy.database.db import add_with_savepoint
from golfbuddy.database.models import BuddyMatch, BuddyMatchStatus
from golfbuddy.services import user_service, conversation_service
from golfbuddy.services.conversation_service import normalize_pair
from golfbuddy.utils.datetime_utils import utcnow, isoformat_or_none
from golfbuddy.utils.errors import (
    SelfMatchError,
    DuplicateMatchError,
    MatchNotFoundOrNotPendingError,
)
import logging

logger = logging.getLogger(__name__)

# Statuses a pending match may move to
RESPONSE_STATUSES = (BuddyMatchStatus.ACCEPTED.value, BuddyMatchStatus.DECLINED.value)


def _match_to_dict(match: BuddyMatch) -> Dict:
    return {
        "id": match.id,
        "requester_id": match.requester_id,
        "recipient_id": match.recipient_id,
        "status": match.status,
        "created_at": isoformat_or_none(match.created_at),
        "updated_at": isoformat_or_none(match.updated_at),
    }


async def create_buddy_match(session: AsyncSession, requester_id: int, recipient_id: int) -> Dict:
    """
    Send a buddy request from one user to another.

    Args:
        session: Database session
        requester_id: User sending the request
        recipient_id: User receiving the request

    Returns:
        Dict with the new pending match

    Raises:
        SelfMatchError: If requester and recipient are the same user
        UserNotFoundError: If either user does not exist
        DuplicateMatchError: If any match already exists between the two users
    """
    if requester_id == recipient_id:
        raise SelfMatchError()

    await user_service.ensure_users_exist(session, [requester_id, recipient_id])

    user_low_id, user_high_id = normalize_pair(requester_id, recipient_id)
    result = await session.execute(
        select(BuddyMatch.id).where(
            and_(BuddyMatch.user_low_id == user_low_id, BuddyMatch.user_high_id == user_high_id)
        )
    )
    if result.first() is not None:
        raise DuplicateMatchError()

    match = BuddyMatch(
        requester_id=requester_id,
        recipient_id=recipient_id,
        user_low_id=user_low_id,
        user_high_id=user_high_id,
        status=BuddyMatchStatus.PENDING.value,
    )
    await add_with_savepoint(session, match, lambda e: DuplicateMatchError())

    logger.info(f"Buddy match {match.id} requested: {requester_id} -> {recipient_id}")
    return _match_to_dict(match)


async def update_buddy_match_status(session: AsyncSession, match_id: int, status: str) -> Dict:
    """
    Accept or decline a pending buddy match.

    The transition is a conditional update on (id, status=pending), so a
    match can only ever be answered once. Accepting also gets or creates the
    conversation between requester and recipient in the same transaction.

    Args:
        session: Database session
        match_id: Buddy match ID
        status: "accepted" or "declined"

    Returns:
        Dict with the updated match

    Raises:
        ValueError: If status is not accepted/declined
        MatchNotFoundOrNotPendingError: If no pending match has this id
    """
    status = BuddyMatchStatus(status).value
    if status not in RESPONSE_STATUSES:
        raise ValueError(f"Cannot move a buddy match to '{status}'")

    result = await session.execute(
        update(BuddyMatch)
        .where(
            and_(
                BuddyMatch.id == match_id,
                BuddyMatch.status == BuddyMatchStatus.PENDING.value,
            )
        )
        .values(status=status, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise MatchNotFoundOrNotPendingError()

    result = await session.execute(
        select(BuddyMatch)
        .where(BuddyMatch.id == match_id)
        .execution_options(populate_existing=True)
    )
    match = result.scalar_one()

    if status == BuddyMatchStatus.ACCEPTED.value:
        await conversation_service.get_or_create_conversation(
            session, match.requester_id, match.recipient_id
        )

    logger.info(f"Buddy match {match_id} {status}")
    return _match_to_dict(match)


async def get_buddy_matches(session: AsyncSession, user_id: int) -> List[Dict]:
    """
    Get every buddy match a user is part of, as requester or recipient.

    Args:
        session: Database session
        user_id: User ID

    Returns:
        List of match dicts, any status, newest first
    """
    result = await session.execute(
        select(BuddyMatch)
        .where(or_(BuddyMatch.requester_id == user_id, BuddyMatch.recipient_id == user_id))
        .order_by(BuddyMatch.created_at.desc(), BuddyMatch.id.desc())
    )
    return [_match_to_dict(m) for m in result.scalars().all()]
