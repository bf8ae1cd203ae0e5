"""
API routes - combined router from all domain modules.

Shared infrastructure (error-to-HTTP mapping) lives here; every sub-router
imports what it needs from this package.
"""

from fastapi import APIRouter, HTTPException

from golfbuddy.utils.errors import (
    ErrorKind,
    GolfBuddyError,
    NotFoundError,
    ConflictError,
    InvariantViolationError,
    StateError,
)

# ---------------------------------------------------------------------------
# Domain error -> HTTP status
# ---------------------------------------------------------------------------
ERROR_KIND_HEADER = "X-Error-Kind"

# Per-kind overrides of the family status below
KIND_STATUS_CODES = {
    ErrorKind.NOT_PARTICIPANT: 403,
}

FAMILY_STATUS_CODES = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (StateError, 409),
    (InvariantViolationError, 400),
)


def http_error(error: GolfBuddyError) -> HTTPException:
    """Translate a service error into an HTTPException carrying its kind."""
    status_code = KIND_STATUS_CODES.get(error.kind)
    if status_code is None:
        status_code = next(
            (code for family, code in FAMILY_STATUS_CODES if isinstance(error, family)), 400
        )
    return HTTPException(
        status_code=status_code,
        detail=str(error),
        headers={ERROR_KIND_HEADER: error.kind.value},
    )


# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from golfbuddy.api.routes.users import router as users_router  # noqa: E402
from golfbuddy.api.routes.courses import router as courses_router  # noqa: E402
from golfbuddy.api.routes.buddies import router as buddies_router  # noqa: E402
from golfbuddy.api.routes.conversations import router as conversations_router  # noqa: E402

router = APIRouter()
router.include_router(users_router)
router.include_router(courses_router)
router.include_router(buddies_router)
router.include_router(conversations_router)
