"""FastAPI dependencies for authentication, tenancy, and database access."""

from typing import Generator

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from hr_admin.core.security import decode_session_token
from hr_admin.db.session import SessionLocal
from hr_admin.schemas.auth import RequestContext


# Cookie and header names
COOKIE_NAME = "hr_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(request: Request, db: Session = Depends(get_db)) -> int:
    """
    Authenticated user id from the session cookie.

    Raises:
        HTTPException 401: Missing or invalid session, or unknown user
    """
    from hr_admin.db.models import User

    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_session_token(token)
        user_id = int(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid session")

    if not db.get(User, user_id):
        raise HTTPException(status_code=401, detail="User not found")
    return user_id


def get_request_context(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> RequestContext:
    """
    Per-request tenant context: user, active company, role.

    A caller without an active company still gets a context; scoped
    operations answer it with the "no active company" outcome.
    """
    from hr_admin.services.tenancy_service import build_request_context

    return build_request_context(db, user_id)


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'",
        )
