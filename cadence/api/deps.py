# cadence/api/deps.py
"""
FastAPI dependencies for Cadence.

Provides dependency functions for database sessions and for resolving the
user a request acts for.
"""

import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from cadence.db.models.user import User
from cadence.db.session import get_db
from cadence.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

__all__ = ["get_db", "get_current_user"]


def get_current_user(
    db: Session = Depends(get_db),
    user_id: int = Header(..., alias="X-User-ID", description="ID of the acting user"),
) -> User:
    """
    Resolve the user identified by the X-User-ID header.

    Raises:
        HTTPException: 401 if the user does not exist or is inactive
    """
    user = UserRepository(db).get_by_id(user_id)
    if user is None or not user.is_active:
        logger.warning(f"Rejected request for unknown or inactive user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown or inactive user",
        )
    return user
