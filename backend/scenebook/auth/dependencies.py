import logging
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.core.config import settings
from scenebook.db.base import get_db
from scenebook.models.movie import Movie
from scenebook.models.user import User
from scenebook.services.movie_service import MovieService
from scenebook.services.user_service import get_user_by_email

logger = logging.getLogger(__name__)


async def get_current_user(db: AsyncSession = Depends(get_db)) -> User:
    """
    Resolve the acting user.

    There is a single implicit user, looked up by DEFAULT_USER_EMAIL. This is
    the one place a real identity provider would plug in; everything
    downstream only sees the returned User.

    Raises:
        HTTPException: 401 if the configured user has not been seeded.
    """
    user = await get_user_by_email(db, settings.DEFAULT_USER_EMAIL)
    if user is None:
        logger.warning(f"[auth] no user with email {settings.DEFAULT_USER_EMAIL}; run the seed first")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found in database",
        )
    return user


async def get_acting_movie(
    movie_id: Optional[str] = Query(None, description="Movie to act on; defaults to the user's default movie"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Movie:
    """The movie an entity route operates on, owned by the acting user."""
    return await MovieService(db).resolve_movie(current_user.id, movie_id)
