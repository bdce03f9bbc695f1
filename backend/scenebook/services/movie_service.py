import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.enums import DEFAULT_FLAG_NO, DEFAULT_FLAG_YES
from scenebook.models.movie import Movie
from scenebook.services.cascade_service import CascadeDeletionPlanner
from scenebook.services.enrichment import movie_summaries
from scenebook.services.exceptions import NoDefaultMovieError, NotFoundError
from scenebook.services.transaction import atomic
from scenebook.utils.search import icontains
from scenebook.utils.validation import clean_text, page_offset, require_text

logger = logging.getLogger(__name__)


class MovieService:
    """Movies of a user, including the default-movie swap."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_default_movie(self, user_id: str) -> Movie:
        """
        Get the user's default movie.

        Raises:
            NoDefaultMovieError: if the user owns no default movie
        """
        result = await self.db.execute(
            select(Movie).where(
                Movie.user_id == user_id,
                Movie.default_flag == DEFAULT_FLAG_YES
            )
        )
        movie = result.scalars().first()
        if movie is None:
            raise NoDefaultMovieError("No default movie found. Please set a default movie.")
        return movie

    async def get_movie(self, user_id: str, movie_id: str) -> Movie:
        result = await self.db.execute(
            select(Movie).where(Movie.id == movie_id, Movie.user_id == user_id)
        )
        movie = result.scalar_one_or_none()
        if movie is None:
            raise NotFoundError("Movie not found or unauthorized.")
        return movie

    async def resolve_movie(self, user_id: str, movie_id: Optional[str] = None) -> Movie:
        """The movie an operation acts on: the explicit one if given, else the default."""
        if movie_id:
            return await self.get_movie(user_id, movie_id)
        return await self.get_default_movie(user_id)

    async def list_user_movies(self, user_id: str) -> List[Movie]:
        """All of the user's movies, newest first (for the movie picker)."""
        result = await self.db.execute(
            select(Movie)
            .where(Movie.user_id == user_id)
            .order_by(Movie.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_movies(self, user_id: str, page: int, limit: int, search: str = "") -> List[Dict[str, Any]]:
        offset = page_offset(page, limit)
        query = select(Movie).where(Movie.user_id == user_id)

        term = (search or "").strip()
        if term:
            query = query.where(
                or_(
                    icontains(Movie.name, term),
                    icontains(Movie.logline, term),
                    icontains(Movie.description, term),
                )
            )

        result = await self.db.execute(
            query.order_by(Movie.created_at.desc()).limit(limit).offset(offset)
        )
        return await movie_summaries(self.db, list(result.scalars().all()))

    async def _make_default(self, user_id: str, movie_id: str) -> None:
        await self.db.execute(
            update(Movie)
            .where(Movie.user_id == user_id, Movie.default_flag == DEFAULT_FLAG_YES)
            .values(default_flag=DEFAULT_FLAG_NO)
        )
        await self.db.execute(
            update(Movie)
            .where(Movie.id == movie_id, Movie.user_id == user_id)
            .values(default_flag=DEFAULT_FLAG_YES)
        )

    async def create_movie(
        self,
        user_id: str,
        name: str,
        logline: Optional[str] = None,
        description: Optional[str] = None
    ) -> Movie:
        """Create a movie and make it the user's default in the same transaction."""
        name = require_text(name, "Movie name")

        async with atomic(self.db, "create movie"):
            movie = Movie(
                user_id=user_id,
                name=name,
                logline=clean_text(logline) or "",
                description=clean_text(description) or "",
                default_flag=DEFAULT_FLAG_NO
            )
            self.db.add(movie)
            await self.db.flush()
            await self._make_default(user_id, movie.id)

        await self.db.refresh(movie)
        logger.info(f"[movies] created {movie.id} for user {user_id} as default")
        return movie

    async def edit_movie(
        self,
        user_id: str,
        movie_id: str,
        name: str,
        logline: Optional[str] = None,
        description: Optional[str] = None
    ) -> Movie:
        """Update a movie. The edited movie becomes the user's default."""
        name = require_text(name, "Movie name")
        movie = await self.get_movie(user_id, movie_id)

        async with atomic(self.db, "edit movie"):
            movie.name = name
            movie.logline = clean_text(logline) or ""
            movie.description = clean_text(description) or ""
            await self.db.flush()
            await self._make_default(user_id, movie.id)

        await self.db.refresh(movie)
        logger.info(f"[movies] edited {movie.id}")
        return movie

    async def set_default_movie(self, user_id: str, movie_id: str) -> Movie:
        movie = await self.get_movie(user_id, movie_id)
        if movie.default_flag == DEFAULT_FLAG_YES:
            return movie

        async with atomic(self.db, "set default movie"):
            await self._make_default(user_id, movie.id)

        await self.db.refresh(movie)
        logger.info(f"[movies] user {user_id} switched default to {movie.id}")
        return movie

    async def delete_movie(self, user_id: str, movie_id: str) -> Dict[str, Any]:
        return await CascadeDeletionPlanner(self.db).delete_movie(user_id, movie_id)
