"""
Montage sequence endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.auth.dependencies import get_acting_movie
from scenebook.core.config import settings
from scenebook.db.base import get_db
from scenebook.middleware.timing import async_timing_context
from scenebook.models.movie import Movie
from scenebook.schemas.common import MessageResponse
from scenebook.schemas.montage import MontageScene, SequenceCreate, SequenceResponse, SequenceUpdate
from scenebook.services.montage_service import MontageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/montages", tags=["Montages"])


@router.get("", response_model=List[MontageScene])
async def list_montages(
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    search: str = Query(""),
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    """Montage scenes of the movie, each with its sequences in order."""
    async with async_timing_context(f"list_montages movie={movie.id} page={page}"):
        return await MontageService(db).list_montages(movie.id, page, limit, search)


@router.get("/{sequence_id}", response_model=SequenceResponse)
async def get_sequence(
    sequence_id: str,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    return await MontageService(db).get_sequence(movie.id, sequence_id)


@router.post("", response_model=SequenceResponse, status_code=status.HTTP_201_CREATED)
async def create_sequence(
    sequence_data: SequenceCreate,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    sequence = await MontageService(db).create_sequence(movie.id, sequence_data.model_dump())
    await db.commit()
    return sequence


@router.patch("/{sequence_id}", response_model=SequenceResponse)
async def update_sequence(
    sequence_id: str,
    sequence_data: SequenceUpdate,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    sequence = await MontageService(db).edit_sequence(
        movie.id,
        sequence_id,
        sequence_data.model_dump(exclude_unset=True)
    )
    await db.commit()
    return sequence


@router.delete("/{sequence_id}", response_model=MessageResponse)
async def delete_sequence(
    sequence_id: str,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    result = await MontageService(db).delete_sequence(movie.id, sequence_id)
    await db.commit()
    return result
