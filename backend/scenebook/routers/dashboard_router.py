from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.auth.dependencies import get_acting_movie
from scenebook.db.base import get_db
from scenebook.models.movie import Movie
from scenebook.schemas.dashboard import DashboardResponse
from scenebook.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    return await DashboardService(db).dashboard(movie)
