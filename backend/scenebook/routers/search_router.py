from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.auth.dependencies import get_current_user
from scenebook.db.base import get_db
from scenebook.middleware.timing import async_timing_context
from scenebook.models.user import User
from scenebook.schemas.search import SearchRequest, SearchResponse
from scenebook.services.search_service import SearchService

router = APIRouter(prefix="/search", tags=["Search"])


@router.post("", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Filtered search over Movies, Characters, Scenes or Montages of the
    acting user. Filters are ANDed; blank values are ignored.
    """
    async with async_timing_context(f"search {request.entity}"):
        return await SearchService(db).search(
            current_user.id,
            request.entity,
            [f.model_dump() for f in request.filters],
            request.page,
            request.limit
        )
