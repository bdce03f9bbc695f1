from typing import Any, Dict, List

from pydantic import BaseModel, Field

from scenebook.core.config import settings


class SearchFilter(BaseModel):
    field: str
    value: str = ""


class SearchRequest(BaseModel):
    entity: str = Field(..., description="Movies, Characters, Scenes or Montages")
    filters: List[SearchFilter] = []
    page: int = 1
    limit: int = settings.DEFAULT_PAGE_SIZE


class SearchResponse(BaseModel):
    entity: str
    results: List[Dict[str, Any]]
