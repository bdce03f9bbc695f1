"""
Request and response schemas for movie endpoints
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MovieCreate(BaseModel):
    """Schema for creating a movie; the new movie becomes the default"""
    name: str = Field(..., max_length=255, description="Title of the movie")
    logline: Optional[str] = Field(None, description="One-line pitch")
    description: Optional[str] = None


class MovieUpdate(BaseModel):
    """Schema for editing a movie; the edited movie becomes the default"""
    name: str = Field(..., max_length=255)
    logline: Optional[str] = None
    description: Optional[str] = None


class MovieResponse(BaseModel):
    id: str
    user_id: str
    name: str
    logline: Optional[str] = None
    description: Optional[str] = None
    default_flag: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MovieSummary(BaseModel):
    """Movie listing entry with its main cast and scene count"""
    id: str
    name: str
    logline: Optional[str] = None
    description: Optional[str] = None
    default_flag: Optional[str] = None
    main_characters: List[str] = []
    scene_count: int = 0


class MoviePickerItem(BaseModel):
    id: str
    name: str
    default_flag: str

    class Config:
        from_attributes = True


class MovieDeleteResponse(BaseModel):
    success: bool
    message: str
    new_default_movie_id: Optional[str] = None
