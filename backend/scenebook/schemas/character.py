"""
Request and response schemas for character endpoints
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CharacterCreate(BaseModel):
    name: str = Field(..., max_length=255)
    gender: str = Field(..., description="M, F or O")
    type: str = Field(..., description="M, P, S, T or O")
    lower_age: Optional[int] = None
    upper_age: Optional[int] = None
    description: Optional[str] = None
    exp_screen_time: Optional[int] = Field(None, description="Expected screen time in minutes")
    notes: Optional[str] = None


class CharacterUpdate(BaseModel):
    """Partial update; omitted fields keep their stored values"""
    name: Optional[str] = Field(None, max_length=255)
    gender: Optional[str] = None
    type: Optional[str] = None
    lower_age: Optional[int] = None
    upper_age: Optional[int] = None
    description: Optional[str] = None
    exp_screen_time: Optional[int] = None
    notes: Optional[str] = None


class CharacterResponse(BaseModel):
    id: str
    movie_id: str
    name: str
    gender: str
    type: str
    lower_age: Optional[int] = None
    upper_age: Optional[int] = None
    description: Optional[str] = None
    exp_screen_time: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CharacterScene(BaseModel):
    id: str
    number: int
    description: Optional[str] = None
    exp_length: Optional[int] = None


class CharacterWithScenes(CharacterResponse):
    scenes: List[CharacterScene] = []


class SceneCharacterRole(BaseModel):
    """A character of the movie and its role type in one scene ("" if absent)"""
    id: str
    name: str
    type: str = ""
