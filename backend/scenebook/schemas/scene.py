"""
Request and response schemas for scene endpoints
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CharacterRoleIn(BaseModel):
    """One entry of a scene's character list; an empty type means not in the scene"""
    id: Optional[str] = None
    type: Optional[str] = None


class SceneFields(BaseModel):
    act: Optional[str] = None
    ie_flag: Optional[str] = Field(None, description="I, E or IE")
    sl_flag: Optional[str] = Field(None, description="S, L or SL")
    type: Optional[str] = None
    location: Optional[str] = None
    sub_location: Optional[str] = None
    weather: Optional[str] = None
    time: Optional[str] = None
    description: Optional[str] = None
    exp_length: Optional[int] = Field(None, description="Expected length in minutes")
    num_extras: Optional[int] = None
    camera_notes: Optional[str] = None
    lighting_notes: Optional[str] = None
    sound_notes: Optional[str] = None
    color_notes: Optional[str] = None
    prop_notes: Optional[str] = None
    other_notes: Optional[str] = None
    relevance_quotient: Optional[str] = None
    cost_quotient: Optional[str] = None


class SceneCreate(SceneFields):
    number: int = Field(..., description="Position in the movie; later scenes shift up")
    characters: List[CharacterRoleIn] = []


class SceneUpdate(SceneFields):
    """Partial update. `characters` always replaces the scene's full mapping set"""
    number: Optional[int] = None
    characters: List[CharacterRoleIn] = []


class SceneResponse(BaseModel):
    id: str
    movie_id: str
    number: int
    act: Optional[str] = None
    ie_flag: Optional[str] = None
    sl_flag: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None
    sub_location: Optional[str] = None
    weather: Optional[str] = None
    time: Optional[str] = None
    description: Optional[str] = None
    exp_length: Optional[int] = None
    num_extras: Optional[int] = None
    camera_notes: Optional[str] = None
    lighting_notes: Optional[str] = None
    sound_notes: Optional[str] = None
    color_notes: Optional[str] = None
    prop_notes: Optional[str] = None
    other_notes: Optional[str] = None
    relevance_quotient: Optional[str] = None
    cost_quotient: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SceneCharacter(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    type: str


class SceneWithCharacters(SceneResponse):
    characters: List[SceneCharacter] = []
