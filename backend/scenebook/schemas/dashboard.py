from typing import List, Optional

from pydantic import BaseModel

from scenebook.schemas.character import CharacterResponse
from scenebook.schemas.scene import SceneResponse


class MovieDetails(BaseModel):
    title: str
    logline: Optional[str] = None
    description: Optional[str] = None
    main_characters: List[str] = []
    scene_count: int = 0


class CastTiers(BaseModel):
    main: List[CharacterResponse] = []
    primary: List[CharacterResponse] = []
    secondary: List[CharacterResponse] = []


class SceneMix(BaseModel):
    longest: List[SceneResponse] = []
    set: int = 0
    location: int = 0
    montage: int = 0
    dialogue: int = 0
    action: int = 0
    stunt: int = 0


class DashboardResponse(BaseModel):
    movie_details: MovieDetails
    characters: CastTiers
    scenes: SceneMix
