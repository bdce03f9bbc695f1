"""
Models package for the Scenebook application.

This package contains all the SQLAlchemy models for the application.
"""

# Import Base first to avoid circular imports
from scenebook.models.base import Base

# Import all models to ensure they are registered with SQLAlchemy
from scenebook.models.user import User
from scenebook.models.movie import Movie
from scenebook.models.character import Character
from scenebook.models.scene import Scene
from scenebook.models.scene_character import SceneCharacterMap
from scenebook.models.montage import Montage
from scenebook.models.enums import (
    Gender,
    CharacterType,
    IntExt,
    SetLoc,
    SceneType,
    RoleType,
    Relevance,
    Cost,
)

# This ensures that all models are properly registered with SQLAlchemy's metadata
# and will be picked up by Alembic for migrations
__all__ = [
    'Base',

    # Core Models
    'User',
    'Movie',
    'Character',
    'Scene',
    'SceneCharacterMap',
    'Montage',

    # Enums
    'Gender',
    'CharacterType',
    'IntExt',
    'SetLoc',
    'SceneType',
    'RoleType',
    'Relevance',
    'Cost',
]
