"""
Shared test utilities for the breakdown service and API tests.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Tuple

from sqlalchemy import select

from scenebook.models import Montage, Movie, Scene, User


def make_movie(user: User, name: str, default: bool = False, age_minutes: int = 0) -> Movie:
    """Movie row with a controlled creation time (older for larger age_minutes)."""
    created = datetime.now(timezone.utc) - timedelta(minutes=age_minutes)
    return Movie(
        user_id=user.id,
        name=name,
        logline=f"{name} logline",
        description=f"{name} description",
        default_flag="Y" if default else "N",
        created_at=created,
        updated_at=created,
    )


def scene_data(number: int, **overrides) -> Dict[str, Any]:
    """Valid scene payload described "Scene <number>"."""
    data = {
        "number": number,
        "act": "1",
        "ie_flag": "I",
        "sl_flag": "L",
        "type": "D",
        "location": "Library",
        "sub_location": f"Room {number}",
        "weather": "Sunny",
        "time": "Morning",
        "description": f"Scene {number}",
        "exp_length": number,
        "num_extras": 0,
    }
    data.update(overrides)
    return data


def sequence_data(scene_id: str, seq_number: int, **overrides) -> Dict[str, Any]:
    data = {
        "scene_id": scene_id,
        "seq_number": seq_number,
        "ie_flag": "E",
        "sl_flag": "L",
        "location": "Train Station",
        "sub_location": "Platform",
        "weather": "Overcast",
        "time": "Evening",
        "description": f"Sequence {seq_number}",
        "exp_length": 30,
        "num_extras": 2,
        "notes": "",
    }
    data.update(overrides)
    return data


async def scene_numbers(db, movie_id: str) -> List[Tuple[str, int]]:
    """(description, number) pairs in number order, read straight from the table."""
    result = await db.execute(
        select(Scene.description, Scene.number)
        .where(Scene.movie_id == movie_id)
        .order_by(Scene.number)
    )
    return [tuple(row) for row in result.all()]


async def sequence_numbers(db, scene_id: str) -> List[Tuple[str, int]]:
    result = await db.execute(
        select(Montage.description, Montage.seq_number)
        .where(Montage.scene_id == scene_id)
        .order_by(Montage.seq_number)
    )
    return [tuple(row) for row in result.all()]


async def count_rows(db, model, *criteria) -> int:
    result = await db.execute(select(model.id).where(*criteria))
    return len(result.all())
