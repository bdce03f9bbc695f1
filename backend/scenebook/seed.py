"""
Create the tables and seed the default user with a demo breakdown.

    python -m scenebook.seed          # create tables, seed if the user is missing
    python -m scenebook.seed --reset  # drop everything first
"""
import asyncio
import logging

from scenebook.core.config import settings
from scenebook.db.base import async_session_maker, engine
from scenebook.models import Base, User
from scenebook.services.character_service import CharacterService
from scenebook.services.montage_service import MontageService
from scenebook.services.movie_service import MovieService
from scenebook.services.scene_service import SceneService
from scenebook.services.user_service import get_user_by_email

logger = logging.getLogger(__name__)

DEMO_MOVIE = {
    "name": "The Last Page (Demo Movie)",
    "logline": (
        "On his last day as a librarian, an elderly man discovers an unfinished story from his "
        "past that helps him make peace with old regrets."
    ),
    "description": (
        "A poignant tale about memory, love, and closure. A librarian on his final day finds a "
        "notebook with a story that mirrors his life, triggering a series of reflections that "
        "lead to an unexpected reunion."
    ),
}

DEMO_CHARACTERS = [
    {"name": "Raghav", "gender": "M", "lower_age": 55, "upper_age": 65, "type": "M",
     "description": "An aging librarian on his final day of work.", "exp_screen_time": 15,
     "notes": "Soft-spoken, wears reading glasses."},
    {"name": "Maya", "gender": "F", "lower_age": 55, "upper_age": 65, "type": "M",
     "description": "A schoolteacher who reconnects with Raghav.", "exp_screen_time": 10,
     "notes": "Warm smile, graceful presence."},
    {"name": "Young Raghav", "gender": "M", "lower_age": 20, "upper_age": 25, "type": "P",
     "description": "Raghav in his youth, full of dreams and hesitations.", "exp_screen_time": 5,
     "notes": "Seen in flashback."},
    {"name": "Young Maya", "gender": "F", "lower_age": 20, "upper_age": 25, "type": "P",
     "description": "Lively and expressive; deeply fond of young Raghav.", "exp_screen_time": 5,
     "notes": "Seen in flashback."},
    {"name": "Child", "gender": "M", "lower_age": 10, "upper_age": 12, "type": "S",
     "description": "A curious child who unknowingly connects the past.", "exp_screen_time": 2,
     "notes": "Carries a satchel and wide-eyed curiosity."},
]

# (scene fields, {character name: role type})
DEMO_SCENES = [
    ({"number": 1, "act": "1", "ie_flag": "I", "sl_flag": "L", "type": "D",
      "location": "Library", "sub_location": "Entrance", "weather": "Sunny", "time": "Morning",
      "description": "Raghav opens the library; a child gives him an old notebook that triggers his past.",
      "exp_length": 2, "num_extras": 1,
      "camera_notes": "Wide shot of dusty interiors, over-the-shoulder on notebook.",
      "lighting_notes": "Soft golden morning light.",
      "sound_notes": "Footsteps, faint ticking clock.",
      "color_notes": "Warm earthy tones.",
      "relevance_quotient": "M", "cost_quotient": "I"},
     {"Raghav": "D", "Child": "D"}),
    ({"number": 2, "act": "1", "ie_flag": "IE", "sl_flag": "L", "type": "M",
      "location": "Library/Train Station", "sub_location": "Varied", "weather": "Varied", "time": "Varied",
      "description": "Montage: Young Raghav and Maya's past unfolds through the story.",
      "exp_length": 5, "num_extras": 5,
      "camera_notes": "Dreamy, shallow focus transitions.",
      "lighting_notes": "Soft glows for nostalgia.",
      "sound_notes": "Music with light page-flip sound FX.",
      "color_notes": "Sepia tint with slight film grain.",
      "relevance_quotient": "M", "cost_quotient": "R"},
     {"Young Raghav": "N", "Young Maya": "N"}),
    ({"number": 3, "act": "2", "ie_flag": "I", "sl_flag": "L", "type": "D",
      "location": "Library", "sub_location": "Main Desk", "weather": "Cloudy", "time": "Evening",
      "description": "Maya visits; she and Raghav reconnect quietly.",
      "exp_length": 5, "num_extras": 5,
      "camera_notes": "Alternating medium shots with long pauses.",
      "lighting_notes": "Soft and moody with natural window light.",
      "sound_notes": "Clock ticking louder now.",
      "color_notes": "Cool tones with warm accents.",
      "relevance_quotient": "M", "cost_quotient": "I"},
     {"Raghav": "D", "Maya": "D"}),
    ({"number": 4, "act": "3", "ie_flag": "I", "sl_flag": "L", "type": "D",
      "location": "Library", "sub_location": "Back Corner", "weather": "Calm", "time": "Late Evening",
      "description": "Raghav and Maya find emotional closure. She returns the notebook to the shelf.",
      "exp_length": 5, "num_extras": 0,
      "camera_notes": "Tight close-ups on expressions, gentle dolly movement.",
      "lighting_notes": "Dim, symbolic light from a single desk lamp.",
      "sound_notes": "Soft ambient hum.",
      "color_notes": "Desaturated but warm glow on faces.",
      "relevance_quotient": "M", "cost_quotient": "I"},
     {"Raghav": "D", "Maya": "D"}),
    ({"number": 5, "act": "3", "ie_flag": "E", "sl_flag": "L", "type": "A",
      "location": "Library", "sub_location": "Exit", "weather": "Clear", "time": "Night",
      "description": "Raghav locks up the library, leaves his name badge, and walks into the street with peace.",
      "exp_length": 3, "num_extras": 0,
      "camera_notes": "Back shot of Raghav walking away under streetlamp.",
      "lighting_notes": "Night lighting with streetlamp glow.",
      "sound_notes": "Distant dog bark, soft ambient music.",
      "color_notes": "Blue-grey street with warm badge close-up.",
      "relevance_quotient": "M", "cost_quotient": "I"},
     {"Raghav": "N"}),
]

# Sequences of the montage scene (#2)
DEMO_SEQUENCES = [
    {"seq_number": 1, "ie_flag": "I", "sl_flag": "L", "location": "Library", "sub_location": "Study Desk",
     "weather": "Sunny", "time": "Afternoon", "description": "Young Raghav writes, tears pages, hesitates.",
     "exp_length": 120, "num_extras": 1, "notes": "Emotive close-ups of frustration and hope."},
    {"seq_number": 2, "ie_flag": "E", "sl_flag": "L", "location": "Library", "sub_location": "Outside Steps",
     "weather": "Windy", "time": "Late Afternoon", "description": "Young Maya reads his notes, waits outside.",
     "exp_length": 90, "num_extras": 1, "notes": "Wind-blown hair, hopeful eyes."},
    {"seq_number": 3, "ie_flag": "E", "sl_flag": "L", "location": "Train Station", "sub_location": "Platform",
     "weather": "Overcast", "time": "Evening",
     "description": "Unsent letter, Maya departs as Young Raghav arrives too late.",
     "exp_length": 90, "num_extras": 5, "notes": "Symbolic train departure with poetic stillness."},
]


async def seed_demo(db, user: User) -> None:
    """Seed one demo movie for `user` through the regular services."""
    movie = await MovieService(db).create_movie(user.id, **DEMO_MOVIE)

    characters = CharacterService(db)
    ids_by_name = {}
    for data in DEMO_CHARACTERS:
        character = await characters.create_character(movie.id, data)
        ids_by_name[character.name] = character.id

    scenes = SceneService(db)
    montage_scene_id = None
    for fields, roles in DEMO_SCENES:
        scene = await scenes.create_scene(
            movie.id,
            fields,
            [{"id": ids_by_name[name], "type": role} for name, role in roles.items()]
        )
        if scene.type == "M":
            montage_scene_id = scene.id

    montages = MontageService(db)
    for data in DEMO_SEQUENCES:
        await montages.create_sequence(movie.id, {**data, "scene_id": montage_scene_id})

    logger.info(f"[seed] demo movie {movie.id} seeded for {user.email}")


async def seed(reset: bool = False) -> None:
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
            logger.info("[seed] dropped all tables")
        await conn.run_sync(Base.metadata.create_all)

    try:
        async with async_session_maker() as db:
            user = await get_user_by_email(db, settings.DEFAULT_USER_EMAIL)
            if user is not None:
                logger.info(f"[seed] {settings.DEFAULT_USER_EMAIL} already exists, nothing to do")
                return

            user = User(name="Default User", email=settings.DEFAULT_USER_EMAIL)
            db.add(user)
            await db.flush()

            await seed_demo(db, user)
            await db.commit()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Seed the default user with a demo breakdown')
    parser.add_argument('--reset', action='store_true', help='Drop all tables before seeding')
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(seed(args.reset))
