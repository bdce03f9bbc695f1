"""
Tests for cascade deletion of characters, montage sequences and movies.
"""
import pytest

from scenebook.models import Character, Montage, Movie, Scene, SceneCharacterMap
from scenebook.services.cascade_service import CascadeDeletionPlanner
from scenebook.services.character_service import CharacterService
from scenebook.services.exceptions import NotFoundError, ValidationError
from scenebook.services.montage_service import MontageService
from scenebook.services.movie_service import MovieService
from scenebook.services.scene_service import SceneService

from .utils import count_rows, make_movie, scene_data, scene_numbers, sequence_data, sequence_numbers


@pytest.fixture
async def populated_movie(db_session, test_movie, test_characters):
    """test_movie with three scenes (the second a montage of three sequences) and mappings."""
    raghav, maya, child = test_characters
    scenes = SceneService(db_session)
    first = await scenes.create_scene(test_movie.id, scene_data(1), [{"id": raghav.id, "type": "D"}])
    montage = await scenes.create_scene(
        test_movie.id, scene_data(2, type="M"), [{"id": maya.id, "type": "N"}, {"id": child.id, "type": "B"}]
    )
    third = await scenes.create_scene(test_movie.id, scene_data(3), [{"id": raghav.id, "type": "O"}])

    montages = MontageService(db_session)
    sequences = [
        await montages.create_sequence(test_movie.id, sequence_data(montage.id, n)) for n in range(1, 4)
    ]
    await db_session.commit()
    return {"scenes": [first, montage, third], "sequences": sequences}


class TestDeleteCharacter:
    """Deleting a character removes its scene mappings"""

    @pytest.mark.asyncio
    async def test_mappings_removed(self, db_session, test_movie, test_characters, populated_movie):
        raghav = test_characters[0]

        result = await CharacterService(db_session).delete_character(test_movie.id, raghav.id)

        assert result == {"message": "Character deleted successfully."}
        assert await count_rows(db_session, Character, Character.id == raghav.id) == 0
        assert await count_rows(db_session, SceneCharacterMap, SceneCharacterMap.char_id == raghav.id) == 0
        # Other characters keep theirs
        assert await count_rows(db_session, SceneCharacterMap) == 2
        assert len(await scene_numbers(db_session, test_movie.id)) == 3

    @pytest.mark.asyncio
    async def test_other_movie_character_is_not_found(self, db_session, test_user, test_characters):
        other = make_movie(test_user, "Other Movie", age_minutes=5)
        db_session.add(other)
        await db_session.flush()

        with pytest.raises(NotFoundError, match="Character not found"):
            await CharacterService(db_session).delete_character(other.id, test_characters[0].id)

        assert await count_rows(db_session, Character) == 3

    @pytest.mark.asyncio
    async def test_id_required(self, db_session, test_movie):
        with pytest.raises(ValidationError, match="Character ID is required"):
            await CascadeDeletionPlanner(db_session).delete_character(test_movie.id, "")


class TestDeleteSequence:
    """Deleting a montage sequence closes the gap within its scene"""

    @pytest.mark.asyncio
    async def test_close_gap(self, db_session, test_movie, populated_movie):
        montage_scene = populated_movie["scenes"][1]
        middle = populated_movie["sequences"][1]

        result = await MontageService(db_session).delete_sequence(test_movie.id, middle.id)

        assert result == {"message": "Montage sequence deleted successfully."}
        assert await sequence_numbers(db_session, montage_scene.id) == [
            ("Sequence 1", 1), ("Sequence 3", 2)
        ]

    @pytest.mark.asyncio
    async def test_sequence_of_other_movie(self, db_session, test_user, populated_movie):
        other = make_movie(test_user, "Other Movie", age_minutes=5)
        db_session.add(other)
        await db_session.flush()

        with pytest.raises(NotFoundError, match="Montage Sequence not found"):
            await MontageService(db_session).delete_sequence(other.id, populated_movie["sequences"][0].id)


class TestDeleteMovie:
    """Deleting a movie removes everything it owns"""

    @pytest.mark.asyncio
    async def test_everything_removed(self, db_session, test_user, test_movie, populated_movie):
        result = await MovieService(db_session).delete_movie(test_user.id, test_movie.id)

        assert result["success"] is True
        assert result["message"] == "Movie deleted successfully."
        assert await count_rows(db_session, Movie, Movie.id == test_movie.id) == 0
        assert await count_rows(db_session, Character, Character.movie_id == test_movie.id) == 0
        assert await count_rows(db_session, Scene, Scene.movie_id == test_movie.id) == 0
        assert await count_rows(db_session, SceneCharacterMap) == 0
        assert await count_rows(db_session, Montage) == 0

    @pytest.mark.asyncio
    async def test_other_movies_untouched(self, db_session, test_user, test_movie, populated_movie):
        other = make_movie(test_user, "Other Movie", age_minutes=5)
        db_session.add(other)
        await db_session.flush()
        await SceneService(db_session).create_scene(other.id, scene_data(1, description="Kept"))

        await MovieService(db_session).delete_movie(test_user.id, other.id)

        assert len(await scene_numbers(db_session, test_movie.id)) == 3
        assert await count_rows(db_session, Montage) == 3
        assert await count_rows(db_session, SceneCharacterMap) == 4

    @pytest.mark.asyncio
    async def test_default_promotes_latest_movie(self, db_session, test_user, test_movie):
        older = make_movie(test_user, "Older", age_minutes=60)
        newer = make_movie(test_user, "Newer", age_minutes=10)
        db_session.add_all([older, newer])
        await db_session.flush()

        result = await MovieService(db_session).delete_movie(test_user.id, test_movie.id)

        assert result["new_default_movie_id"] == newer.id
        default = await MovieService(db_session).get_default_movie(test_user.id)
        assert default.id == newer.id
        assert await count_rows(db_session, Movie, Movie.default_flag == "Y") == 1

    @pytest.mark.asyncio
    async def test_non_default_keeps_default(self, db_session, test_user, test_movie):
        older = make_movie(test_user, "Older", age_minutes=60)
        db_session.add(older)
        await db_session.flush()

        result = await MovieService(db_session).delete_movie(test_user.id, older.id)

        assert result["new_default_movie_id"] is None
        default = await MovieService(db_session).get_default_movie(test_user.id)
        assert default.id == test_movie.id

    @pytest.mark.asyncio
    async def test_last_movie_leaves_no_default(self, db_session, test_user, test_movie):
        result = await MovieService(db_session).delete_movie(test_user.id, test_movie.id)

        assert result["new_default_movie_id"] is None
        assert await count_rows(db_session, Movie) == 0

    @pytest.mark.asyncio
    async def test_other_users_movie_is_not_found(self, db_session, other_user, test_movie):
        with pytest.raises(NotFoundError, match="unauthorized"):
            await MovieService(db_session).delete_movie(other_user.id, test_movie.id)

        assert await count_rows(db_session, Movie) == 1
