"""
Tests for character validation, listing and partial edits.
"""
import pytest

from scenebook.services.character_service import CharacterService
from scenebook.services.exceptions import NotFoundError, ValidationError
from scenebook.services.scene_service import SceneService

from .utils import scene_data


def character_data(**overrides):
    data = {"name": "Extra", "gender": "F", "type": "T", "lower_age": 30, "upper_age": 40}
    data.update(overrides)
    return data


class TestValidation:
    """Field checks on create"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("lower,upper", [(0, 0), (125, 125), (None, 125), (12, None)])
    async def test_age_boundaries_accepted(self, db_session, test_movie, lower, upper):
        character = await CharacterService(db_session).create_character(
            test_movie.id, character_data(lower_age=lower, upper_age=upper)
        )
        assert (character.lower_age, character.upper_age) == (lower, upper)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("lower,upper,message", [
        (126, 126, "between 0 and 125"),
        (-1, 10, "between 0 and 125"),
        (10, 5, "cannot be greater"),
    ])
    async def test_age_rejected(self, db_session, test_movie, lower, upper, message):
        with pytest.raises(ValidationError, match=message):
            await CharacterService(db_session).create_character(
                test_movie.id, character_data(lower_age=lower, upper_age=upper)
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field,value,message", [
        ("gender", "X", "Invalid gender"),
        ("gender", "", "gender is required"),
        ("type", "Q", "Invalid character type"),
        ("name", " ", "Character name is required"),
        ("exp_screen_time", -3, "exp_screen_time"),
    ])
    async def test_bad_fields(self, db_session, test_movie, field, value, message):
        with pytest.raises(ValidationError, match=message):
            await CharacterService(db_session).create_character(
                test_movie.id, character_data(**{field: value})
            )

    @pytest.mark.asyncio
    async def test_text_is_trimmed(self, db_session, test_movie):
        character = await CharacterService(db_session).create_character(
            test_movie.id, character_data(name="  Porter ", notes=None)
        )
        assert character.name == "Porter"
        assert character.notes == ""


class TestEdit:
    """Partial updates"""

    @pytest.mark.asyncio
    async def test_only_given_fields_change(self, db_session, test_movie, test_characters):
        child = test_characters[2]

        edited = await CharacterService(db_session).edit_character(
            test_movie.id, child.id, {"notes": "Lost his satchel"}
        )

        assert edited.notes == "Lost his satchel"
        assert edited.name == "Child"
        assert (edited.lower_age, edited.upper_age) == (10, 12)

    @pytest.mark.asyncio
    async def test_age_checked_against_stored_bound(self, db_session, test_movie, test_characters):
        child = test_characters[2]

        with pytest.raises(ValidationError, match="cannot be greater"):
            await CharacterService(db_session).edit_character(test_movie.id, child.id, {"lower_age": 13})

    @pytest.mark.asyncio
    async def test_unknown_character(self, db_session, test_movie):
        with pytest.raises(NotFoundError):
            await CharacterService(db_session).edit_character(test_movie.id, "missing", {"name": "X"})


class TestListing:
    """Characters ordered by importance, with their scenes"""

    @pytest.mark.asyncio
    async def test_order_and_scenes(self, db_session, test_movie, test_characters):
        raghav = test_characters[0]
        scenes = SceneService(db_session)
        await scenes.create_scene(test_movie.id, scene_data(1), [{"id": raghav.id, "type": "D"}])
        await scenes.create_scene(test_movie.id, scene_data(2), [{"id": raghav.id, "type": "N"}])

        rows = await CharacterService(db_session).list_characters(test_movie.id, 1, 10)

        assert [row["name"] for row in rows] == ["Maya", "Raghav", "Child"]
        assert [s["number"] for s in rows[1]["scenes"]] == [1, 2]
        assert rows[0]["scenes"] == []

    @pytest.mark.asyncio
    async def test_search(self, db_session, test_movie, test_characters):
        rows = await CharacterService(db_session).list_characters(test_movie.id, 1, 10, "satchel")
        assert [row["name"] for row in rows] == ["Child"]

    @pytest.mark.asyncio
    async def test_limit_bounds(self, db_session, test_movie):
        with pytest.raises(ValidationError, match="limit"):
            await CharacterService(db_session).list_characters(test_movie.id, 1, 1000)
