"""
Tests for filtered search across the user's movies.
"""
import pytest

from scenebook.services.exceptions import ValidationError
from scenebook.services.montage_service import MontageService
from scenebook.services.scene_service import SceneService
from scenebook.services.search_filters import build_conditions
from scenebook.services.search_service import SearchService

from .utils import make_movie, scene_data, sequence_data


@pytest.fixture
async def breakdown(db_session, test_user, test_movie, test_characters):
    """Two scenes of test_movie (one a montage with two sequences) and a second movie."""
    raghav, maya, child = test_characters
    scenes = SceneService(db_session)
    opening = await scenes.create_scene(
        test_movie.id,
        scene_data(1, exp_length=2, num_extras=1, camera_notes="Wide shot of dusty interiors",
                   relevance_quotient="M", cost_quotient="I"),
        [{"id": raghav.id, "type": "D"}, {"id": child.id, "type": "D"}]
    )
    montage = await scenes.create_scene(
        test_movie.id,
        scene_data(2, type="M", ie_flag="IE", location="Train Station", exp_length=5, num_extras=5),
        [{"id": maya.id, "type": "N"}]
    )
    montages = MontageService(db_session)
    await montages.create_sequence(test_movie.id, sequence_data(montage.id, 1, exp_length=120))
    await montages.create_sequence(test_movie.id, sequence_data(montage.id, 2, exp_length=15, ie_flag="I"))

    other = make_movie(test_user, "Another Story", age_minutes=5)
    db_session.add(other)
    await db_session.flush()
    await scenes.create_scene(other.id, scene_data(1, location="Harbour"))
    await db_session.commit()
    return {"opening": opening, "montage": montage, "other": other}


async def search(db, user, entity, *filters, page=1, limit=10):
    response = await SearchService(db).search(
        user.id, entity, [{"field": f, "value": v} for f, v in filters], page, limit
    )
    assert response["entity"] == entity
    return response["results"]


class TestBuildConditions:
    """Filter translation without the database"""

    def test_blank_values_skipped(self):
        assert build_conditions("Scenes", [{"field": "Location", "value": "  "}]) == []

    def test_unknown_entity(self):
        with pytest.raises(ValidationError, match="Invalid entity type"):
            build_conditions("Props", [])

    def test_unknown_field(self):
        with pytest.raises(ValidationError, match="Unsupported field: Budget"):
            build_conditions("Movies", [{"field": "Budget", "value": "1"}])

    def test_unknown_label(self):
        with pytest.raises(ValidationError, match="Invalid Gender filter"):
            build_conditions("Characters", [{"field": "Gender", "value": "M"}])

    def test_unknown_bucket(self):
        with pytest.raises(ValidationError, match="Invalid Length filter"):
            build_conditions("Scenes", [{"field": "Length", "value": "forever"}])


class TestSearch:

    @pytest.mark.asyncio
    async def test_movies_by_name(self, db_session, test_user, breakdown):
        results = await search(db_session, test_user, "Movies", ("Name", "story"))

        assert [m["name"] for m in results] == ["Another Story"]
        assert results[0]["scene_count"] == 1

    @pytest.mark.asyncio
    async def test_all_movies_ordered_by_name(self, db_session, test_user, breakdown):
        results = await search(db_session, test_user, "Movies")
        assert [m["name"] for m in results] == ["Another Story", "The Last Page"]

    @pytest.mark.asyncio
    async def test_other_users_data_is_invisible(self, db_session, other_user, breakdown):
        assert await search(db_session, other_user, "Scenes") == []

    @pytest.mark.asyncio
    async def test_characters_by_label_and_age(self, db_session, test_user, breakdown):
        results = await search(
            db_session, test_user, "Characters", ("Gender", "Male"), ("Age", "50 - 60")
        )

        assert [c["name"] for c in results] == ["Raghav"]
        assert results[0]["movie_name"] == "The Last Page"
        assert [s["number"] for s in results[0]["scenes"]] == [1]

    @pytest.mark.asyncio
    async def test_characters_by_type_and_screen_time(self, db_session, test_user, breakdown):
        results = await search(
            db_session, test_user, "Characters", ("Type", "Main"), ("Screen Time", "10 - 20 min")
        )
        assert sorted(c["name"] for c in results) == ["Maya", "Raghav"]

    @pytest.mark.asyncio
    async def test_scenes_by_character(self, db_session, test_user, breakdown):
        results = await search(db_session, test_user, "Scenes", ("Character", "chi"))

        assert [s["id"] for s in results] == [breakdown["opening"].id]
        assert {c["name"] for c in results[0]["characters"]} == {"Raghav", "Child"}

    @pytest.mark.asyncio
    async def test_scenes_by_movie_and_codes(self, db_session, test_user, breakdown):
        results = await search(
            db_session, test_user, "Scenes",
            ("Movie", "last page"), ("Int Ext", "INT./EXT."), ("Type", "Montage")
        )
        assert [s["id"] for s in results] == [breakdown["montage"].id]

    @pytest.mark.asyncio
    async def test_scenes_by_notes_and_buckets(self, db_session, test_user, breakdown):
        assert len(await search(db_session, test_user, "Scenes", ("Notes", "DUSTY"))) == 1
        assert len(await search(db_session, test_user, "Scenes", ("Extras", "5 - 10"))) == 1
        assert len(await search(db_session, test_user, "Scenes", ("Length", "1 - 3 min"))) == 2
        assert len(await search(db_session, test_user, "Scenes", ("Relevance", "Must-have"))) == 1
        assert len(await search(db_session, test_user, "Scenes", ("Cost", "Inexpensive"))) == 1

    @pytest.mark.asyncio
    async def test_scenes_ordered_by_movie_then_number(self, db_session, test_user, breakdown):
        results = await search(db_session, test_user, "Scenes", ("Location", "a"))

        assert [(s["movie_name"], s["number"]) for s in results] == [
            ("Another Story", 1), ("The Last Page", 1), ("The Last Page", 2)
        ]

    @pytest.mark.asyncio
    async def test_unmatched_movie_name_returns_nothing(self, db_session, test_user, breakdown):
        assert await search(db_session, test_user, "Scenes", ("Movie", "nonexistent")) == []

    @pytest.mark.asyncio
    async def test_montages(self, db_session, test_user, breakdown):
        results = await search(
            db_session, test_user, "Montages", ("Scene Number", "2"), ("Length", "> 50 seconds")
        )

        assert len(results) == 1
        assert results[0]["seq_number"] == 1
        assert results[0]["scene_number"] == 2
        assert results[0]["movie_name"] == "The Last Page"

    @pytest.mark.asyncio
    async def test_montages_by_int_ext(self, db_session, test_user, breakdown):
        results = await search(db_session, test_user, "Montages", ("Int Ext", "INT."))
        assert [m["seq_number"] for m in results] == [2]

    @pytest.mark.asyncio
    async def test_paging(self, db_session, test_user, breakdown):
        first = await search(db_session, test_user, "Scenes", page=1, limit=2)
        second = await search(db_session, test_user, "Scenes", page=2, limit=2)

        assert len(first) == 2
        assert len(second) == 1
