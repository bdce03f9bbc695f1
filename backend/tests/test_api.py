"""
End-to-end tests through the HTTP API.

Data is created through the API itself so requests never overlap with an
open fixture transaction on the shared in-memory connection.
"""
import pytest

from scenebook.core.config import settings

API = settings.API_PREFIX


async def create_movie(client, name="The Last Page"):
    response = await client.post(f"{API}/movies", json={"name": name, "logline": "A librarian's last day"})
    assert response.status_code == 201
    return response.json()


async def create_scene(client, number, **fields):
    body = {"number": number, "ie_flag": "I", "sl_flag": "L", "type": "D", "description": f"Scene {number}"}
    body.update(fields)
    response = await client.post(f"{API}/scenes", json=body)
    assert response.status_code == 201, response.text
    return response.json()


async def listed_scenes(client, **params):
    response = await client.get(f"{API}/scenes", params={"limit": 100, **params})
    assert response.status_code == 200
    return [(s["description"], s["number"]) for s in response.json()]


class TestBasics:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get(f"{API}/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "ok"}

    @pytest.mark.asyncio
    async def test_current_user(self, client, test_user):
        response = await client.get(f"{API}/users/me")

        assert response.status_code == 200
        assert response.json() == {
            "id": test_user.id, "name": "Default User", "email": settings.DEFAULT_USER_EMAIL
        }

    @pytest.mark.asyncio
    async def test_no_default_movie(self, client):
        response = await client.get(f"{API}/scenes")

        assert response.status_code == 404
        assert response.json()["error"] == "NoDefaultMovieError"


class TestMovies:

    @pytest.mark.asyncio
    async def test_create_list_and_switch_default(self, client):
        first = await create_movie(client, "First")
        second = await create_movie(client, "Second")
        assert second["default_flag"] == "Y"

        response = await client.get(f"{API}/movies/all")
        assert [(m["name"], m["default_flag"]) for m in response.json()] == [("Second", "Y"), ("First", "N")]

        response = await client.put(f"{API}/movies/{first['id']}/default")
        assert response.status_code == 200
        assert response.json()["default_flag"] == "Y"

        response = await client.get(f"{API}/movies/default")
        assert response.json()["id"] == first["id"]

    @pytest.mark.asyncio
    async def test_edit_makes_default(self, client):
        first = await create_movie(client, "First")
        await create_movie(client, "Second")

        response = await client.patch(f"{API}/movies/{first['id']}", json={"name": "First, revised"})

        assert response.status_code == 200
        assert response.json()["name"] == "First, revised"
        assert response.json()["default_flag"] == "Y"

    @pytest.mark.asyncio
    async def test_delete_promotes_remaining(self, client):
        first = await create_movie(client, "First")
        second = await create_movie(client, "Second")

        response = await client.delete(f"{API}/movies/{second['id']}")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Movie deleted successfully.",
            "new_default_movie_id": first["id"],
        }

    @pytest.mark.asyncio
    async def test_missing_movie(self, client):
        response = await client.get(f"{API}/movies/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"detail": "Movie not found or unauthorized.", "error": "NotFoundError"}

    @pytest.mark.asyncio
    async def test_blank_name(self, client):
        response = await client.post(f"{API}/movies", json={"name": "   "})

        assert response.status_code == 422
        assert response.json()["detail"] == "Movie name is required."


class TestScenes:

    @pytest.mark.asyncio
    async def test_insert_move_delete(self, client):
        await create_movie(client)
        scenes = [await create_scene(client, n) for n in range(1, 4)]

        await create_scene(client, 2, description="Inserted")
        assert await listed_scenes(client) == [
            ("Scene 1", 1), ("Inserted", 2), ("Scene 2", 3), ("Scene 3", 4)
        ]

        response = await client.patch(f"{API}/scenes/{scenes[2]['id']}", json={"number": 1})
        assert response.status_code == 200
        assert response.json()["number"] == 1
        assert await listed_scenes(client) == [
            ("Scene 3", 1), ("Scene 1", 2), ("Inserted", 3), ("Scene 2", 4)
        ]

        response = await client.delete(f"{API}/scenes/{scenes[0]['id']}")
        assert response.json() == {"message": "Scene deleted successfully."}
        assert await listed_scenes(client) == [("Scene 3", 1), ("Inserted", 2), ("Scene 2", 3)]

    @pytest.mark.asyncio
    async def test_gap_is_422(self, client):
        await create_movie(client)

        response = await client.post(f"{API}/scenes", json={"number": 2, "ie_flag": "I", "sl_flag": "L", "type": "D"})

        assert response.status_code == 422
        assert response.json()["error"] == "OutOfRangeError"

    @pytest.mark.asyncio
    async def test_characters_round_trip(self, client):
        await create_movie(client)
        response = await client.post(
            f"{API}/characters", json={"name": "Raghav", "gender": "M", "type": "M", "lower_age": 55, "upper_age": 65}
        )
        assert response.status_code == 201
        raghav = response.json()

        scene = await create_scene(client, 1, characters=[{"id": raghav["id"], "type": "D"}])

        response = await client.get(f"{API}/scenes/{scene['id']}")
        assert [(c["name"], c["type"]) for c in response.json()["characters"]] == [("Raghav", "D")]

        response = await client.get(f"{API}/characters/for-scene", params={"scene_id": scene["id"]})
        assert response.json() == [{"id": raghav["id"], "name": "Raghav", "type": "D"}]

        response = await client.get(f"{API}/characters")
        assert [s["number"] for s in response.json()[0]["scenes"]] == [1]

        response = await client.delete(f"{API}/characters/{raghav['id']}")
        assert response.status_code == 200
        response = await client.get(f"{API}/scenes/{scene['id']}")
        assert response.json()["characters"] == []

    @pytest.mark.asyncio
    async def test_bad_mapping(self, client):
        await create_movie(client)

        response = await client.post(
            f"{API}/scenes",
            json={"number": 1, "ie_flag": "I", "sl_flag": "L", "type": "D",
                  "characters": [{"id": "nobody", "type": "D"}]}
        )

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidMappingError"
        assert await listed_scenes(client) == []

    @pytest.mark.asyncio
    async def test_explicit_movie_id(self, client):
        first = await create_movie(client, "First")
        await create_movie(client, "Second")

        await client.post(
            f"{API}/scenes",
            params={"movie_id": first["id"]},
            json={"number": 1, "ie_flag": "E", "sl_flag": "S", "type": "A", "description": "Chase"}
        )

        assert await listed_scenes(client) == []
        assert await listed_scenes(client, movie_id=first["id"]) == [("Chase", 1)]


class TestMontages:

    @pytest.mark.asyncio
    async def test_sequences(self, client):
        await create_movie(client)
        scene = await create_scene(client, 1, type="M")
        body = {"scene_id": scene["id"], "ie_flag": "I", "sl_flag": "L", "exp_length": 30}

        for n, description in enumerate(["Writes", "Waits"], start=1):
            response = await client.post(f"{API}/montages", json={**body, "seq_number": n, "description": description})
            assert response.status_code == 201

        response = await client.get(f"{API}/montages")
        montages = response.json()[0]["montages"]
        assert [(m["description"], m["seq_number"]) for m in montages] == [("Writes", 1), ("Waits", 2)]

        response = await client.delete(f"{API}/montages/{montages[0]['id']}")
        assert response.status_code == 200

        response = await client.get(f"{API}/montages")
        assert [(m["description"], m["seq_number"]) for m in response.json()[0]["montages"]] == [("Waits", 1)]


class TestSearchAndDashboard:

    @pytest.mark.asyncio
    async def test_search(self, client):
        await create_movie(client)
        await create_scene(client, 1, location="Library")
        await create_scene(client, 2, location="Train Station", ie_flag="E")

        response = await client.post(
            f"{API}/search",
            json={"entity": "Scenes", "filters": [{"field": "Int Ext", "value": "EXT."}]}
        )

        assert response.status_code == 200
        assert [s["location"] for s in response.json()["results"]] == ["Train Station"]

    @pytest.mark.asyncio
    async def test_search_bad_field(self, client):
        response = await client.post(
            f"{API}/search", json={"entity": "Scenes", "filters": [{"field": "Budget", "value": "1"}]}
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Unsupported field: Budget"

    @pytest.mark.asyncio
    async def test_dashboard(self, client):
        await create_movie(client)
        await create_scene(client, 1, exp_length=4)

        response = await client.get(f"{API}/dashboard")

        assert response.status_code == 200
        body = response.json()
        assert body["movie_details"]["title"] == "The Last Page"
        assert body["movie_details"]["scene_count"] == 1
        assert body["scenes"]["dialogue"] == 1
        assert [s["number"] for s in body["scenes"]["longest"]] == [1]


class TestPayloadLimit:

    @pytest.mark.asyncio
    async def test_oversized_body_is_rejected(self, client):
        response = await client.post(
            f"{API}/movies", json={"name": "Huge", "description": "x" * (settings.MAX_PAYLOAD_BYTES + 1)}
        )

        assert response.status_code == 413
        assert response.json()["max_size_bytes"] == settings.MAX_PAYLOAD_BYTES

        response = await client.get(f"{API}/movies/all")
        assert response.json() == []
