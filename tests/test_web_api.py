"""
Tests for songtags.web module (FastAPI REST API).

These tests verify:
- FastAPI application setup
- Library, song, label, tagging and label mode endpoints
- The AND filter endpoint and its error mapping (400/404/409)
- camelCase JSON payloads
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from songtags import __version__
from songtags.core import ValidationError
from songtags.core.library_db import LibraryDb
from songtags.web.routes.api import song_patch_from_payload
from songtags.web.routes.filter import parse_label_ids
from songtags.web.server import WebServer

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
async def db() -> LibraryDb:
    """Create an in-memory database for testing."""
    db = LibraryDb(":memory:")
    await db.open()
    await db.ensure_schema()
    yield db
    await db.close()


@pytest.fixture
async def web_server(db: LibraryDb) -> WebServer:
    """Create a WebServer instance for testing."""
    return WebServer(db)


@pytest.fixture
async def client(web_server: WebServer) -> AsyncClient:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=web_server.app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def library_id(client: AsyncClient) -> str:
    """Create an empty library and return its id."""
    response = await client.post("/api/libraries", json={"name": "Test Library"})
    assert response.status_code == 201
    return response.json()["library"]["libraryId"]


async def _create_song(client: AsyncClient, library_id: str, title: str, artist: str) -> str:
    response = await client.post(
        f"/api/libraries/{library_id}/songs",
        json={"displayTitle": title, "displayArtist": artist},
    )
    assert response.status_code == 201
    return response.json()["song"]["songId"]


async def _create_label(client: AsyncClient, library_id: str, name: str) -> str:
    response = await client.post(f"/api/libraries/{library_id}/labels", json={"name": name})
    assert response.status_code == 201
    return response.json()["label"]["labelId"]


async def _create_super(
    client: AsyncClient, library_id: str, name: str, components: list[str]
) -> str:
    response = await client.post(
        f"/api/libraries/{library_id}/labels/super",
        json={"name": name, "componentLabelIds": components},
    )
    assert response.status_code == 201
    return response.json()["label"]["labelId"]


async def _tag(client: AsyncClient, library_id: str, song_id: str, label_id: str) -> None:
    response = await client.post(f"/api/libraries/{library_id}/songs/{song_id}/labels/{label_id}")
    assert response.status_code == 201


async def _create_mode(client: AsyncClient, library_id: str, name: str) -> str:
    response = await client.post(f"/api/libraries/{library_id}/modes", json={"name": name})
    assert response.status_code == 201
    return response.json()["mode"]["modeId"]


@pytest.fixture
async def seeded(client: AsyncClient, library_id: str) -> dict[str, str]:
    """
    Library with three songs and labels:

        S1: R1, R2
        S2: R1
        S3: R2, R3
        SA = {R1, R2}
    """
    ids = {"library": library_id}
    ids["S1"] = await _create_song(client, library_id, "Alpha", "One")
    ids["S2"] = await _create_song(client, library_id, "Bravo", "Two")
    ids["S3"] = await _create_song(client, library_id, "Charlie", "Three")
    for name in ("R1", "R2", "R3"):
        ids[name] = await _create_label(client, library_id, name)
    ids["SA"] = await _create_super(client, library_id, "SA", [ids["R1"], ids["R2"]])

    for song, label in (("S1", "R1"), ("S1", "R2"), ("S2", "R1"), ("S3", "R2"), ("S3", "R3")):
        await _tag(client, library_id, ids[song], ids[label])
    return ids


# =============================================================================
# Health / Status
# =============================================================================


class TestHealthCheck:
    """Tests for the health and status endpoints."""

    async def test_health_check(self, client: AsyncClient) -> None:
        """Test that health check returns ok."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "server": "songtags"}

    async def test_status(self, client: AsyncClient) -> None:
        """Test server status reports name, version and database state."""
        response = await client.get("/api/status")

        assert response.status_code == 200
        data = response.json()
        assert data["server"] == "songtags"
        assert data["version"] == __version__
        assert data["database_open"] is True


# =============================================================================
# Libraries
# =============================================================================


class TestLibraryEndpoints:
    """Tests for library creation, lookup and bootstrap."""

    async def test_create_and_get_library(self, client: AsyncClient) -> None:
        """Test creating a library and fetching it back."""
        response = await client.post("/api/libraries", json={"name": "Jazz"})
        assert response.status_code == 201
        library = response.json()["library"]
        assert library["name"] == "Jazz"

        response = await client.get(f"/api/libraries/{library['libraryId']}")
        assert response.status_code == 200
        assert response.json()["library"]["libraryId"] == library["libraryId"]

    async def test_create_library_without_body(self, client: AsyncClient) -> None:
        """Test that a missing body falls back to the default library name."""
        response = await client.post("/api/libraries")
        assert response.status_code == 201
        assert response.json()["library"]["name"] == "My Library"

    async def test_unknown_library(self, client: AsyncClient) -> None:
        """Test that an unknown library id is a 404 with an error body."""
        response = await client.get("/api/libraries/lib_missing")
        assert response.status_code == 404
        assert "error" in response.json()

    async def test_bootstrap(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test bootstrap returns every library-scoped collection in one payload."""
        lib = seeded["library"]
        mode_id = await _create_mode(client, lib, "Warm-up")
        await client.post(f"/api/libraries/{lib}/modes/{mode_id}/labels/{seeded['SA']}")

        response = await client.get(f"/api/libraries/{lib}/bootstrap")

        assert response.status_code == 200
        data = response.json()
        assert data["library"]["libraryId"] == lib
        assert len(data["songs"]) == 3
        assert len(data["labels"]) == 4
        assert len(data["songLabels"]) == 5
        assert {c["regularLabelId"] for c in data["superLabelComponents"]} == {
            seeded["R1"],
            seeded["R2"],
        }
        assert [m["name"] for m in data["labelModes"]] == ["Warm-up"]
        assert data["labelModeLabels"] == [
            {"libraryId": lib, "modeId": mode_id, "labelId": seeded["SA"]}
        ]

    async def test_bootstrap_unknown_library(self, client: AsyncClient) -> None:
        """Test bootstrap of an unknown library is a 404."""
        response = await client.get("/api/libraries/lib_missing/bootstrap")
        assert response.status_code == 404


# =============================================================================
# Songs
# =============================================================================


class TestSongEndpoints:
    """Tests for song CRUD endpoints."""

    async def test_create_song_camel_case(self, client: AsyncClient, library_id: str) -> None:
        """Test song payloads use camelCase keys and keep metadata intact."""
        response = await client.post(
            f"/api/libraries/{library_id}/songs",
            json={
                "displayTitle": "So What",
                "displayArtist": "Miles Davis",
                "metadata": {"bpm": 136},
            },
        )

        assert response.status_code == 201
        song = response.json()["song"]
        assert song["displayTitle"] == "So What"
        assert song["normKey"] == "so_what_miles_davis"
        assert song["metadata"] == {"bpm": 136}
        assert "display_title" not in song

    async def test_duplicate_song(self, client: AsyncClient, library_id: str) -> None:
        """Test a song with the same normalized key is a 409."""
        await _create_song(client, library_id, "So What", "Miles Davis")
        response = await client.post(
            f"/api/libraries/{library_id}/songs",
            json={"displayTitle": "SO WHAT", "displayArtist": "miles davis"},
        )
        assert response.status_code == 409

    async def test_missing_fields(self, client: AsyncClient, library_id: str) -> None:
        """Test that a missing display artist is a 400."""
        response = await client.post(
            f"/api/libraries/{library_id}/songs", json={"displayTitle": "Only Title"}
        )
        assert response.status_code == 400

    async def test_wrong_field_type(self, client: AsyncClient, library_id: str) -> None:
        """Test that a non-string title is a 400."""
        response = await client.post(
            f"/api/libraries/{library_id}/songs",
            json={"displayTitle": 12, "displayArtist": "x"},
        )
        assert response.status_code == 400

    async def test_list_and_get_songs(self, client: AsyncClient, library_id: str) -> None:
        """Test listing songs by title and fetching one by id."""
        song_id = await _create_song(client, library_id, "Bravo", "Zed")
        await _create_song(client, library_id, "Alpha", "Yak")

        response = await client.get(f"/api/libraries/{library_id}/songs")
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [s["displayTitle"] for s in data["songs"]] == ["Alpha", "Bravo"]

        response = await client.get(f"/api/libraries/{library_id}/songs/{song_id}")
        assert response.status_code == 200
        assert response.json()["song"]["songId"] == song_id

    async def test_list_songs_bad_order(self, client: AsyncClient, library_id: str) -> None:
        """Test that an unknown order_by value is a 400."""
        response = await client.get(f"/api/libraries/{library_id}/songs?order_by=rating")
        assert response.status_code == 400

    async def test_list_songs_by_artist(self, client: AsyncClient, library_id: str) -> None:
        """Test listing songs ordered by artist."""
        await _create_song(client, library_id, "Alpha", "Zed")
        await _create_song(client, library_id, "Bravo", "Yak")

        response = await client.get(f"/api/libraries/{library_id}/songs?order_by=artist")
        assert response.status_code == 200
        assert [s["displayArtist"] for s in response.json()["songs"]] == ["Yak", "Zed"]

    async def test_update_song(self, client: AsyncClient, library_id: str) -> None:
        """Test updating display fields recomputes the normalized key."""
        song_id = await _create_song(client, library_id, "So What", "Miles Davis")

        response = await client.put(
            f"/api/libraries/{library_id}/songs/{song_id}", json={"displayTitle": "Blue in Green"}
        )

        assert response.status_code == 200
        song = response.json()["song"]
        assert song["songId"] == song_id
        assert song["displayTitle"] == "Blue in Green"
        assert song["displayArtist"] == "Miles Davis"
        assert song["normKey"] == "blue_in_green_miles_davis"

        response = await client.get(f"/api/libraries/{library_id}/songs/{song_id}")
        assert response.json()["song"]["normKey"] == "blue_in_green_miles_davis"

    async def test_update_song_duplicate(self, client: AsyncClient, library_id: str) -> None:
        """Test an update colliding with another song is a 409."""
        await _create_song(client, library_id, "So What", "Miles Davis")
        song_id = await _create_song(client, library_id, "Freddie Freeloader", "Miles Davis")

        response = await client.put(
            f"/api/libraries/{library_id}/songs/{song_id}", json={"displayTitle": "so what"}
        )
        assert response.status_code == 409

    async def test_update_song_rejects_unknown_fields(
        self, client: AsyncClient, library_id: str
    ) -> None:
        """Test that fields other than the display fields are a 400."""
        song_id = await _create_song(client, library_id, "So What", "Miles Davis")

        response = await client.put(
            f"/api/libraries/{library_id}/songs/{song_id}", json={"normKey": "x"}
        )
        assert response.status_code == 400

    async def test_update_missing_song(self, client: AsyncClient, library_id: str) -> None:
        """Test updating an unknown song is a 404."""
        response = await client.put(
            f"/api/libraries/{library_id}/songs/song_missing", json={"displayTitle": "X"}
        )
        assert response.status_code == 404

    async def test_delete_song(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test deleting a song removes it together with its label edges."""
        lib = seeded["library"]
        response = await client.delete(f"/api/libraries/{lib}/songs/{seeded['S1']}")

        assert response.status_code == 200
        assert response.json() == {
            "deletedSongId": seeded["S1"],
            "deleted": {"songLabels": 2},
        }

        response = await client.get(f"/api/libraries/{lib}/songs/{seeded['S1']}")
        assert response.status_code == 404

        response = await client.post(
            f"/api/libraries/{lib}/songs/filter", json={"labelIds": [seeded["R1"]]}
        )
        assert [s["songId"] for s in response.json()["songs"]] == [seeded["S2"]]

    async def test_delete_missing_song(self, client: AsyncClient, library_id: str) -> None:
        """Test deleting an unknown song is a 404."""
        response = await client.delete(f"/api/libraries/{library_id}/songs/song_missing")
        assert response.status_code == 404


# =============================================================================
# Labels / Tagging
# =============================================================================


class TestLabelEndpoints:
    """Tests for label management and tagging endpoints."""

    async def test_list_labels_by_type(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Test listing labels with and without a type filter."""
        lib = seeded["library"]

        response = await client.get(f"/api/libraries/{lib}/labels")
        assert response.json()["count"] == 4

        response = await client.get(f"/api/libraries/{lib}/labels?type=SUPER")
        labels = response.json()["labels"]
        assert [label["name"] for label in labels] == ["SA"]
        assert labels[0]["type"] == "SUPER"

        response = await client.get(f"/api/libraries/{lib}/labels?type=BOGUS")
        assert response.status_code == 400

    async def test_get_super_label_detail(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Test a SUPER label is returned with its components."""
        lib = seeded["library"]
        response = await client.get(f"/api/libraries/{lib}/labels/{seeded['SA']}")

        assert response.status_code == 200
        data = response.json()
        assert data["label"]["type"] == "SUPER"
        assert {c["regularLabelId"] for c in data["components"]} == {seeded["R1"], seeded["R2"]}

    async def test_duplicate_label_name(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test that a normalized-name collision is a 409."""
        response = await client.post(
            f"/api/libraries/{seeded['library']}/labels", json={"name": "r1"}
        )
        assert response.status_code == 409

    async def test_super_label_with_super_component(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Test that SUPER labels cannot be nested."""
        response = await client.post(
            f"/api/libraries/{seeded['library']}/labels/super",
            json={"name": "Nested", "componentLabelIds": [seeded["SA"]]},
        )
        assert response.status_code == 400

    async def test_replace_components(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test replacing a SUPER label's components."""
        lib = seeded["library"]
        response = await client.put(
            f"/api/libraries/{lib}/labels/{seeded['SA']}/components",
            json={"componentLabelIds": [seeded["R3"]]},
        )

        assert response.status_code == 200
        assert [c["regularLabelId"] for c in response.json()["components"]] == [seeded["R3"]]

    async def test_delete_label(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test deleting a REGULAR label reports every removed edge."""
        lib = seeded["library"]
        mode_id = await _create_mode(client, lib, "House")
        await client.post(f"/api/libraries/{lib}/modes/{mode_id}/labels/{seeded['R1']}")

        response = await client.delete(f"/api/libraries/{lib}/labels/{seeded['R1']}")

        assert response.status_code == 200
        assert response.json() == {
            "deletedLabelId": seeded["R1"],
            "deleted": {"songLabels": 2, "superLabelComponents": 1, "labelModeLabels": 1},
        }

        response = await client.get(f"/api/libraries/{lib}/labels/{seeded['R1']}")
        assert response.status_code == 404

    async def test_song_labels(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test listing a song's label edges."""
        lib = seeded["library"]
        response = await client.get(f"/api/libraries/{lib}/songs/{seeded['S1']}/labels")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert {edge["labelId"] for edge in data["songLabels"]} == {seeded["R1"], seeded["R2"]}

    async def test_tagging_twice(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test tagging answers 201 for a new edge and 200 when it already exists."""
        lib = seeded["library"]
        url = f"/api/libraries/{lib}/songs/{seeded['S2']}/labels/{seeded['R3']}"

        first = await client.post(url)
        second = await client.post(url)

        assert first.status_code == 201
        assert second.status_code == 200
        expected = {
            "songLabel": {"libraryId": lib, "songId": seeded["S2"], "labelId": seeded["R3"]}
        }
        assert first.json() == expected
        assert second.json() == expected

        response = await client.get(f"/api/libraries/{lib}/songs/{seeded['S2']}/labels")
        assert response.json()["count"] == 2

    async def test_attach_super_label_rejected(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Test that SUPER labels cannot be attached to songs."""
        lib = seeded["library"]
        response = await client.post(
            f"/api/libraries/{lib}/songs/{seeded['S2']}/labels/{seeded['SA']}"
        )
        assert response.status_code == 400

    async def test_tag_unknown_label(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test tagging with an unknown label is a 404."""
        lib = seeded["library"]
        response = await client.post(
            f"/api/libraries/{lib}/songs/{seeded['S2']}/labels/label_missing"
        )
        assert response.status_code == 404

    async def test_remove_song_label(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test untagging reports the number of removed edges."""
        lib = seeded["library"]
        response = await client.delete(
            f"/api/libraries/{lib}/songs/{seeded['S2']}/labels/{seeded['R1']}"
        )

        assert response.status_code == 200
        assert response.json() == {"deleted": True, "deletedJoinCount": 1}


# =============================================================================
# Label modes
# =============================================================================


class TestModeEndpoints:
    """Tests for label mode endpoints."""

    async def test_create_and_list_modes(self, client: AsyncClient, library_id: str) -> None:
        """Test creating a mode and listing it with its edges."""
        response = await client.post(
            f"/api/libraries/{library_id}/modes", json={"name": "  Warm-up  "}
        )

        assert response.status_code == 201
        mode = response.json()["mode"]
        assert mode["modeId"].startswith("mode_")
        assert mode["name"] == "Warm-up"
        assert mode["normName"] == "warmup"

        response = await client.get(f"/api/libraries/{library_id}/modes")
        assert response.status_code == 200
        assert response.json() == {"modes": [mode], "modeLabels": []}

    async def test_list_modes_unknown_library(self, client: AsyncClient) -> None:
        """Test listing modes of an unknown library is a 404."""
        response = await client.get("/api/libraries/lib_missing/modes")
        assert response.status_code == 404

    async def test_duplicate_mode_name(self, client: AsyncClient, library_id: str) -> None:
        """Test a normalized-name collision between modes is a 409."""
        await _create_mode(client, library_id, "Techno")
        response = await client.post(f"/api/libraries/{library_id}/modes", json={"name": "TECHNO"})
        assert response.status_code == 409

    async def test_mode_name_required(self, client: AsyncClient, library_id: str) -> None:
        """Test that a blank mode name is a 400."""
        response = await client.post(f"/api/libraries/{library_id}/modes", json={"name": " "})
        assert response.status_code == 400

    async def test_attach_and_detach_labels(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Test attaching REGULAR and SUPER labels to a mode, idempotently."""
        lib = seeded["library"]
        mode_id = await _create_mode(client, lib, "House")
        base = f"/api/libraries/{lib}/modes/{mode_id}/labels"

        first = await client.post(f"{base}/{seeded['SA']}")
        again = await client.post(f"{base}/{seeded['SA']}")
        regular = await client.post(f"{base}/{seeded['R3']}")

        assert first.status_code == 201
        assert first.json()["created"] is True
        assert again.status_code == 200
        assert again.json()["created"] is False
        assert regular.status_code == 201

        response = await client.get(f"/api/libraries/{lib}/modes/{mode_id}")
        assert response.status_code == 200
        assert {e["labelId"] for e in response.json()["modeLabels"]} == {
            seeded["SA"],
            seeded["R3"],
        }

        response = await client.delete(f"{base}/{seeded['SA']}")
        assert response.json() == {"deletedJoinCount": 1}
        response = await client.delete(f"{base}/{seeded['SA']}")
        assert response.json() == {"deletedJoinCount": 0}

    async def test_attach_to_unknown_mode(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Test attaching to an unknown mode is a 404."""
        lib = seeded["library"]
        response = await client.post(
            f"/api/libraries/{lib}/modes/mode_missing/labels/{seeded['R1']}"
        )
        assert response.status_code == 404

    async def test_attach_unknown_label(self, client: AsyncClient, library_id: str) -> None:
        """Test attaching an unknown label to a mode is a 404."""
        mode_id = await _create_mode(client, library_id, "House")
        response = await client.post(
            f"/api/libraries/{library_id}/modes/{mode_id}/labels/label_missing"
        )
        assert response.status_code == 404

    async def test_delete_mode(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test deleting a mode removes its edges but not the labels."""
        lib = seeded["library"]
        mode_id = await _create_mode(client, lib, "House")
        await client.post(f"/api/libraries/{lib}/modes/{mode_id}/labels/{seeded['R1']}")

        response = await client.delete(f"/api/libraries/{lib}/modes/{mode_id}")

        assert response.status_code == 200
        assert response.json() == {"deletedModeId": mode_id, "deleted": {"modeLabels": 1}}

        response = await client.get(f"/api/libraries/{lib}/modes/{mode_id}")
        assert response.status_code == 404
        response = await client.get(f"/api/libraries/{lib}/labels/{seeded['R1']}")
        assert response.status_code == 200


# =============================================================================
# Filter
# =============================================================================


class TestFilterEndpoint:
    """Tests for the AND filter endpoint."""

    async def _filter(self, client: AsyncClient, library_id: str, body) -> dict:
        response = await client.post(f"/api/libraries/{library_id}/songs/filter", json=body)
        assert response.status_code == 200
        return response.json()

    async def test_no_labels_returns_all_songs(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Test an empty selection returns every song."""
        data = await self._filter(client, seeded["library"], {"labelIds": []})

        assert data["inputLabelIds"] == []
        assert data["requiredRegularLabelIds"] == []
        assert len(data["songs"]) == 3

    async def test_missing_label_ids_returns_all_songs(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Test a missing labelIds field or body behaves like an empty selection."""
        data = await self._filter(client, seeded["library"], {})
        assert len(data["songs"]) == 3

        response = await client.post(f"/api/libraries/{seeded['library']}/songs/filter")
        assert response.status_code == 200
        assert len(response.json()["songs"]) == 3

    async def test_and_semantics(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test only songs carrying every selected label match."""
        data = await self._filter(
            client, seeded["library"], {"labelIds": [seeded["R1"], seeded["R2"]]}
        )

        assert [s["songId"] for s in data["songs"]] == [seeded["S1"]]
        assert data["requiredRegularLabelIds"] == sorted([seeded["R1"], seeded["R2"]])

    async def test_super_label_expands(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test a SUPER label filters like its components."""
        data = await self._filter(client, seeded["library"], {"labelIds": [seeded["SA"]]})

        assert data["inputLabelIds"] == [seeded["SA"]]
        assert [s["songId"] for s in data["songs"]] == [seeded["S1"]]

    async def test_unknown_label(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test an unknown label id is a 404 listing the missing ids."""
        response = await client.post(
            f"/api/libraries/{seeded['library']}/songs/filter",
            json={"labelIds": [seeded["R1"], "label_missing"]},
        )

        assert response.status_code == 404
        assert response.json()["missingLabelIds"] == ["label_missing"]

    async def test_super_label_without_components(
        self, client: AsyncClient, db: LibraryDb, seeded: dict[str, str]
    ) -> None:
        """Test filtering by a SUPER label without components is a 400."""
        lib = seeded["library"]
        # Drop SA's components behind the service layer's back.
        await db.execute(
            "DELETE FROM super_label_components WHERE super_label_id = ?;", (seeded["SA"],)
        )

        response = await client.post(
            f"/api/libraries/{lib}/songs/filter", json={"labelIds": [seeded["SA"]]}
        )
        assert response.status_code == 400
        assert "SA" in response.json()["error"]

    async def test_unknown_library(self, client: AsyncClient) -> None:
        """Test filtering an unknown library is a 404."""
        response = await client.post(
            "/api/libraries/lib_missing/songs/filter", json={"labelIds": []}
        )
        assert response.status_code == 404

    async def test_bad_label_ids(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Test a non-array labelIds is a 400."""
        response = await client.post(
            f"/api/libraries/{seeded['library']}/songs/filter", json={"labelIds": "R1"}
        )
        assert response.status_code == 400


class TestPayloadParsing:
    """Tests for request payload helpers."""

    def test_label_ids_defaults(self) -> None:
        """Test missing or null labelIds parse as an empty selection."""
        assert parse_label_ids(None) == []
        assert parse_label_ids({}) == []
        assert parse_label_ids({"labelIds": None}) == []

    def test_label_ids_keep_duplicates(self) -> None:
        """Test duplicate ids are passed through unchanged."""
        assert parse_label_ids({"labelIds": ["a", "a"]}) == ["a", "a"]

    def test_label_ids_reject_non_strings(self) -> None:
        """Test non-string ids are rejected."""
        with pytest.raises(ValidationError):
            parse_label_ids({"labelIds": [1, 2]})

    def test_song_patch(self) -> None:
        """Test a song patch maps camelCase fields to keyword arguments."""
        assert song_patch_from_payload({"displayArtist": "Coltrane"}) == {
            "display_title": None,
            "display_artist": "Coltrane",
        }

    def test_song_patch_rejects_unknown_fields(self) -> None:
        """Test unknown song patch fields are rejected by name."""
        with pytest.raises(ValidationError, match="officialTitle"):
            song_patch_from_payload({"officialTitle": "X"})
