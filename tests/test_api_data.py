from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from spopify.api.fastapi_app import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def data_files(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(
        "spopify.data.user_genres.USER_GENRES_FILE",
        str(tmp_path / "user_genres.json"),
        raising=False,
    )
    monkeypatch.setattr(
        "spopify.data.fallback_genres.FALLBACK_GENRES_FILE",
        str(tmp_path / "fallback_genres.json"),
        raising=False,
    )


def test_user_genres_crud() -> None:
    url = "/data/user-genres/user1/track1"

    assert client.get(url).json()["genres"] == []

    response = client.post(url, json={"genre": "Lo-Fi"})
    assert response.status_code == 200
    assert response.json()["genres"] == ["Lo-Fi"]

    # Adding the same genre again changes nothing.
    assert client.post(url, json={"genre": "lo-fi"}).json()["genres"] == ["Lo-Fi"]
    client.post(url, json={"genre": "study"})

    assert client.get("/data/user-genres/user1").json() == {"track1": ["Lo-Fi", "study"]}

    response = client.delete(f"{url}/Lo-Fi")
    assert response.json()["genres"] == ["study"]


def test_user_genres_rejects_blank_genre() -> None:
    response = client.post("/data/user-genres/user1/track1", json={"genre": "  "})

    assert response.status_code == 400


def test_fallback_genres_upsert_and_list() -> None:
    assert client.get("/data/fallback-genres").json() == []

    response = client.put(
        "/data/fallback-genres",
        json={"name": "Arijit Singh", "genres": ["world", "World", "bollywood"]},
    )
    assert response.status_code == 200
    assert response.json() == {"name": "Arijit Singh", "genres": ["world", "bollywood"]}

    client.put("/data/fallback-genres", json={"name": "arijit singh", "genres": ["pop"]})

    assert client.get("/data/fallback-genres").json() == [
        {"name": "arijit singh", "genres": ["pop"]}
    ]
