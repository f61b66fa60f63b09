"""Tests for the vocabulary and progress endpoints."""
from uuid import uuid4

from tests.factories import make_words


async def test_daily_word(client, auth_headers, n5_words):
    response = await client.get("/api/vocab/daily", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["vocabulary"]["id"] == str(n5_words[0].id)
    assert body["vocabulary"]["example_sentences"] == ["example 0"]
    assert body["progress"] == {
        "current_index": 0,
        "total_words_in_level": 5,
        "words_learned": 0,
        "streak_days": 1,
    }


async def test_daily_word_requires_auth(client, n5_words):
    response = await client.get("/api/vocab/daily")
    assert response.status_code == 401


async def test_daily_word_with_no_vocabulary(client, auth_headers):
    response = await client.get("/api/vocab/daily", headers=auth_headers)
    assert response.status_code == 404


async def test_skip_returns_next_word(client, auth_headers, n5_words):
    response = await client.post(
        f"/api/vocab/{n5_words[0].id}/skip",
        json={"status": "known"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["vocabulary"]["id"] == str(n5_words[1].id)
    assert body["progress"]["current_index"] == 1
    assert body["progress"]["words_learned"] == 1


async def test_skip_rejects_other_statuses(client, auth_headers, n5_words):
    for status in ("learning", "KNOWN", ""):
        response = await client.post(
            f"/api/vocab/{n5_words[0].id}/skip",
            json={"status": status},
            headers=auth_headers,
        )
        assert response.status_code == 400

    stats = await client.get("/api/progress/stats", headers=auth_headers)
    assert stats.json()["current_vocab_index"] == 0


async def test_skip_unknown_word(client, auth_headers, n5_words):
    response = await client.post(f"/api/vocab/{uuid4()}/skip", json={"status": "skipped"}, headers=auth_headers)
    assert response.status_code == 404


async def test_skip_cycle(client, auth_headers, n5_words):
    current = (await client.get("/api/vocab/daily", headers=auth_headers)).json()["vocabulary"]["id"]
    for _ in range(5):
        body = (await client.post(
            f"/api/vocab/{current}/skip",
            json={"status": "skipped"},
            headers=auth_headers,
        )).json()
        current = body["vocabulary"]["id"]

    assert body["progress"]["current_index"] == 0
    assert current == str(n5_words[0].id)


async def test_vocabulary_by_id(client, auth_headers, n5_words):
    response = await client.get(f"/api/vocab/{n5_words[2].id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["index_position"] == 2

    missing = await client.get(f"/api/vocab/{uuid4()}", headers=auth_headers)
    assert missing.status_code == 404


async def test_level_pagination(client, auth_headers, db):
    db.add_all(make_words("N4", 45))
    await db.commit()

    body = (await client.get("/api/vocab/level/N4", headers=auth_headers)).json()
    assert body["page"] == 1
    assert body["limit"] == 20
    assert body["total"] == 45
    assert body["total_pages"] == 3
    assert [item["index_position"] for item in body["items"]] == list(range(20))

    last = (await client.get("/api/vocab/level/N4?page=3&limit=20", headers=auth_headers)).json()
    assert len(last["items"]) == 5


async def test_level_pagination_clamps(client, auth_headers, db):
    db.add_all(make_words("N4", 3))
    await db.commit()

    body = (await client.get("/api/vocab/level/N4?page=0&limit=500", headers=auth_headers)).json()
    assert body["page"] == 1
    assert body["limit"] == 100
    assert body["total_pages"] == 1

    body = (await client.get("/api/vocab/level/N4?limit=0", headers=auth_headers)).json()
    assert body["limit"] == 1
    assert body["total_pages"] == 3


async def test_level_page_beyond_cap_rejected(client, auth_headers, db):
    db.add_all(make_words("N5", 2))
    await db.commit()

    response = await client.get("/api/vocab/level/N5?page=9223372036854775807&limit=100", headers=auth_headers)
    assert response.status_code == 400

    body = (await client.get("/api/vocab/level/N5?page=1000000&limit=100", headers=auth_headers)).json()
    assert body["items"] == []
    assert body["total"] == 2


async def test_empty_level_listing(client, auth_headers):
    body = (await client.get("/api/vocab/level/N1", headers=auth_headers)).json()
    assert body["items"] == []
    assert body["total"] == 0
    assert body["total_pages"] == 0


async def test_unknown_level(client, auth_headers):
    response = await client.get("/api/vocab/level/N9", headers=auth_headers)
    assert response.status_code == 400


async def test_progress_stats(client, auth_headers, n5_words):
    await client.get("/api/vocab/daily", headers=auth_headers)
    await client.post(f"/api/vocab/{n5_words[0].id}/skip", json={"status": "known"}, headers=auth_headers)

    for path in ("/api/progress", "/api/progress/stats"):
        body = (await client.get(path, headers=auth_headers)).json()
        assert body["current_level"] == "N5"
        assert body["current_vocab_index"] == 1
        assert body["streak_days"] == 1
        assert body["words_learned"] == 1
        assert body["words_skipped"] == 0
        assert body["total_words_in_level"] == 5
        assert body["words_by_status"]["known"] == 1
        assert body["words_learned_by_level"]["N5"] == 1
        assert body["total_days_active"] == 1
