"""Tests for the /api/posts endpoints."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from content.models import ContentPiece, PostType
from content.store import create_content
from errors import FetchError
from main import app

AUTH = {"X-Weblog-Password": "secret"}


@pytest.fixture(autouse=True)
def setup(store_db, monkeypatch, fake_fetch):
    monkeypatch.setattr("config.WEBLOG_PASSWORD", "secret")
    monkeypatch.setattr("content.store.fetch_preview", fake_fetch)

    now = datetime.utcnow()
    for i in range(3):
        create_content(ContentPiece(
            uri=f"post-{i}",
            title=f"Post {i}",
            body=f"<p>{i}</p>",
            date=now - timedelta(hours=i + 1),
            tags=["news"] if i == 0 else [],
        ))
    create_content(ContentPiece(uri="later", title="Later", date=now + timedelta(days=2)))
    yield


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_list_posts(client):
    resp = client.get("/api/posts")
    assert resp.status_code == 200
    data = resp.json()
    assert [p["uri"] for p in data["items"]] == ["post-0", "post-1", "post-2"]
    assert data["page"]["item_total"] == 3
    assert data["page"]["total"] == 1
    assert data["page"]["has_next"] is False


def test_list_posts_paginated(client):
    data = client.get("/api/posts?limit=2&page=2").json()
    assert [p["uri"] for p in data["items"]] == ["post-2"]
    assert data["page"]["current"] == 2
    assert data["page"]["has_previous"] is True


def test_list_posts_filters(client):
    data = client.get("/api/posts?tag=news").json()
    assert [p["uri"] for p in data["items"]] == ["post-0"]
    assert data["items"][0]["tag_string"] == "news"

    data = client.get("/api/posts?type=heart").json()
    assert data["items"] == []
    assert data["page"]["type"] == "heart"


def test_list_includes_scheduled_when_authorized(client):
    data = client.get("/api/posts", headers=AUTH).json()
    assert data["items"][0]["uri"] == "later"


def test_get_post(client):
    resp = client.get("/api/posts/post-0")
    assert resp.status_code == 200
    data = resp.json()
    assert data["title"] == "Post 0"
    assert data["type"] == "default"
    assert data["tags"] == ["news"]


def test_get_post_missing(client):
    assert client.get("/api/posts/nope").status_code == 404


def test_scheduled_post_hidden(client):
    assert client.get("/api/posts/later").status_code == 404
    assert client.get("/api/posts/later", headers=AUTH).status_code == 200


def test_write_requires_password(client):
    resp = client.post("/api/posts", json={"title": "x"})
    assert resp.status_code == 401
    resp = client.post("/api/posts", json={"title": "x"}, headers={"X-Weblog-Password": "wrong"})
    assert resp.status_code == 401


def test_create_derives_uri(client):
    resp = client.post(
        "/api/posts",
        json={"title": "Hello World!", "body": "<p>hi</p>", "tags": "a, b"},
        headers=AUTH,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["uri"] == "hello-world"
    assert data["id"]

    data = client.get("/api/posts/hello-world").json()
    assert sorted(data["tags"]) == ["a", "b"]


def test_create_with_date(client):
    resp = client.post(
        "/api/posts",
        json={"uri": "dated", "title": "Dated", "date": "2020-02-03", "time": "04:05"},
        headers=AUTH,
    )
    assert resp.status_code == 201
    assert resp.json()["date"] == "2020-02-03T04:05:00"


def test_create_bad_date(client):
    resp = client.post(
        "/api/posts",
        json={"uri": "bad", "date": "yesterday", "time": "noon"},
        headers=AUTH,
    )
    assert resp.status_code == 400


def test_create_conflict(client):
    resp = client.post("/api/posts", json={"uri": "post-0", "title": "dup"}, headers=AUTH)
    assert resp.status_code == 409


def test_create_heart_without_url(client):
    resp = client.post(
        "/api/posts",
        json={"uri": "h", "type": int(PostType.HEART)},
        headers=AUTH,
    )
    assert resp.status_code == 400
    assert "missing response url" in resp.json()["detail"]


def test_create_heart_with_preview(client, fake_fetch):
    resp = client.post(
        "/api/posts",
        json={"uri": "h", "type": int(PostType.HEART), "response_to_url": "https://x.example"},
        headers=AUTH,
    )
    assert resp.status_code == 201
    fake_fetch.assert_called_once_with("https://x.example")

    data = client.get("/api/posts/h").json()
    assert data["type"] == "heart"
    preview = data["response_to_url_preview"]
    assert preview["title"] == "Title of https://x.example"
    assert preview["fulfilled"] is True


def test_create_fetch_failure(client, monkeypatch):
    def failing(url):
        raise FetchError(url, "unreachable")

    monkeypatch.setattr("content.store.fetch_preview", failing)
    resp = client.post(
        "/api/posts",
        json={"uri": "r", "type": int(PostType.REPOST), "response_to_url": "https://down.example"},
        headers=AUTH,
    )
    assert resp.status_code == 502
    assert client.get("/api/posts/r").status_code == 404


def test_update_post(client):
    post_id = client.get("/api/posts/post-1").json()["id"]
    resp = client.post(
        "/api/posts",
        json={"transaction": "update", "id": post_id, "uri": "post-1", "title": "Edited", "tags": ["z"]},
        headers=AUTH,
    )
    assert resp.status_code == 200
    data = client.get("/api/posts/post-1").json()
    assert data["title"] == "Edited"
    assert data["tags"] == ["z"]


def test_update_without_id(client):
    resp = client.post(
        "/api/posts",
        json={"transaction": "update", "uri": "post-1", "title": "Edited"},
        headers=AUTH,
    )
    assert resp.status_code == 400


def test_update_to_taken_uri(client):
    post_id = client.get("/api/posts/post-1").json()["id"]
    resp = client.post(
        "/api/posts",
        json={"transaction": "update", "id": post_id, "uri": "post-0", "title": "Steal"},
        headers=AUTH,
    )
    assert resp.status_code == 409


def test_delete_post(client):
    post_id = client.get("/api/posts/post-2").json()["id"]
    resp = client.post(
        "/api/posts",
        json={"transaction": "delete", "id": post_id, "uri": "post-2"},
        headers=AUTH,
    )
    assert resp.status_code == 200
    assert client.get("/api/posts/post-2").status_code == 404

    resp = client.post(
        "/api/posts",
        json={"transaction": "delete", "id": post_id, "uri": "post-2"},
        headers=AUTH,
    )
    assert resp.status_code == 404


def test_unknown_transaction_rejected(client):
    resp = client.post("/api/posts", json={"transaction": "merge"}, headers=AUTH)
    assert resp.status_code == 422
