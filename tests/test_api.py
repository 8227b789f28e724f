"""Tests for the JSON API routes."""

import httpx
import pytest

from folio.services.rpc import RemoteCollection, RpcError


class TestPapersApi:

    def test_create_list_update_delete(self, client):
        resp = client.post("/api/papers", json={"title": "T", "authors": "A", "year": 2024})
        assert resp.status_code == 201
        paper = resp.json()
        assert paper["id"] and paper["published"] is False

        assert client.get("/api/papers").json() == []
        assert [p["title"] for p in client.get("/api/papers/all").json()] == ["T"]

        resp = client.patch(f"/api/papers/{paper['id']}", json={"published": True})
        assert resp.status_code == 200
        assert resp.json()["published_at"]
        assert [p["id"] for p in client.get("/api/papers").json()] == [paper["id"]]

        assert client.delete(f"/api/papers/{paper['id']}").json() == {"ok": True}
        assert client.get("/api/papers/all").json() == []

    def test_missing_required_fields(self, client):
        resp = client.post("/api/papers", json={"title": "Only a title"})
        assert resp.status_code == 422
        assert resp.json() == {"error": "Paper requires: authors"}

    def test_unknown_field(self, client):
        resp = client.post("/api/papers", json={"title": "T", "authors": "A", "colour": "red"})
        assert resp.status_code == 422
        assert "colour" in resp.json()["error"]

    def test_unknown_id(self, client):
        resp = client.patch("/api/papers/9", json={"title": "x"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Paper 9 not found"}
        assert client.delete("/api/papers/9").status_code == 404

    def test_unknown_collection(self, client):
        resp = client.get("/api/videos")
        assert resp.status_code == 404
        assert "error" in resp.json()

    def test_non_object_body(self, client):
        resp = client.post("/api/papers", json=["not", "an", "object"])
        assert resp.status_code == 422
        assert "error" in resp.json()


class TestMediaApi:

    def test_photo_published_by_default(self, client):
        resp = client.post("/api/photos", json={"title": "Dunes", "image_url": "/d.jpg"})
        assert resp.status_code == 201
        assert [p["title"] for p in client.get("/api/photos").json()] == ["Dunes"]

    def test_essay_category_filter(self, client):
        client.post("/api/essays", json={"title": "a", "category": "Travel"})
        client.post("/api/essays", json={"title": "b", "category": "Photography"})
        titles = [e["title"] for e in client.get("/api/essays", params={"category": "Travel"}).json()]
        assert titles == ["a"]

    def test_unsupported_filter(self, client):
        resp = client.get("/api/photos", params={"year": 2020})
        assert resp.status_code == 422


class TestRemoteAgainstApi:

    @pytest.mark.asyncio
    async def test_remote_collection_round_trip(self, client):
        from folio.gui.app import app

        papers = RemoteCollection(
            "http://testserver", "papers", transport=httpx.ASGITransport(app=app)
        )
        created = await papers.create({"title": "Over HTTP", "authors": "A"})
        assert [p.id for p in await papers.list_all()] == [created.id]

        with pytest.raises(RpcError) as exc:
            await papers.update(created.id, {"title": "  "})
        assert exc.value.message == "Paper requires: title"
