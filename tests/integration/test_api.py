"""Integration tests for artshelf.api: FastAPI routes over the seeded gallery.

Tests cover:
- ``GET /api/v1/artworks`` with filters, paging and sort fallback.
- Detail, recent, recommendation and neighbour routes.
- Artist, tag, series and stats routes.
- 404 for missing rows and 422 for malformed parameters.
"""

from __future__ import annotations

from artshelf.config import settings

API = "/api/v1"


# ---------------------------------------------------------------------------
# Artworks
# ---------------------------------------------------------------------------


class TestListArtworks:
    def test_default_listing(self, test_client):
        resp = test_client.get(f"{API}/artworks")
        assert resp.status_code == 200
        data = resp.json()
        assert [item["id"] for item in data["items"]] == [3, 5, 2, 1, 4, 6]
        assert data["total"] == 6
        assert data["page_size"] == 24

    def test_paging(self, test_client):
        data = test_client.get(f"{API}/artworks", params={"page": 2, "page_size": 5}).json()
        assert len(data["items"]) == 1
        assert data["total"] == 6

    def test_filters_combine(self, test_client):
        data = test_client.get(
            f"{API}/artworks", params={"tags": "landscape", "media_type": "video"}
        ).json()
        assert [item["id"] for item in data["items"]] == [2]
        item = data["items"][0]
        assert item["images"][0]["media_type"] == "video"
        assert item["images"][0]["raw"]["path"] == "alice/2/2_ugoira.apng"

    def test_unknown_sort_and_media_type_fall_back(self, test_client):
        resp = test_client.get(f"{API}/artworks", params={"sort_by": "sideways", "media_type": "hologram"})
        assert resp.status_code == 200
        assert [item["id"] for item in resp.json()["items"]] == [3, 5, 2, 1, 4, 6]

    def test_date_filter(self, test_client):
        data = test_client.get(f"{API}/artworks", params={"end_date": "2023-12-31"}).json()
        assert [item["id"] for item in data["items"]] == [4]

    def test_invalid_paging_is_rejected(self, test_client):
        assert test_client.get(f"{API}/artworks", params={"page": 0}).status_code == 422
        assert test_client.get(f"{API}/artworks", params={"page_size": 0}).status_code == 422

    def test_oversized_page_is_capped(self, test_client):
        resp = test_client.get(f"{API}/artworks", params={"page_size": 1000})
        assert resp.status_code == 200
        assert resp.json()["page_size"] == 100

    def test_page_size_follows_settings_overrides(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "max_page_size", 200)
        resp = test_client.get(f"{API}/artworks", params={"page_size": 150})
        assert resp.status_code == 200
        assert resp.json()["page_size"] == 150

        monkeypatch.setattr(settings, "default_page_size", 120)
        resp = test_client.get(f"{API}/artworks")
        assert resp.status_code == 200
        assert resp.json()["page_size"] == 120

    def test_recent_page_is_capped(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "max_page_size", 2)
        data = test_client.get(f"{API}/artworks/recent", params={"page_size": 50}).json()
        assert data["page_size"] == 2
        assert len(data["items"]) == 2

    def test_invalid_date_is_rejected(self, test_client):
        assert test_client.get(f"{API}/artworks", params={"start_date": "yesterday"}).status_code == 422


class TestArtworkRoutes:
    def test_detail(self, test_client):
        resp = test_client.get(f"{API}/artworks/2")
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Evening Sky"
        assert {tag["name"] for tag in data["tags"]} == {"landscape", "animation"}
        assert data["series"]["prev"]["id"] == 1

    def test_detail_not_found(self, test_client):
        resp = test_client.get(f"{API}/artworks/12345")
        assert resp.status_code == 404

    def test_recent_is_not_shadowed_by_detail(self, test_client):
        resp = test_client.get(f"{API}/artworks/recent", params={"page_size": 2})
        assert resp.status_code == 200
        assert [item["id"] for item in resp.json()["items"]] == [3, 5]

    def test_recommendations(self, test_client):
        data = test_client.get(f"{API}/artworks/recommendations", params={"page_size": 3}).json()
        assert len(data["items"]) == 3
        assert data["next_cursor"] == 2

    def test_neighbors(self, test_client):
        resp = test_client.get(f"{API}/artworks/2/neighbors", params={"artist_id": 1, "limit": 1})
        assert resp.status_code == 200
        assert [item["id"] for item in resp.json()] == [5, 2, 1]

    def test_neighbors_require_artist(self, test_client):
        assert test_client.get(f"{API}/artworks/2/neighbors").status_code == 422


# ---------------------------------------------------------------------------
# Artists, tags, series, stats
# ---------------------------------------------------------------------------


class TestOtherRoutes:
    def test_artists(self, test_client):
        data = test_client.get(f"{API}/artists", params={"sort_by": "artworks_desc"}).json()
        assert [item["id"] for item in data["items"]] == [1, 2, 3]

    def test_recent_artists(self, test_client):
        assert test_client.get(f"{API}/artists/recent").status_code == 200

    def test_artist_detail_and_missing(self, test_client):
        assert test_client.get(f"{API}/artists/2").json()["artworks_count"] == 2
        assert test_client.get(f"{API}/artists/77").status_code == 404

    def test_tags(self, test_client):
        popular = test_client.get(f"{API}/tags/popular", params={"limit": 1}).json()
        assert [tag["name"] for tag in popular] == ["animation"]
        found = test_client.get(f"{API}/tags/search", params={"q": "port"}).json()
        assert [tag["id"] for tag in found] == [2]
        assert test_client.get(f"{API}/tags/3").json()["name"] == "animation"
        assert test_client.get(f"{API}/tags/300").status_code == 404

    def test_series(self, test_client):
        listing = test_client.get(f"{API}/series").json()
        assert listing["items"][0]["title"] == "Seasons"
        detail = test_client.get(f"{API}/series/1").json()
        assert [item["series_order"] for item in detail["artworks"]] == [1, 2]
        assert test_client.get(f"{API}/series/2").status_code == 404

    def test_stats(self, test_client):
        data = test_client.get(f"{API}/stats").json()
        assert data["artworks"] == 6
        assert {item["media_type"] for item in data["media"]} == {"image", "video"}

    def test_health(self, test_client):
        assert test_client.get(f"{API}/health").json() == {"status": "ok"}
