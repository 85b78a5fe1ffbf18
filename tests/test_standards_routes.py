"""
Tests for the standards REST routes
"""
import pytest

from tests.conftest import standard_text

ACTIVE = "standard-backend-development-x-active.md"


@pytest.fixture
def created(api_client, new_metadata):
    response = api_client.post("/standards", json={
        "metadata": new_metadata, "content": "# X\n\nPrefer idempotent handlers.", "filename": "x",
    })
    assert response.status_code == 201
    return response.json()


class TestCreate:

    def test_create(self, created):
        assert created["path"] == ACTIVE
        assert created["metadata"]["version"] == "1.0.0"
        assert created["metadata"]["created"] == "2025-03-14"

    def test_conflict_is_409(self, api_client, new_metadata, created):
        response = api_client.post("/standards", json={
            "metadata": new_metadata, "content": "again", "filename": "x",
        })
        assert response.status_code == 409
        assert response.json()["detail"]["kind"] == "CONFLICT"

    def test_bad_payload_is_422(self, api_client, new_metadata):
        new_metadata["tier"] = "mobile"
        response = api_client.post("/standards", json={"metadata": new_metadata, "content": "x"})
        assert response.status_code == 422

    def test_unslugable_title_is_422(self, api_client, new_metadata):
        response = api_client.post("/standards", json={"metadata": new_metadata, "content": "!!!"})
        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "filename"


class TestRead:

    def test_get_by_path(self, api_client, created):
        response = api_client.get(f"/standards/{ACTIVE}")

        assert response.status_code == 200
        assert response.json()["content"] == "# X\n\nPrefer idempotent handlers."

    def test_get_missing(self, api_client):
        response = api_client.get("/standards/missing.md")

        assert response.status_code == 404
        assert response.json()["detail"]["kind"] == "NOT_FOUND"

    def test_list_index(self, api_client, created):
        data = api_client.get("/standards").json()

        assert data["totalCount"] == 1
        assert list(data["index"]["standard"]["backend"]) == ["development"]

    def test_list_index_filter(self, api_client, created):
        assert api_client.get("/standards", params={"filter_tier": "frontend"}).json() == {
            "totalCount": 0, "index": {},
        }

    def test_metadata(self, api_client, created):
        data = api_client.get("/standards/metadata", params={"filter_tags": ["api"]}).json()

        assert data["count"] == 1
        assert "content" not in data["standards"][0]

    def test_search(self, api_client, created):
        data = api_client.get("/standards/search", params={"query": "idempotent"}).json()

        assert data["count"] == 1
        assert data["results"][0]["matches"][0]["context"].startswith("# X")

    def test_search_query_too_short(self, api_client):
        assert api_client.get("/standards/search", params={"query": "i"}).status_code == 422

    def test_externally_added_file_needs_refresh(self, api_client, app_state, write_file):
        write_file("legacy.md", standard_text())
        assert api_client.get("/standards/legacy.md").status_code == 404

        app_state.get_index().refresh("legacy.md")
        assert api_client.get("/standards/legacy.md").status_code == 200


class TestUpdate:

    def test_patch_renames(self, api_client, created):
        response = api_client.patch(f"/standards/{ACTIVE}", json={
            "metadata": {"status": "deprecated"}, "version_bump": "minor",
        })

        assert response.status_code == 200
        assert response.json()["path"] == "standard-backend-development-x-deprecated.md"
        assert api_client.get(f"/standards/{ACTIVE}").status_code == 404

    def test_patch_missing(self, api_client):
        response = api_client.patch("/standards/missing.md", json={"content": "x"})
        assert response.status_code == 404

    def test_patch_nothing(self, api_client, created):
        assert api_client.patch(f"/standards/{ACTIVE}", json={}).status_code == 422

    def test_patch_version_decrease(self, api_client, created):
        response = api_client.patch(f"/standards/{ACTIVE}", json={"metadata": {"version": "0.9.0"}})

        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "version"
