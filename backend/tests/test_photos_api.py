"""
Photo API Tests
=================

What:  /api/photos end to end with the recording fake media store.

What we test:
    ✅ Upload defaults, category join and listing order
    ✅ Rejected uploads never reach the media store
    ✅ Media store failure returns 502 and writes no row
    ✅ Update overwrites only supplied fields
    ✅ Delete succeeds even when the media store delete fails
    ✅ Admin endpoints require a bearer token
"""

import pytest
from sqlalchemy import delete

from app.models.category import Category


async def category_id_for(test_client, slug):
    response = await test_client.get("/api/categories")
    return next(c["id"] for c in response.json() if c["slug"] == slug)


async def upload(test_client, headers, content, filename="sunset.jpg", content_type="image/jpeg", **form):
    return await test_client.post(
        "/api/photos",
        files={"file": (filename, content, content_type)},
        data=form,
        headers=headers,
    )


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_with_defaults(self, test_client, auth_headers, fake_media_store, sample_jpeg_bytes):
        response = await upload(test_client, auth_headers, sample_jpeg_bytes)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Photo uploaded successfully"
        assert body["title"] == "sunset.jpg"
        assert body["category_id"] is None
        assert body["is_featured"] is False
        assert body["url"] == fake_media_store_url(body["media_id"])
        assert list(fake_media_store.objects) == [body["media_id"]]

        listing = (await test_client.get("/api/photos")).json()
        assert len(listing) == 1
        assert listing[0]["description"] == ""
        assert listing[0]["category_name"] is None
        assert listing[0]["category_slug"] is None
        assert listing[0]["original_name"] == "sunset.jpg"

    @pytest.mark.asyncio
    async def test_upload_into_category(self, test_client, auth_headers, sample_png_bytes):
        retratos = await category_id_for(test_client, "retratos")

        response = await upload(
            test_client, auth_headers, sample_png_bytes,
            filename="portrait.png", content_type="image/png",
            title="Portrait", description="Studio light", category_id=str(retratos), is_featured="true",
        )
        assert response.status_code == 200

        photo = (await test_client.get(f"/api/photos/{response.json()['id']}")).json()
        assert photo["title"] == "Portrait"
        assert photo["description"] == "Studio light"
        assert photo["category_name"] == "Retratos"
        assert photo["category_slug"] == "retratos"
        assert photo["is_featured"] is True

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client, fake_media_store, sample_jpeg_bytes):
        response = await upload(test_client, {}, sample_jpeg_bytes)

        assert response.status_code == 401
        assert fake_media_store.upload_calls == 0

    @pytest.mark.asyncio
    async def test_no_file(self, test_client, auth_headers, fake_media_store):
        response = await test_client.post("/api/photos", data={"title": "x"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"
        assert fake_media_store.upload_calls == 0

    @pytest.mark.asyncio
    async def test_non_image_rejected_before_media_store(self, test_client, auth_headers, fake_media_store):
        response = await upload(
            test_client, auth_headers, b"just text", filename="notes.txt", content_type="text/plain",
        )

        assert response.status_code == 400
        assert fake_media_store.upload_calls == 0

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, test_client, auth_headers, fake_media_store, sample_jpeg_bytes):
        response = await upload(test_client, auth_headers, sample_jpeg_bytes, category_id="9999")

        assert response.status_code == 400
        assert fake_media_store.upload_calls == 0

    @pytest.mark.asyncio
    async def test_media_store_failure(self, test_client, auth_headers, fake_media_store, sample_jpeg_bytes):
        fake_media_store.fail_upload = True

        response = await upload(test_client, auth_headers, sample_jpeg_bytes)

        assert response.status_code == 502
        assert response.json()["code"] == "upstream_error"
        assert (await test_client.get("/api/photos")).json() == []


class TestListing:

    @pytest.mark.asyncio
    async def test_newest_first(self, test_client, auth_headers, sample_jpeg_bytes):
        first = (await upload(test_client, auth_headers, sample_jpeg_bytes, title="first")).json()
        second = (await upload(test_client, auth_headers, sample_jpeg_bytes, title="second")).json()

        listing = (await test_client.get("/api/photos")).json()
        assert [p["id"] for p in listing] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_unknown_photo(self, test_client):
        response = await test_client.get("/api/photos/12345")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    @pytest.mark.asyncio
    async def test_non_numeric_id(self, test_client):
        response = await test_client.get("/api/photos/abc")
        assert response.status_code == 400


class TestUpdate:

    @pytest.mark.asyncio
    async def test_only_supplied_fields_change(self, test_client, auth_headers, sample_jpeg_bytes):
        created = (await upload(test_client, auth_headers, sample_jpeg_bytes, description="keep me")).json()

        response = await test_client.put(
            f"/api/photos/{created['id']}", json={"title": "Renamed"}, headers=auth_headers,
        )

        assert response.status_code == 200
        photo = response.json()["photo"]
        assert photo["title"] == "Renamed"
        assert photo["description"] == "keep me"
        assert photo["url"] == created["url"]

    @pytest.mark.asyncio
    async def test_null_category_clears_it(self, test_client, auth_headers, sample_jpeg_bytes):
        paisagens = await category_id_for(test_client, "paisagens")
        created = (await upload(test_client, auth_headers, sample_jpeg_bytes, category_id=str(paisagens))).json()

        response = await test_client.put(
            f"/api/photos/{created['id']}", json={"category_id": None}, headers=auth_headers,
        )

        assert response.json()["photo"]["category_id"] is None
        assert response.json()["photo"]["category_name"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", ["", "   "])
    async def test_blank_title_leaves_title_unchanged(self, test_client, auth_headers, sample_jpeg_bytes, title):
        created = (await upload(test_client, auth_headers, sample_jpeg_bytes, title="Original")).json()

        response = await test_client.put(
            f"/api/photos/{created['id']}", json={"title": title}, headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["photo"]["title"] == "Original"

    @pytest.mark.asyncio
    async def test_unknown_category(self, test_client, auth_headers, sample_jpeg_bytes):
        created = (await upload(test_client, auth_headers, sample_jpeg_bytes)).json()
        response = await test_client.put(
            f"/api/photos/{created['id']}", json={"category_id": 9999}, headers=auth_headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_photo(self, test_client, auth_headers):
        response = await test_client.put("/api/photos/12345", json={"title": "x"}, headers=auth_headers)
        assert response.status_code == 404


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_row_and_media(self, test_client, auth_headers, fake_media_store, sample_jpeg_bytes):
        created = (await upload(test_client, auth_headers, sample_jpeg_bytes)).json()

        response = await test_client.delete(f"/api/photos/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert fake_media_store.objects == {}
        assert (await test_client.get("/api/photos")).json() == []

    @pytest.mark.asyncio
    async def test_media_failure_still_deletes_row(
        self, test_client, auth_headers, fake_media_store, sample_jpeg_bytes
    ):
        created = (await upload(test_client, auth_headers, sample_jpeg_bytes)).json()
        fake_media_store.fail_delete = True

        response = await test_client.delete(f"/api/photos/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert (await test_client.get("/api/photos")).json() == []
        assert (await test_client.get(f"/api/photos/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_photo(self, test_client, auth_headers):
        response = await test_client.delete("/api/photos/12345", headers=auth_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client):
        response = await test_client.delete("/api/photos/1")
        assert response.status_code == 401


def fake_media_store_url(media_id):
    return f"https://media.test/{media_id}.jpg"


class TestCategoryRemoval:

    @pytest.mark.asyncio
    async def test_photo_survives_category_delete(self, app, test_client, auth_headers, sample_jpeg_bytes):
        eventos = await category_id_for(test_client, "eventos")
        created = (await upload(test_client, auth_headers, sample_jpeg_bytes, category_id=str(eventos))).json()

        async with app.state.database.session() as db:
            await db.execute(delete(Category).where(Category.id == eventos))

        response = await test_client.get(f"/api/photos/{created['id']}")
        assert response.status_code == 200
        assert response.json()["category_id"] is None
        assert response.json()["category_name"] is None
        assert response.json()["category_slug"] is None
