# plugins/core_assets/tests/test_assets_api.py
import pytest
from httpx import AsyncClient

from conftest import MP3_BYTES, PNG_BYTES


@pytest.mark.asyncio
async def test_list_assets_with_summary(client: AsyncClient, registered_project: str):
    response = await client.get(f"/api/projects/{registered_project}/assets")
    assert response.status_code == 200
    body = response.json()

    assert body["summary"]["total"] == 5
    assert body["summary"]["in_use"] == 3
    assert body["summary"]["missing_base64"] == 2
    assert body["summary"]["by_category"] == {"image": 3, "audio": 1, "other": 1}

    logo = next(a for a in body["assets"] if a["relative_path"] == "images/logo.png")
    assert logo == {
        "name": "logo.png",
        "relative_path": "images/logo.png",
        "category": "image",
        "expected_module_path": "images_logo.png.js",
        "expected_export_identifier": "logoPNG",
        "has_base64": True,
        "in_use": True,
    }


@pytest.mark.asyncio
async def test_filters_do_not_change_summary(client: AsyncClient, registered_project: str):
    response = await client.get(
        f"/api/projects/{registered_project}/assets",
        params={"show_unused": "false", "category": "image"},
    )
    assert response.status_code == 200
    body = response.json()
    assert sorted(a["relative_path"] for a in body["assets"]) == [
        "images/big-red_button.png", "images/logo.png",
    ]
    assert body["summary"]["total"] == 5


@pytest.mark.asyncio
async def test_unknown_project_is_404(client: AsyncClient):
    response = await client.get("/api/projects/00000000-0000-0000-0000-000000000000/assets")
    assert response.status_code == 404
    assert "Project ID not found" in response.json()["detail"]


@pytest.mark.asyncio
async def test_replace_asset_roundtrip(client: AsyncClient, registered_project: str, ad_project):
    response = await client.post(
        f"/api/projects/{registered_project}/assets/replace",
        data={"asset_path": "public/assets/images/old_banner.png"},
        files={"file": ("banner.png", PNG_BYTES + b"-v2", "image/png")},
    )
    assert response.status_code == 200, response.text
    assert response.json() == {
        "module_path": "images_old_banner.png.js",
        "export_identifier": "oldBannerPNG",
        "mime_type": "image/png",
    }
    assert (ad_project / "media/images_old_banner.png.js").exists()


@pytest.mark.asyncio
async def test_replace_category_mismatch_is_409(client: AsyncClient, registered_project: str, ad_project):
    response = await client.post(
        f"/api/projects/{registered_project}/assets/replace",
        data={"asset_path": "images/logo.png"},
        files={"file": ("song.mp3", MP3_BYTES, "audio/mpeg")},
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "File type mismatch. Expected image file, got audio file."
    assert (ad_project / "public/assets/images/logo.png").read_bytes() == PNG_BYTES


@pytest.mark.asyncio
async def test_replace_without_file_is_204(client: AsyncClient, registered_project: str, ad_project):
    response = await client.post(
        f"/api/projects/{registered_project}/assets/replace",
        data={"asset_path": "images/logo.png"},
    )
    assert response.status_code == 204
    assert (ad_project / "public/assets/images/logo.png").read_bytes() == PNG_BYTES
