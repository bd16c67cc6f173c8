# plugins/core_assets/tests/test_base64_pipeline.py
import base64
import pytest

from backend.core.errors import CategoryMismatchError, OperationAborted
from plugins.core_assets.pipeline import Base64Pipeline, build_module_source, mime_type_for
from plugins.core_assets.service import AssetService
from plugins.core_projects.registry import ProjectRegistry
from plugins.core_projects.service import ProjectService
from plugins.core_storage.service import LocalFileSystem

from conftest import MP3_BYTES, PNG_BYTES


@pytest.fixture
def asset_service() -> AssetService:
    return AssetService(pipeline=Base64Pipeline())


@pytest.fixture
async def project(ad_project):
    service = ProjectService(file_system=LocalFileSystem(), registry=ProjectRegistry())
    return await service.open_project(str(ad_project))


def test_module_source_literal():
    assert build_module_source("logoPNG", "image/png", b"abc") == \
        'export const logoPNG = "data:image/png;base64,YWJj";'


@pytest.mark.parametrize("name, mime", [
    ("a.png", "image/png"),
    ("a.JPG", "image/jpeg"),
    ("a.svg", "image/svg+xml"),
    ("a.mp3", "audio/mpeg"),
    ("a.ogg", "audio/ogg"),
    ("a.bin", "application/octet-stream"),
])
def test_mime_table(name, mime):
    assert mime_type_for(name) == mime


async def test_scan_reports_flags(asset_service, project):
    records = {r.relative_path: r for r in await asset_service.scan(project)}

    assert set(records) == {
        "images/logo.png",
        "images/big-red_button.png",
        "images/old_banner.png",
        "audio/click.mp3",
        "data/levels.json",
    }
    button = records["images/big-red_button.png"]
    assert button.expected_export_identifier == "bigRedButtonPNG"
    assert button.expected_module_path == "images_big-red_button.png.js"
    assert button.has_base64 and button.in_use

    assert records["audio/click.mp3"].in_use
    assert not records["images/old_banner.png"].has_base64
    assert not records["images/old_banner.png"].in_use
    assert not records["data/levels.json"].has_base64


async def test_replace_writes_module_and_asset(asset_service, project, ad_project):
    new_bytes = b"\x89PNG-new-logo"
    result = await asset_service.replace(project, "images/old_banner.png", new_bytes, "banner.png")

    assert result.module_path == "images_old_banner.png.js"
    assert result.export_identifier == "oldBannerPNG"
    assert result.mime_type == "image/png"

    module_text = (ad_project / "media" / "images_old_banner.png.js").read_text()
    encoded = base64.b64encode(new_bytes).decode()
    assert module_text == f'export const oldBannerPNG = "data:image/png;base64,{encoded}";'
    assert (ad_project / "public/assets/images/old_banner.png").read_bytes() == new_bytes

    # a rescan sees the new module
    records = {r.relative_path: r for r in await asset_service.scan(project)}
    assert records["images/old_banner.png"].has_base64


async def test_replace_with_other_category_writes_nothing(asset_service, project, ad_project):
    module_before = (ad_project / "media/images_logo.png.js").read_bytes()

    with pytest.raises(CategoryMismatchError) as exc_info:
        await asset_service.replace(project, "images/logo.png", MP3_BYTES, "song.mp3")

    assert exc_info.value.message == "File type mismatch. Expected image file, got audio file."
    assert (ad_project / "media/images_logo.png.js").read_bytes() == module_before
    assert (ad_project / "public/assets/images/logo.png").read_bytes() == PNG_BYTES


async def test_cancelled_selection_is_a_no_op(asset_service, project, ad_project):
    with pytest.raises(OperationAborted):
        await asset_service.replace(project, "images/logo.png", None, None)
    assert (ad_project / "public/assets/images/logo.png").read_bytes() == PNG_BYTES


async def test_retry_is_idempotent(asset_service, project, ad_project):
    await asset_service.replace(project, "audio/click.mp3", b"new-sound", "click.wav")
    first = (ad_project / "media/audio_click.mp3.js").read_bytes()
    await asset_service.replace(project, "audio/click.mp3", b"new-sound", "click.wav")

    assert (ad_project / "media/audio_click.mp3.js").read_bytes() == first
    # the identifier follows the original name; the MIME type follows the new file
    assert first.startswith(b'export const clickMP3 = "data:audio/wav;base64,')


async def test_unknown_asset_path(asset_service, project):
    from backend.core.errors import NotFoundError
    with pytest.raises(NotFoundError):
        await asset_service.replace(project, "images/missing.png", PNG_BYTES, "missing.png")
