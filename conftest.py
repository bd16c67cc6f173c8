# conftest.py

import pytest
from pathlib import Path
from typing import AsyncGenerator, Callable, Dict, Optional

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

from backend.app import create_app
from backend.core.contracts import Container


# --- 1. 磁盘上的示例广告项目 ---

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png-payload"
MP3_BYTES = b"ID3\x03\x00fake-mp3-payload"

PRELOADER_SOURCE = """\
import { logoPNG } from '../../media/images_logo.png.js';
import { bigRedButtonPNG as redButton } from '../../media/images_big-red_button.png.js';
// import { oldBannerPNG } from '../../media/images_old_banner.png.js';
import { clickMP3 } from '../../media/audio_click.mp3.js';

export class Preloader extends Phaser.Scene {
    preload() {
        this.load.image('logo', logoPNG);
        this.load.image('button', redButton);
        LoadBase64Audio(this, [
            { key: 'click', data: clickMP3 },
        ]);
    }
}
"""

CONFIG_SOURCE = """\
// Game configuration
import { something } from './other.js';

export const config = {
  adNetworkType: 'google', // replaced per build
  googlePlayStoreLink: "https://play.google.com/store/apps/details?id=demo",
  appleStoreLink: "https://apps.apple.com/app/id000",
  audio: { volume: 0.8, muted: false },
  levels: [
    { name: 'intro', time: 30 },
    { name: 'boss', time: 90, },
  ],
};

export default config;
"""


def write_ad_project(root: Path, files: Optional[Dict[str, bytes]] = None) -> Path:
    """在 root 下写出一个最小但完整的 Phaser 广告项目。"""
    layout = {
        "src/scenes/preloader.js": PRELOADER_SOURCE.encode(),
        "src/config.js": CONFIG_SOURCE.encode(),
        "public/assets/images/logo.png": PNG_BYTES,
        "public/assets/images/big-red_button.png": PNG_BYTES,
        "public/assets/images/old_banner.png": PNG_BYTES,
        "public/assets/audio/click.mp3": MP3_BYTES,
        "public/assets/data/levels.json": b"{}",
        "media/images_logo.png.js": b'export const logoPNG = "data:image/png;base64,AAAA";',
        "media/images_big-red_button.png.js": b'export const bigRedButtonPNG = "data:image/png;base64,AAAA";',
        "media/audio_click.mp3.js": b'export const clickMP3 = "data:audio/mpeg;base64,AAAA";',
    }
    layout.update(files or {})
    for relative, content in layout.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    return root


@pytest.fixture
def ad_project(tmp_path: Path) -> Path:
    return write_ad_project(tmp_path / "demo-ad")


@pytest.fixture
def ad_project_factory(tmp_path: Path) -> Callable[..., Path]:
    def _factory(name: str = "custom-ad", files: Optional[Dict[str, bytes]] = None) -> Path:
        return write_ad_project(tmp_path / name, files)
    return _factory


# --- 2. 应用与客户端 ---

@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    端到端测试用的 AsyncClient。
    LifespanManager 负责触发启动/关闭，因此插件加载与 app_shutdown 钩子都会执行。
    """
    async with LifespanManager(app) as manager:
        transport = ASGITransport(app=manager.app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest.fixture
def container(app: FastAPI, client: AsyncClient) -> Container:
    """依赖 client，保证生命周期已启动、容器已就绪。"""
    return app.state.container


@pytest.fixture
async def registered_project(client: AsyncClient, ad_project: Path) -> str:
    response = await client.post("/api/projects", json={"path": str(ad_project)})
    assert response.status_code == 201, response.text
    return response.json()["project_id"]
