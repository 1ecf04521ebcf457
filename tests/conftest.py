"""Programmatic test image fixtures and an in-process mock endpoint."""

from __future__ import annotations

import csv
import socket
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from PIL import Image

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _make_images(root: Path, count: int, ext: str = "png") -> list[Path]:
    """Write ``count`` tiny images with distinct pixel values (so distinct bytes)."""
    root.mkdir(parents=True, exist_ok=True)
    paths = []
    for i in range(count):
        path = root / f"img_{i:03d}.{ext}"
        Image.new("RGB", (8, 8), (i % 256, (i * 7) % 256, (i * 13) % 256)).save(path)
        paths.append(path)
    return paths


@pytest.fixture
def tmp_image_dir(tmp_path: Path) -> Path:
    """An IMAGES tree with nested dirs, mixed-case extensions and decoys.

    Holds 7 recognised images and 4 non-matching files.
    """
    img_dir = tmp_path / "IMAGES"
    sub = img_dir / "holiday" / "day1"
    sub.mkdir(parents=True)

    Image.new("RGB", (16, 16), (200, 10, 10)).save(img_dir / "red.jpg", format="JPEG")
    Image.new("RGB", (16, 16), (10, 200, 10)).save(img_dir / "GREEN.PNG", format="PNG")
    Image.new("RGB", (16, 16), (10, 10, 200)).save(img_dir / "blue.Jpeg", format="JPEG")
    Image.new("RGB", (16, 16), (90, 90, 90)).save(sub / "grey.bmp", format="BMP")
    Image.new("P", (16, 16), 3).save(sub / "anim.GIF", format="GIF")
    Image.new("RGB", (4, 4), (1, 2, 3)).save(img_dir / "holiday" / "tiny.png", format="PNG")
    # Content is never inspected, only the extension
    (img_dir / "holiday" / "not_really.jpg").write_bytes(b"plain bytes")

    (img_dir / "notes.txt").write_text("hello")
    (img_dir / "photo.jpg.bak").write_bytes(b"backup")
    (sub / "raw.tiff").write_bytes(b"tiff")
    (img_dir / ".jpg").write_bytes(b"hidden file without an extension")

    # A directory with an image-like name is never returned
    (img_dir / "album.jpg").mkdir()
    return img_dir


@asynccontextmanager
async def _serve(handler: Handler) -> AsyncIterator[str]:
    """Run ``handler`` at POST /ping on a random local port; yield the URL."""
    app = web.Application(client_max_size=64 * 1024 * 1024)
    app.router.add_post("/ping", handler)
    server = TestServer(app)
    await server.start_server()
    try:
        yield str(server.make_url("/ping"))
    finally:
        await server.close()


async def _echo_received(request: web.Request) -> web.Response:
    await request.json()
    return web.json_response({"received": True})


@pytest.fixture
def refused_endpoint() -> str:
    """URL of a local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return f"http://127.0.0.1:{port}/ping"


@pytest.fixture
def image_factory() -> Callable[..., list[Path]]:
    return _make_images


@pytest.fixture
def mock_endpoint() -> Callable[[Handler], AbstractAsyncContextManager[str]]:
    """Async context manager factory: ``async with mock_endpoint(handler) as url``."""
    return _serve


@pytest.fixture
def echo_handler() -> Handler:
    """Handler answering ``{"received": true}`` to every valid JSON request."""
    return _echo_received


def _read_rows(path: str | Path) -> list[list[str]]:
    path = Path(path)
    if not path.exists():
        return []
    with open(path, newline="", encoding="utf-8") as f:
        return [row for row in csv.reader(f) if row]


@pytest.fixture
def read_log() -> Callable[[str | Path], list[list[str]]]:
    """Reader for result logs: every CSV row, missing file reads as empty."""
    return _read_rows
