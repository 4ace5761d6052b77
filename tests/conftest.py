import io
import json
import stat
import sys
import zipfile
from pathlib import Path
from typing import Any, Callable, Dict, List
from unittest.mock import MagicMock, patch

import aiohttp
import pytest

from electron_manager.config import ManagerConfig

posix_only = pytest.mark.skipif(
    sys.platform == "win32", reason="fake executables are shell scripts"
)


class FakeContent:
    def __init__(
        self,
        chunks: List[bytes],
        error: Exception | None = None,
        on_eof: Callable[[], None] | None = None,
    ):
        self.chunks = chunks
        self.error = error
        self.on_eof = on_eof

    async def iter_chunked(self, n: int):
        for chunk in self.chunks:
            yield chunk
        if self.on_eof:
            self.on_eof()
        if self.error:
            raise self.error


class FakeResponse:
    """Just enough of aiohttp.ClientResponse for the manager."""

    def __init__(
        self,
        payload: Any = None,
        status: int = 200,
        body: bytes | None = None,
        chunks: List[bytes] | None = None,
        content_length: bool = True,
        error: Exception | None = None,
        on_eof: Callable[[], None] | None = None,
    ):
        if body is None:
            body = json.dumps(payload).encode() if payload is not None else b""
        self.status = status
        self.reason = "OK" if status < 400 else "Error"
        self.body = body
        self.headers = {"content-length": str(len(body))} if content_length else {}
        self.content = FakeContent(chunks if chunks is not None else [body], error, on_eof)

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                request_info=MagicMock(),
                history=(),
                status=self.status,
                message=self.reason,
            )

    async def read(self):
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeRequest:
    def __init__(self, outcome):
        self.outcome = outcome

    async def __aenter__(self):
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return await self.outcome.__aenter__()

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession.

    routes maps a URL to a FakeResponse, an exception to raise, or a list of
    those consumed one per request.
    """

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.calls: List[tuple] = []
        self.factory: MagicMock | None = None

    @property
    def urls(self) -> List[str]:
        return [url for url, _ in self.calls]

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        outcome = self.routes.get(url, aiohttp.ClientConnectionError(f"no route to {url}"))
        if isinstance(outcome, list):
            outcome = outcome.pop(0)
        return FakeRequest(outcome)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


@pytest.fixture
def fake_http():
    """Patch aiohttp.ClientSession with a FakeSession built from routes."""
    patchers = []

    def install(routes: Dict[str, Any]) -> FakeSession:
        session = FakeSession(routes)
        patcher = patch("aiohttp.ClientSession", return_value=session)
        session.factory = patcher.start()
        patchers.append(patcher)
        return session

    yield install

    for patcher in patchers:
        patcher.stop()


def fake_electron_script(version: str = "28.0.0", exit_code: int = 0) -> str:
    return f"#!/bin/sh\necho {version}\nexit {exit_code}\n"


def write_fake_electron(path: Path, version: str = "28.0.0", exit_code: int = 0) -> Path:
    """Shell script answering --version like Electron does."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(fake_electron_script(version, exit_code))
    path.chmod(0o755)
    return path


def build_release_zip(version: str = "28.0.0", executable: str = "electron") -> bytes:
    """In-memory release archive with an executable at its root."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        info = zipfile.ZipInfo(executable)
        info.external_attr = (stat.S_IFREG | 0o755) << 16
        zf.writestr(info, fake_electron_script(version))
        zf.writestr("resources/default_app.asar", b"asar archive bytes")
        zf.writestr("version", version)
    return buf.getvalue()


@pytest.fixture
def install_dir(tmp_path) -> Path:
    return tmp_path / "electron"


@pytest.fixture
def probe_env(tmp_path) -> Dict[str, str]:
    """Environment whose PATH holds no electron unless a test puts one there."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return {"PATH": str(bin_dir)}


@pytest.fixture
def config(install_dir) -> ManagerConfig:
    return ManagerConfig(
        install_dir=install_dir,
        platform="linux",
        arch="x64",
        retry_delay=0,
    )
