"""Tests for the MCP tool surface."""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp.types import INTERNAL_ERROR

from electron_manager.errors import FilesystemError, NetworkError
from electron_manager.server import handle_tool_call, init_server, tools
from electron_manager.types import ResolvedExecutable
from electron_manager.ui import CancellationToken, LoggingUI


def make_manager(installed=None):
    manager = MagicMock()
    manager.ui = LoggingUI()
    manager.install = AsyncMock()
    manager.upgrade = AsyncMock()
    manager.get_installed = AsyncMock(return_value=installed)
    manager.get_latest_release = AsyncMock(return_value="28.0.0")
    manager.start = AsyncMock(return_value=None)
    manager.stop = AsyncMock()
    manager.uninstall = AsyncMock(return_value=None)
    return manager


def payload(result):
    assert len(result) == 1
    return json.loads(result[0].text)


def test_tool_names():
    assert [t.name for t in tools] == [
        "electron_install",
        "electron_upgrade",
        "electron_installed",
        "electron_latest",
        "electron_start",
        "electron_stop",
        "electron_uninstall",
        "electron_cancel",
    ]


@pytest.mark.asyncio
async def test_install_reports_installed():
    manager = make_manager(ResolvedExecutable(version="28.0.0", path="/opt/electron"))

    data = payload(await handle_tool_call(manager, "electron_install", {}))

    manager.install.assert_awaited_once()
    assert data == {"success": True, "data": {"version": "28.0.0", "path": "/opt/electron"}}


@pytest.mark.asyncio
async def test_upgrade_failure():
    manager = make_manager()
    manager.upgrade.side_effect = NetworkError("https://registry.npmjs.org", "timeout")

    data = payload(await handle_tool_call(manager, "electron_upgrade", {}))

    assert data["success"] is False
    assert "timeout" in data["error"]
    assert data["details"]["url"] == "https://registry.npmjs.org"
    assert data["code"] == INTERNAL_ERROR


@pytest.mark.asyncio
async def test_installed_none():
    data = payload(await handle_tool_call(make_manager(), "electron_installed", {}))
    assert data == {"success": True, "data": None}


@pytest.mark.asyncio
async def test_latest():
    data = payload(await handle_tool_call(make_manager(), "electron_latest", {}))
    assert data == {"success": True, "data": {"version": "28.0.0"}}


@pytest.mark.asyncio
async def test_start_not_installed():
    data = payload(await handle_tool_call(make_manager(), "electron_start", {"file": "main.js"}))
    assert data == {"success": False, "error": "Electron is not installed"}


@pytest.mark.asyncio
async def test_start_passes_arguments():
    manager = make_manager()
    manager.start.return_value = MagicMock(pid=4242)

    data = payload(await handle_tool_call(
        manager, "electron_start", {"file": "main.js", "args": ["--inspect"]}
    ))

    manager.start.assert_awaited_once_with("main.js", ["--inspect"])
    assert data == {"success": True, "data": {"pid": 4242}}


@pytest.mark.asyncio
async def test_stop():
    manager = make_manager()
    data = payload(await handle_tool_call(manager, "electron_stop", {}))
    manager.stop.assert_awaited_once()
    assert data["success"] is True


@pytest.mark.asyncio
async def test_uninstall_error_value():
    manager = make_manager()
    manager.uninstall.return_value = FilesystemError("Cannot remove", ["/x"])

    data = payload(await handle_tool_call(manager, "electron_uninstall", {}))

    assert data == {
        "success": False,
        "error": "Cannot remove",
        "code": INTERNAL_ERROR,
        "details": {"paths": ["/x"]},
    }


@pytest.mark.asyncio
async def test_cancel_in_flight_download():
    manager = make_manager()
    seen = {}

    async def task(progress, token: CancellationToken):
        seen["result"] = payload(await handle_tool_call(manager, "electron_cancel", {}))
        seen["cancelled"] = token.is_cancellation_requested

    await manager.ui.with_progress("Installing", task)

    assert seen == {"result": {"success": True, "data": {"cancelled": 1}}, "cancelled": True}


@pytest.mark.asyncio
async def test_unknown_tool():
    data = payload(await handle_tool_call(make_manager(), "electron_explode", {}))
    assert data == {"success": False, "error": "Unknown tool: electron_explode"}


@pytest.mark.asyncio
async def test_init_server():
    server = await init_server(make_manager())
    assert server.name == "electron-manager"
