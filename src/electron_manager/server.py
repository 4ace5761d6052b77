"""MCP server implementation."""
import asyncio
import dataclasses
import json
from typing import Any, Dict, List

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.models import InitializationOptions
from mcp.server import stdio

from electron_manager import __version__
from electron_manager.config import ManagerConfig, get_log_level
from electron_manager.errors import ElectronManagerError
from electron_manager.logging import configure_logging, get_logger
from electron_manager.manager import ElectronManager
from electron_manager.ui import LoggingUI

logger = get_logger(__name__)

EMPTY_SCHEMA = {"type": "object", "properties": {}}

tools = [
    types.Tool(
        name="electron_install",
        description="Install the latest Electron release unless it is already installed",
        inputSchema=EMPTY_SCHEMA,
    ),
    types.Tool(
        name="electron_upgrade",
        description="Upgrade Electron to the latest release",
        inputSchema=EMPTY_SCHEMA,
    ),
    types.Tool(
        name="electron_installed",
        description="Report the installed Electron executable and its version",
        inputSchema=EMPTY_SCHEMA,
    ),
    types.Tool(
        name="electron_latest",
        description="Resolve the latest published Electron version",
        inputSchema=EMPTY_SCHEMA,
    ),
    types.Tool(
        name="electron_start",
        description="Launch Electron, optionally with an entry file and arguments",
        inputSchema={
            "type": "object",
            "properties": {
                "file": {"type": "string", "description": "Entry file passed as first argument"},
                "args": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Extra command line arguments",
                },
            },
        },
    ),
    types.Tool(
        name="electron_stop",
        description="Terminate the Electron process started by electron_start",
        inputSchema=EMPTY_SCHEMA,
    ),
    types.Tool(
        name="electron_uninstall",
        description="Remove every Electron installation from the installation directory",
        inputSchema=EMPTY_SCHEMA,
    ),
    types.Tool(
        name="electron_cancel",
        description="Cancel an in-flight Electron download",
        inputSchema=EMPTY_SCHEMA,
    ),
]


def _result(payload: Dict[str, Any]) -> List[types.TextContent]:
    return [types.TextContent(type="text", text=json.dumps(payload))]


def _success(data: Any = None) -> List[types.TextContent]:
    return _result({"success": True, "data": data})


def _failure(error: Exception) -> List[types.TextContent]:
    if isinstance(error, ElectronManagerError):
        data = error.to_error_data()
        return _result(
            {"success": False, "error": data.message, "code": data.code, "details": data.data}
        )
    return _result({"success": False, "error": str(error)})


async def handle_tool_call(
    manager: ElectronManager, name: str, arguments: Dict[str, Any]
) -> List[types.TextContent]:
    """Run one tool against the manager and wrap the outcome."""
    try:
        logger.debug("tool_call", name=name, arguments=arguments)

        if name in ("electron_install", "electron_upgrade"):
            await (manager.install() if name == "electron_install" else manager.upgrade())
            installed = await manager.get_installed()
            return _success(dataclasses.asdict(installed) if installed else None)

        elif name == "electron_installed":
            installed = await manager.get_installed()
            return _success(dataclasses.asdict(installed) if installed else None)

        elif name == "electron_latest":
            return _success({"version": await manager.get_latest_release()})

        elif name == "electron_start":
            process = await manager.start(arguments.get("file"), arguments.get("args"))
            if process is None:
                return _result({"success": False, "error": "Electron is not installed"})
            return _success({"pid": process.pid})

        elif name == "electron_stop":
            await manager.stop()
            return _success({"message": "Termination requested"})

        elif name == "electron_uninstall":
            error = await manager.uninstall()
            if error:
                return _failure(error)
            return _success({"message": "Electron uninstalled"})

        elif name == "electron_cancel":
            cancelled = manager.ui.cancel_all() if isinstance(manager.ui, LoggingUI) else 0
            return _success({"cancelled": cancelled})

        return _result({"success": False, "error": f"Unknown tool: {name}"})

    except Exception as e:
        logger.error("tool_call_failed", name=name, error=str(e))
        return _failure(e)


async def init_server(manager: ElectronManager) -> Server:
    logger.info("registered_tools", tools=[t.name for t in tools])

    server = Server("electron-manager")

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        logger.debug("tools_requested")
        return tools

    @server.call_tool()
    async def call_tool(
        name: str, arguments: Dict[str, Any]
    ) -> list[types.TextContent | types.ImageContent | types.EmbeddedResource]:
        return await handle_tool_call(manager, name, arguments or {})

    return server


async def serve() -> None:
    configure_logging(get_log_level())
    config = ManagerConfig.from_env()
    logger.info("starting_server", install_dir=str(config.install_dir))
    manager = ElectronManager(config, ui=LoggingUI())
    server = await init_server(manager)
    async with stdio.stdio_server() as (read_stream, write_stream):
        init_options = InitializationOptions(
            server_name="electron-manager",
            server_version=__version__,
            capabilities=types.ServerCapabilities(
                tools=types.ToolsCapability(listChanged=False),
                logging=types.LoggingCapability(),
            ),
        )
        try:
            await server.run(read_stream, write_stream, init_options)
        finally:
            await manager.stop()


def main() -> None:
    """Run the MCP server."""
    asyncio.run(serve())
