"""``autofold serve``: fold files as the user opens them."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from autofold.cli.commands import connect_ide
from autofold.config.schema import Config
from autofold.display import get_console
from autofold.engine.task import TaskManager
from autofold.ide.bridge import IDEBridge

logger = logging.getLogger(__name__)

# Seconds between connection health checks
RECONNECT_INTERVAL = 2.0


async def run_serve(config: Config, cwd: Path, log_file: Path | None = None) -> int:
    """Stay connected to the IDE and auto-fold until interrupted.

    A lost connection is re-established by re-running discovery; each
    connection gets a fresh TaskManager.
    """
    console = get_console()
    if not config.ide.enabled:
        console.print("[red]Error:[/red] IDE integration is disabled in config")
        return 1

    bridge = IDEBridge(config.ide)
    connection = await connect_ide(bridge, cwd)
    if connection is None:
        return 1

    console.print(f"autofold connected to {connection.ide_info.ide_name}")
    if log_file:
        console.print(f"Log: {log_file}")
    console.print("Press Ctrl+C to stop")

    manager: TaskManager | None = None
    try:
        while True:
            manager = TaskManager(connection, config)
            bridge.attach(manager)
            manager.start()

            while bridge.is_connected:
                await asyncio.sleep(RECONNECT_INTERVAL)

            logger.warning("IDE connection lost")
            bridge.attach(None)
            await manager.stop()
            manager = None

            while not await bridge.reconnect_if_dead(cwd):
                await asyncio.sleep(RECONNECT_INTERVAL)
            assert bridge.connection is not None
            connection = bridge.connection
    finally:
        bridge.attach(None)
        if manager is not None:
            await manager.stop()
        await bridge.disconnect()
