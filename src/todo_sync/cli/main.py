# src/todo_sync/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads tasks (remote if configured, else
local) and runs the console connector on a single event loop.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..cli.commands import render_result
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks import task_api

logger = logging.getLogger(__name__)


async def _run(state) -> None:
    result = await task_api.reload_tasks(state)
    if result.notice is not None:
        print(render_result(result, show_tasks=False), flush=True)

    if state.settings.console_enabled:
        await run_console_loop(state)
    else:
        logger.info("Console disabled; tasks loaded (%d), nothing else to do.", len(result.tasks))


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
