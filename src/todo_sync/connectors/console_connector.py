# src/todo_sync/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_result
from ..core.state import AppState
from ..tasks import task_api

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def handle_line(state: AppState, line: str) -> str | None:
    """
    Route one line of input: slash commands go to the registry, plain text adds a task
    (only when logged in). Returns the text to print, or None for nothing.
    """
    line = line.strip()
    if not line:
        return None

    reply = await command_registry.handle(state, line, emit=_print_ts)
    if reply is not None:
        return reply

    if not state.logged_in:
        return "Please log in first: /login <username> <password>"
    return render_result(task_api.add_task(state, line))


async def run_console_loop(state: AppState) -> None:
    """
    Interactive loop on the running event loop.

    input() blocks, so it runs in a worker thread; every command is awaited to
    completion before the next line is read (one remote operation at a time).
    """
    logger.info("Console connector started (remote=%s).", state.sync.state)
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
            _rewrite_prev_line(f"[{_ts_local()}] >>> {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await handle_line(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
