# src/todo_sync/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core import auth
from ..core.state import AppState
from ..sync.orchestrator import Notice
from ..tasks import task_api
from ..tasks.task_api import CommandResult
from ..tasks.task_models import RemoteConfig, SyncFormat, Task

CommandEmitter = Callable[[str], None]
CommandReply = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandReply]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandReply]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._public: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        public: bool = False,
    ) -> None:
        """public=True: usable without being logged in."""
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        keys = [key, *(a.lower() for a in aliases)]
        for k in keys:
            self._handlers[k] = handler
            if public:
                self._public.add(k)

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Handlers may be plain functions or coroutines.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if name not in self._public and not state.logged_in:
            return "Please log in first: /login <username> <password>"

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            reply = h3(state, args, emit)
        else:
            h2 = cast(CommandHandler2, handler)
            reply = h2(state, args)

        if inspect.isawaitable(reply):
            reply = await reply
        return cast(str, reply)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - leave the console (alias: /quit)")
        lines.append("  (plain text adds a task)")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"[{mark}] {task.id}  {task.text}"


def format_tasks(tasks: tuple[Task, ...]) -> str:
    if not tasks:
        return "No tasks."
    return "\n".join(format_task(t) for t in tasks)


def _notice_line(notice: Notice | None) -> str:
    if notice is None:
        return ""
    return f"[{notice.level.value.upper()}] {notice.text}"


def render_result(result: CommandResult, *, show_tasks: bool = True) -> str:
    lines = []
    note = _notice_line(result.notice)
    if note:
        lines.append(note)
    if show_tasks:
        lines.append(format_tasks(result.tasks))
    return "\n".join(lines)


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_login(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /login <username> <password>"
    if not auth.login(state, args[0], args[1]):
        return "Login failed."
    return "Logged in.\n" + format_tasks(state.task_store.snapshot())


def cmd_logout(state: AppState, args: list[str]) -> str:
    auth.logout(state)
    return "Logged out."


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_result(task_api.list_tasks(state))


def cmd_add(state: AppState, args: list[str]) -> str:
    return render_result(task_api.add_task(state, " ".join(args)))


def cmd_toggle(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /toggle <id>"
    return render_result(task_api.toggle_task(state, task_id))


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /delete <id>"
    return render_result(task_api.delete_task(state, task_id))


async def cmd_load(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit is not None and state.sync.config is not None:
        emit(f"Loading tasks from {state.sync.config.location}...")
    return render_result(await task_api.reload_tasks(state))


async def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit is not None and state.sync.config is not None:
        emit(f"Saving tasks to {state.sync.config.location}...")
    return render_result(await task_api.request_remote_save(state), show_tasks=False)


_REMOTE_USAGE = (
    "Usage:\n"
    "  /remote                                   - show the remote target\n"
    "  /remote set <owner> <repo> <path> <token> [structured|flat]\n"
    "  /remote clear                             - disable remote sync"
)


async def cmd_remote(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args or args[0].lower() == "show":
        cfg = state.sync.config
        if cfg is None:
            return "Remote sync: off"
        masked = cfg.token[:4] + "..." if len(cfg.token) > 8 else "***"
        return f"Remote sync: {cfg.location} format={cfg.format.value} token={masked}"

    sub = args[0].lower()
    if sub == "clear":
        return render_result(await task_api.configure_remote(state, None), show_tasks=False)

    if sub != "set" or len(args) not in (5, 6):
        return _REMOTE_USAGE

    owner, repo, path, token = args[1:5]
    try:
        fmt = SyncFormat.parse(args[5]) if len(args) == 6 else SyncFormat.STRUCTURED
        config = RemoteConfig(token=token, owner=owner, repo=repo, path=path, format=fmt)
    except ValueError as e:
        return f"Invalid remote config: {e}"

    if emit is not None:
        emit(f"Loading tasks from {config.location}...")
    return render_result(await task_api.configure_remote(state, config))


def cmd_status(state: AppState, args: list[str]) -> str:
    cfg = state.sync.config
    return (
        "Status:\n"
        f"  tasks: {len(state.task_store)}\n"
        f"  remote: {cfg.location if cfg else 'off'}\n"
        f"  sync: {state.sync.state}\n"
        f"  busy: {'yes' if state.sync.busy else 'no'}\n"
        f"  version: {state.sync.version or '-'}"
    )


registry.register("help", cmd_help, "show this help", aliases=["h", "?"], public=True)
registry.register("login", cmd_login, "log in: /login <username> <password>", public=True)
registry.register("logout", cmd_logout, "log out")
registry.register("list", cmd_list, "list tasks", aliases=["ls"])
registry.register("add", cmd_add, "add a task: /add <text>")
registry.register("toggle", cmd_toggle, "toggle completion: /toggle <id>", aliases=["done"])
registry.register("delete", cmd_delete, "delete a task: /delete <id>", aliases=["del", "rm"])
registry.register("remote", cmd_remote, "show/set/clear the GitHub sync target")
registry.register("load", cmd_load, "reload tasks (remote if configured, else local)", aliases=["reload"])
registry.register("save", cmd_save, "save tasks to the remote file")
registry.register("status", cmd_status, "show sync status")
