# src/todo_sync/storage/serializer.py

"""
Task sequence <-> text.

Two formats:
- structured: JSON array, lossless (decode(encode(tasks)) == tasks).
- flat: three marker lines per task ("id: ", "text: ", "completed: ").
  Parsing is permissive and lossy on purpose: a value is the segment between the
  first and second colon, so text containing ":" is truncated, and lines that are
  not recognized are skipped. The flat decoder never raises.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from ..core.errors import ParseError
from ..tasks.task_models import SyncFormat, Task

ID_MARKER = "id:"
TEXT_MARKER = "text:"
COMPLETED_MARKER = "completed:"


def encode(tasks: Iterable[Task], fmt: SyncFormat) -> str:
    if fmt is SyncFormat.FLAT:
        return encode_flat(tasks)
    return encode_structured(tasks)


def decode(text: str, fmt: SyncFormat) -> list[Task]:
    if fmt is SyncFormat.FLAT:
        return decode_flat(text)
    return decode_structured(text)


# ---- structured ----


def encode_structured(tasks: Iterable[Task]) -> str:
    data = [{"id": t.id, "text": t.text, "completed": t.completed} for t in tasks]
    return json.dumps(data, ensure_ascii=False, indent=2)


def _task_from_obj(obj: Any, index: int) -> Task:
    if not isinstance(obj, dict):
        raise ParseError(f"item {index} is not an object")

    tid = obj.get("id")
    # bool is an int subclass; reject it explicitly
    if not isinstance(tid, int) or isinstance(tid, bool):
        raise ParseError(f"item {index} has no integer id")

    text = obj.get("text")
    if not isinstance(text, str):
        raise ParseError(f"item {index} has no text")

    completed = obj.get("completed", False)
    if not isinstance(completed, bool):
        raise ParseError(f"item {index} has a non-boolean completed flag")

    return Task(id=tid, text=text, completed=completed)


def decode_structured(text: str) -> list[Task]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError(f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise ParseError("expected a JSON array of tasks")

    return [_task_from_obj(obj, i) for i, obj in enumerate(data)]


# ---- flat ----


def encode_flat(tasks: Iterable[Task]) -> str:
    blocks = [
        f"{ID_MARKER} {t.id}\n{TEXT_MARKER} {t.text}\n{COMPLETED_MARKER} {'true' if t.completed else 'false'}"
        for t in tasks
    ]
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def _flat_value(line: str) -> str:
    parts = line.split(":")
    value = parts[1] if len(parts) > 1 else ""
    if value.startswith(" "):
        value = value[1:]
    return value


def decode_flat(text: str) -> list[Task]:
    out: list[Task] = []
    current: dict[str, Any] | None = None

    def flush() -> None:
        if current is not None:
            out.append(
                Task(
                    id=current["id"],
                    text=current.get("text", ""),
                    completed=current.get("completed", False),
                )
            )

    for line in (text or "").splitlines():
        if line.startswith(ID_MARKER):
            try:
                tid = int(_flat_value(line).strip())
            except ValueError:
                continue
            flush()
            current = {"id": tid}
        elif current is None:
            continue
        elif line.startswith(TEXT_MARKER):
            current["text"] = _flat_value(line)
        elif line.startswith(COMPLETED_MARKER):
            current["completed"] = _flat_value(line).strip().lower() == "true"

    flush()
    return out
