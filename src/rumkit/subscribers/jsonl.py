"""Append every bus event to a JSON Lines file (RUMKIT_LOG_PATH).

One object per line: {"event": "<EventClass>", <event fields>...}.
Handy for replaying a device session offline.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from rumkit.events import ALL_EVENTS
from rumkit.linker import RumEventLinker


def event_record(event: Any) -> dict[str, Any]:
    return {"event": type(event).__name__, **asdict(event)}


class JsonlSink:
    """Opens the file per write so rotation and concurrent readers just work."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, record: dict[str, Any]) -> None:
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, default=str))
            fh.write("\n")


def register_jsonl_subscriber(path: str | Path) -> JsonlSink:
    sink = JsonlSink(path)

    @RumEventLinker.on(*ALL_EVENTS)
    def _append(event: Any) -> None:
        sink.write(event_record(event))

    return sink
