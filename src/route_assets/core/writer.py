"""
Best-effort artifact writing.

Every filesystem step catches its own OSError, records it with the offending
path and returns, so a failed step never prevents the next one from being
attempted. Blocking calls run in a worker thread and are awaited one at a
time.
"""

import asyncio
import json
import time
from pathlib import Path
from typing import Any

from route_assets.core.telemetry import BuildRecorder, WriteStatus, create_event, get_recorder


def _elapsed_ms(start: float) -> float:
    return (time.monotonic() - start) * 1000


async def ensure_directory(path: str | Path, recorder: BuildRecorder | None = None) -> bool:
    """
    Create ``path`` and its parents if missing.

    Returns:
        True if the directory exists afterwards, False if creation failed
    """
    recorder = recorder or get_recorder()
    path = Path(path)
    start = time.monotonic()
    try:
        await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
    except OSError as e:
        recorder.record(
            create_event("directory", str(path), WriteStatus.ERROR, _elapsed_ms(start), error=e)
        )
        return False

    recorder.record(create_event("directory", str(path), WriteStatus.OK, _elapsed_ms(start)))
    return True


async def write_text_file(path: str | Path, text: str, recorder: BuildRecorder | None = None) -> bool:
    """
    Write ``text`` to ``path`` as UTF-8, overwriting any existing file.

    Returns:
        True on success, False if the write failed
    """
    recorder = recorder or get_recorder()
    path = Path(path)
    start = time.monotonic()
    try:
        await asyncio.to_thread(path.write_text, text, encoding="utf-8")
    except OSError as e:
        recorder.record(create_event(path.name, str(path), WriteStatus.ERROR, _elapsed_ms(start), error=e))
        return False

    recorder.record(
        create_event(
            path.name,
            str(path),
            WriteStatus.OK,
            _elapsed_ms(start),
            bytes_written=len(text.encode("utf-8")),
        )
    )
    return True


def dump_json(data: Any, indent: int = 2) -> str:
    """Pretty-print ``data`` as JSON, keeping non-ASCII characters.

    YAML scalars without a JSON type (dates) are written as strings.
    """
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


async def write_json_file(
    path: str | Path,
    data: Any,
    indent: int = 2,
    recorder: BuildRecorder | None = None,
) -> bool:
    """
    Write ``data`` to ``path`` as pretty-printed JSON.

    Returns:
        True on success, False if the write failed
    """
    return await write_text_file(path, dump_json(data, indent), recorder)
