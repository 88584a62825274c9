"""
Structured telemetry for artifact writes.

This module records one event per filesystem step of a build (directory
creation, each artifact write) so a run can be inspected afterwards:
- which artifacts were written and how large they were
- which steps failed and with what error
- how long each step took
"""
import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class WriteStatus(Enum):
    """Outcome of a filesystem step."""
    OK = "ok"
    ERROR = "error"


@dataclass
class WriteEvent:
    """
    A single filesystem step of a build.

    Attributes:
        timestamp: ISO 8601 timestamp of event
        artifact: Artifact name (e.g. "radar-rules.json", or "directory")
        path: Absolute path written
        status: "ok" or "error"
        elapsed_ms: Step duration in milliseconds
        bytes_written: Encoded size of the written text (0 on failure)
        error: Error message when the step failed
    """
    timestamp: str
    artifact: str
    path: str
    status: str
    elapsed_ms: float = 0.0
    bytes_written: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == WriteStatus.OK.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for logging."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def to_json(self) -> str:
        """Convert event to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    def to_keyvalue(self) -> str:
        """Convert event to key=value format."""
        return " ".join(f"{key}={value}" for key, value in self.to_dict().items())


@dataclass
class BuildStats:
    """Aggregated statistics over recorded events."""
    total_steps: int = 0
    failures: int = 0
    bytes_written: int = 0
    total_elapsed_ms: float = 0.0
    failed_paths: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_steps": self.total_steps,
            "failures": self.failures,
            "bytes_written": self.bytes_written,
            "total_elapsed_ms": round(self.total_elapsed_ms, 2),
            "failed_paths": list(self.failed_paths),
        }


class BuildRecorder:
    """
    Records and emits structured events for build filesystem steps.

    Successful steps are logged at INFO and failures at ERROR, both with the
    affected path; the structured event line goes to DEBUG.
    """

    def __init__(self, format_json: bool = True):
        """
        Initialize build recorder.

        Args:
            format_json: If True, log events as JSON; otherwise use key=value
        """
        self.format_json = format_json
        self._stats = BuildStats()
        self._events: List[WriteEvent] = []
        self._lock = threading.Lock()

    def record(self, event: WriteEvent) -> None:
        """
        Record a write event.

        Args:
            event: Event to record
        """
        if event.ok:
            if event.artifact == "directory":
                logger.info("Ensured directory %s", event.path)
            else:
                logger.info("Successfully wrote %s", event.path)
        elif event.artifact == "directory":
            logger.error("Error creating directory %s: %s", event.path, event.error)
        else:
            logger.error("Error writing %s: %s", event.path, event.error)

        logger.debug(event.to_json() if self.format_json else event.to_keyvalue())

        with self._lock:
            self._stats.total_steps += 1
            self._stats.total_elapsed_ms += event.elapsed_ms
            self._stats.bytes_written += event.bytes_written
            if not event.ok:
                self._stats.failures += 1
                self._stats.failed_paths.append(event.path)
            self._events.append(event)

    def get_stats(self) -> BuildStats:
        """Get current statistics snapshot."""
        with self._lock:
            return BuildStats(
                total_steps=self._stats.total_steps,
                failures=self._stats.failures,
                bytes_written=self._stats.bytes_written,
                total_elapsed_ms=self._stats.total_elapsed_ms,
                failed_paths=list(self._stats.failed_paths),
            )

    def get_events(self) -> List[WriteEvent]:
        """Get all recorded events."""
        with self._lock:
            return self._events.copy()

    def clear(self) -> None:
        """Clear events and statistics."""
        with self._lock:
            self._events.clear()
            self._stats = BuildStats()


_global_recorder: Optional[BuildRecorder] = None
_recorder_lock = threading.Lock()


def get_recorder() -> BuildRecorder:
    """
    Get the global build recorder instance.

    Creates a default recorder if none exists.
    """
    global _global_recorder

    if _global_recorder is None:
        with _recorder_lock:
            if _global_recorder is None:
                _global_recorder = BuildRecorder()

    return _global_recorder


def set_recorder(recorder: BuildRecorder) -> None:
    """
    Set the global build recorder instance.

    Args:
        recorder: Recorder instance to use globally
    """
    global _global_recorder

    with _recorder_lock:
        _global_recorder = recorder


def create_event(
    artifact: str,
    path: str,
    status: WriteStatus,
    elapsed_ms: float = 0.0,
    bytes_written: int = 0,
    error: Optional[BaseException] = None,
) -> WriteEvent:
    """
    Helper to create a write event with current timestamp.

    Args:
        artifact: Artifact name
        path: Path written
        status: Step outcome
        elapsed_ms: Step duration in milliseconds
        bytes_written: Size written
        error: Exception raised by the step, if any

    Returns:
        WriteEvent ready for recording
    """
    return WriteEvent(
        timestamp=datetime.now(timezone.utc).isoformat(),
        artifact=artifact,
        path=path,
        status=status.value,
        elapsed_ms=elapsed_ms,
        bytes_written=bytes_written,
        error=str(error) if error is not None else None,
    )
