"""Point-in-time sink statistics"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class SinkStats:
    """Snapshot of a FileSink's state and counters"""
    opened: bool
    path: str
    directory: str
    directory_ready: bool
    max_bytes: int
    current_size: int
    flush_interval_ms: int
    writes: int = 0
    flushes: int = 0
    dropped: int = 0
    open_failures: int = 0
    rotations: int = 0
    failed_rotations: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data
