"""Log file sink and rotation"""

from logsink.sink.file_sink import FileSink
from logsink.sink.rotation import RotationPolicy
from logsink.sink.stats import SinkStats

__all__ = [
    "FileSink",
    "RotationPolicy",
    "SinkStats",
]
