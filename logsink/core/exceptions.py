"""Custom exceptions for the log sink"""


class SinkError(Exception):
    """Base exception for all sink-related errors"""
    pass


class OpenFailureError(SinkError):
    """Log file could not be created or opened"""
    pass


class RenameFailureError(SinkError):
    """Rotation rename could not complete"""
    pass


class DirectoryCreateError(SinkError):
    """Log directory could not be created"""
    pass


class EmptyFileNameError(SinkError):
    """Configured log file name is empty"""
    pass


class SinkOpenError(SinkError):
    """Operation requires a closed sink"""
    pass


class SinkNotOpenError(SinkError):
    """Operation requires an open sink"""
    pass


class WriteFailureError(SinkError):
    """Record could not be written to the log file"""
    pass
